# hotel_booking/models.py
import enum
import math
from datetime import datetime, timezone

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from hotel_booking import db


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_timestamp(value):
    return int(value.replace(tzinfo=timezone.utc).timestamp())


class Role(enum.Enum):
    ADMIN = 'admin'
    CUSTOMER = 'customer'


class BookingStatus(enum.Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class User(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password = db.Column(db.String(100), nullable=False)  # bcrypt hash
    role = db.Column(
        db.Enum(Role, name='user_role', values_callable=_enum_values),
        nullable=False,
        default=Role.CUSTOMER,
    )
    reset_password_token = db.Column(db.String(64), index=True)  # sha256 hex
    reset_password_expires = db.Column(db.DateTime)
    password_changed_at = db.Column(db.DateTime)

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'


class Room(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    room_number = db.Column(db.String(10), unique=True, nullable=False)
    type = db.Column(db.String(50), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text)
    amenities = db.Column(db.JSON, nullable=False, default=list)
    is_available = db.Column(db.Boolean, nullable=False, default=True)
    images = db.Column(db.JSON, nullable=False, default=list)

    def summary(self):
        return {
            'id': self.id,
            'roomNumber': self.room_number,
            'type': self.type,
            'price': float(self.price),
        }

    def to_dict(self):
        data = self.summary()
        data.update({
            'description': self.description,
            'amenities': self.amenities or [],
            'isAvailable': self.is_available,
            'images': self.images or [],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        })
        return data


class Booking(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False, index=True)
    check_in = db.Column(db.DateTime, nullable=False)
    check_out = db.Column(db.DateTime, nullable=False)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(
        db.Enum(BookingStatus, name='booking_status', values_callable=_enum_values),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    user = db.relationship('User', backref=db.backref('bookings', lazy=True))
    room = db.relationship('Room', backref=db.backref('bookings', lazy=True))

    @property
    def nights(self):
        return math.ceil((self.check_out - self.check_in).total_seconds() / 86400)

    def calculate_total_price(self, room):
        self.total_price = self.nights * room.price
        return self.total_price

    def to_dict(self, include_user=False):
        data = {
            'id': self.id,
            'user': self.user_id,
            'room': self.room.summary() if self.room else self.room_id,
            'checkIn': self.check_in.isoformat(),
            'checkOut': self.check_out.isoformat(),
            'totalPrice': float(self.total_price),
            'status': self.status.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user and self.user is not None:
            data['user'] = {'id': self.user.id, 'name': self.user.name, 'email': self.user.email}
        return data


class TokenBlacklist(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False)  # jti
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @classmethod
    def is_revoked(cls, jti):
        return cls.query.filter(cls.token == jti, cls.expires_at > utcnow()).first() is not None

    @classmethod
    def purge_expired(cls, now=None):
        """Delete records whose token has expired anyway; returns how many went."""
        return cls.query.filter(cls.expires_at <= (now or utcnow())).delete(synchronize_session=False)


@event.listens_for(Session, 'before_flush')
def recalculate_booking_prices(session, flush_context, instances):
    # total_price follows the dates, whoever changed them
    with session.no_autoflush:
        for obj in list(session.new) + list(session.dirty):
            if not isinstance(obj, Booking):
                continue
            state = inspect(obj)
            dates_changed = (
                state.attrs.check_in.history.has_changes()
                or state.attrs.check_out.history.has_changes()
            )
            if obj.total_price is not None and not dates_changed:
                continue
            room = obj.room or session.get(Room, obj.room_id)
            if room is not None and obj.check_in and obj.check_out:
                obj.calculate_total_price(room)
