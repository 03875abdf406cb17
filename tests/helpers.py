from datetime import date, timedelta
from types import SimpleNamespace

from hotel_booking import db
from hotel_booking.models import Role, Room, User
from hotel_booking.security import issue_tokens, set_password


def day(offset):
    return (date.today() + timedelta(days=offset)).isoformat()


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


def make_user(app, email, role=Role.CUSTOMER, password='secret123', name='Test User'):
    with app.app_context():
        user = User(name=name, email=email, role=role)
        set_password(user, password)
        db.session.add(user)
        db.session.commit()
        tokens = issue_tokens(user)
        return SimpleNamespace(
            id=user.id,
            email=email,
            password=password,
            token=tokens['token'],
            refresh_token=tokens['refreshToken'],
            headers=auth_headers(tokens['token']),
        )


def make_room(app, room_number='101', price=100, **kwargs):
    with app.app_context():
        room = Room(room_number=room_number, type=kwargs.pop('type', 'double'), price=price, **kwargs)
        db.session.add(room)
        db.session.commit()
        return room.id
