"""Booking engine: date validation, availability and pricing."""
import logging
from datetime import datetime, time, timezone

from hotel_booking import db
from hotel_booking.errors import Forbidden, NotFound, ValidationError
from hotel_booking.models import Booking, BookingStatus, Room, utcnow

logger = logging.getLogger(__name__)


def parse_date(value):
    """Parse an ISO date or datetime into a naive UTC datetime, or return None."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def find_conflicting_booking(room_id, check_in, check_out):
    # Adjacent stays (check-out day == check-in day) count as a conflict.
    return Booking.query.filter(
        Booking.room_id == room_id,
        Booking.status == BookingStatus.CONFIRMED,
        Booking.check_in <= check_out,
        Booking.check_out >= check_in,
    ).first()


def create_booking(user, room_id, check_in, check_out, today=None):
    """Validate the stay, check availability, price it and save it as confirmed.

    There is no lock between the availability query and the insert, so two
    concurrent requests for the same dates can both succeed.
    """
    check_in_date = parse_date(check_in)
    check_out_date = parse_date(check_out)
    if check_in_date is None or check_out_date is None:
        raise ValidationError('Invalid date format. Please use YYYY-MM-DD format')

    today = today or utcnow().date()
    if check_in_date < datetime.combine(today, time.min):
        raise ValidationError('Check-in date must be in the future')

    if check_out_date <= check_in_date:
        raise ValidationError('Check-out date must be after check-in date')

    room = _get_room(room_id)
    if room is None:
        raise NotFound('Room not found')

    existing = find_conflicting_booking(room.id, check_in_date, check_out_date)
    if existing is not None:
        logger.info('Room %s unavailable: conflicts with booking %s', room.id, existing.id)
        raise ValidationError('Room is already booked for these dates')

    booking = Booking(
        user_id=user.id,
        room=room,
        check_in=check_in_date,
        check_out=check_out_date,
        status=BookingStatus.CONFIRMED,
    )
    booking.calculate_total_price(room)
    db.session.add(booking)
    db.session.commit()

    logger.info('Booking %s created for room %s by user %s', booking.id, room.id, user.id)
    return booking


def cancel_booking(booking_id, acting_user):
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFound('Booking not found')

    if booking.user_id != acting_user.id and not acting_user.is_admin:
        logger.warning('User %s tried to cancel booking %s', acting_user.id, booking.id)
        raise Forbidden('Not authorized')

    booking.status = BookingStatus.CANCELLED
    db.session.commit()

    logger.info('Booking %s cancelled by user %s', booking.id, acting_user.id)
    return booking


def _get_room(room_id):
    try:
        return db.session.get(Room, int(room_id))
    except (TypeError, ValueError):
        return None
