import logging
from decimal import Decimal, InvalidOperation

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, current_user, decode_token, get_jwt
from sqlalchemy.exc import IntegrityError

from hotel_booking import db, limiter
from hotel_booking.auth import admin_required, protect
from hotel_booking.bookings import cancel_booking, create_booking
from hotel_booking.captcha import verify_recaptcha
from hotel_booking.errors import NotFound, ValidationError
from hotel_booking.mailer import send_password_reset_email
from hotel_booking.models import Booking, Role, Room, User, utcnow
from hotel_booking.security import (
    check_password,
    clear_password_reset_token,
    create_password_reset_token,
    hash_reset_token,
    issue_tokens,
    revoke_token,
    set_password,
)

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)

FORGOT_PASSWORD_MESSAGE = 'If an account with that email exists, a password reset link has been sent'


def get_json():
    data = request.get_json(silent=True)
    # Non-object bodies are treated as empty
    return data if isinstance(data, dict) else {}


def user_payload(user):
    return {'id': user.id, 'name': user.name, 'email': user.email, 'role': user.role.value}


def create_user(data, role):
    name, email, password = data.get('name'), data.get('email'), data.get('password')
    if not name or not email or not password:
        raise ValidationError('Please provide name, email and password')

    if User.query.filter_by(email=email).first():
        raise ValidationError('User already exists')

    user = User(name=name, email=email, role=role)
    set_password(user, password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('User already exists')

    logger.info('Registered %s user %s', role.value, user.id)
    return user


def parse_price(value):
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError('Price must be a number')
    if not price.is_finite() or price < 0:
        raise ValidationError('Price must be a positive number')
    return price


def get_room_or_404(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFound('Room not found')
    return room


### AUTH ###

@api.route('/auth/register', methods=['POST'])
def register():
    # Public registration always creates customers
    user = create_user(get_json(), Role.CUSTOMER)
    return jsonify({**user_payload(user), **issue_tokens(user)}), 201


@api.route('/auth/login', methods=['POST'])
def login():
    data = get_json()
    user = User.query.filter_by(email=data.get('email')).first() if data.get('email') else None

    if not user or not check_password(data.get('password'), user.password):
        logger.info('Failed login for %s', data.get('email'))
        return jsonify({'message': 'Invalid email or password'}), 401

    return jsonify({**user_payload(user), **issue_tokens(user)}), 200


@api.route('/auth/register-admin', methods=['POST'])
@protect
@admin_required
def register_admin():
    user = create_user(get_json(), Role.ADMIN)
    return jsonify(user_payload(user)), 201


@api.route('/auth/refresh', methods=['POST'])
@protect(refresh=True)
def refresh():
    return jsonify({'token': create_access_token(identity=str(current_user.id))}), 200


@api.route('/auth/logout', methods=['POST'])
@protect
def logout():
    claims = [get_jwt()]

    refresh_token = get_json().get('refreshToken')
    if refresh_token:
        refresh_claims = decode_token(refresh_token)
        if refresh_claims.get('type') != 'refresh' or refresh_claims.get('sub') != str(current_user.id):
            raise ValidationError('Invalid refresh token')
        claims.append(refresh_claims)

    revoke_token(current_user, *claims)
    return jsonify({'message': 'Logged out'}), 200


@api.route('/auth/forgot-password', methods=['POST'])
@limiter.limit(lambda: current_app.config['FORGOT_PASSWORD_RATE_LIMIT'])
def forgot_password():
    data = get_json()

    if not verify_recaptcha(data.get('recaptchaToken'), request.remote_addr):
        raise ValidationError('reCAPTCHA verification failed')

    email = data.get('email')
    user = User.query.filter_by(email=email).first() if email else None
    if user is None:
        # Same answer as for a known address
        return jsonify({'message': FORGOT_PASSWORD_MESSAGE}), 200

    raw_token = create_password_reset_token(user)
    db.session.commit()
    try:
        send_password_reset_email(user, raw_token)
    except OSError:
        logger.exception('Could not send password reset email to user %s', user.id)
        clear_password_reset_token(user)
        db.session.commit()

    return jsonify({'message': FORGOT_PASSWORD_MESSAGE}), 200


@api.route('/auth/reset-password/<token>', methods=['POST'])
def reset_password(token):
    password = get_json().get('password')
    if not password:
        raise ValidationError('Please provide a new password')

    user = User.query.filter(
        User.reset_password_token == hash_reset_token(token),
        User.reset_password_expires > utcnow(),
    ).first()
    if user is None:
        raise ValidationError('Token is invalid or has expired')

    set_password(user, password)
    clear_password_reset_token(user)
    db.session.commit()

    logger.info('Password reset for user %s', user.id)
    return jsonify({
        'message': 'Password has been reset',
        'token': create_access_token(identity=str(user.id)),
    }), 200


@api.route('/auth/me', methods=['GET'])
@protect
def me():
    return jsonify(current_user.to_dict()), 200


@api.route('/auth/users', methods=['GET'])
@protect
@admin_required
def get_users():
    users = User.query.order_by(User.id).all()
    return jsonify([user.to_dict() for user in users]), 200


### ROOMS ###

@api.route('/rooms', methods=['GET'])
def get_rooms():
    rooms = Room.query.order_by(Room.id).all()
    return jsonify([room.to_dict() for room in rooms]), 200


@api.route('/rooms/<int:room_id>', methods=['GET'])
def get_room(room_id):
    return jsonify(get_room_or_404(room_id).to_dict()), 200


@api.route('/rooms', methods=['POST'])
@protect
@admin_required
def create_room():
    data = get_json()
    if not data.get('roomNumber') or not data.get('type') or data.get('price') is None:
        raise ValidationError('Please provide roomNumber, type and price')

    room = Room(
        room_number=data['roomNumber'],
        type=data['type'],
        price=parse_price(data['price']),
        description=data.get('description'),
        amenities=data.get('amenities') or [],
        images=data.get('images') or [],
    )
    db.session.add(room)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('Room number already exists')

    return jsonify(room.to_dict()), 201


@api.route('/rooms/<int:room_id>', methods=['PUT'])
@protect
@admin_required
def update_room(room_id):
    data = get_json()
    room = get_room_or_404(room_id)

    # Falsy values keep the stored ones, except isAvailable
    room.room_number = data.get('roomNumber') or room.room_number
    room.type = data.get('type') or room.type
    if data.get('price'):
        room.price = parse_price(data['price'])
    room.description = data.get('description') or room.description
    room.amenities = data.get('amenities') or room.amenities
    room.images = data.get('images') or room.images
    if data.get('isAvailable') is not None:
        room.is_available = bool(data['isAvailable'])

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('Room number already exists')

    return jsonify(room.to_dict()), 200


@api.route('/rooms/<int:room_id>', methods=['DELETE'])
@protect
@admin_required
def delete_room(room_id):
    room = get_room_or_404(room_id)
    # Bookings are never deleted, so a room that has any stays
    if Booking.query.filter_by(room_id=room.id).first() is not None:
        raise ValidationError('Room has bookings and cannot be removed; mark it unavailable instead')
    db.session.delete(room)
    db.session.commit()
    logger.info('Room %s removed', room_id)
    return jsonify({'message': 'Room removed'}), 200


### BOOKINGS ###

@api.route('/bookings', methods=['GET'])
@protect
@admin_required
def get_bookings():
    bookings = Booking.query.order_by(Booking.id).all()
    return jsonify([booking.to_dict(include_user=True) for booking in bookings]), 200


@api.route('/bookings/my-bookings', methods=['GET'])
@protect
def get_my_bookings():
    bookings = Booking.query.filter_by(user_id=current_user.id).order_by(Booking.id).all()
    return jsonify([booking.to_dict() for booking in bookings]), 200


@api.route('/bookings', methods=['POST'])
@protect
def post_booking():
    data = get_json()
    booking = create_booking(current_user, data.get('roomId'), data.get('checkIn'), data.get('checkOut'))
    return jsonify(booking.to_dict()), 201


@api.route('/bookings/<int:booking_id>/cancel', methods=['PUT'])
@protect
def put_cancel_booking(booking_id):
    booking = cancel_booking(booking_id, current_user)
    return jsonify(booking.to_dict()), 200
