"""Authorization gate.

``protect`` authenticates the bearer token and resolves the user;
``admin_required`` runs afterwards and re-reads the role from the database
rather than trusting the user loaded for the request.
"""
import logging
from functools import wraps

from flask import jsonify
from flask_jwt_extended import current_user, get_jwt, verify_jwt_in_request
from sqlalchemy.exc import SQLAlchemyError

from hotel_booking import db
from hotel_booking.models import Role, TokenBlacklist, User, to_timestamp

logger = logging.getLogger(__name__)


def _unauthorized(message):
    return jsonify({'message': message}), 401


def register_jwt_callbacks(jwt):

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data['sub'])
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(_jwt_header, jwt_payload):
        return TokenBlacklist.is_revoked(jwt_payload['jti'])

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized('Not authorized - No token')

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.info('Rejected invalid token: %s', reason)
        return _unauthorized('Not authorized - Invalid token')

    @jwt.expired_token_loader
    def expired_token(_jwt_header, jwt_payload):
        return _unauthorized('Not authorized - Token expired')

    @jwt.revoked_token_loader
    def revoked_token(_jwt_header, jwt_payload):
        return _unauthorized('Not authorized - Token has been revoked')

    @jwt.user_lookup_error_loader
    def user_not_found(_jwt_header, jwt_data):
        logger.warning('Token for unknown user %s', jwt_data.get('sub'))
        return _unauthorized('Not authorized - user not found')


def _issued_before_password_change(user, claims):
    if user.password_changed_at is None:
        return False
    return claims['iat'] < to_timestamp(user.password_changed_at)


def protect(fn=None, refresh=False):
    """Require a valid token for a user that still exists."""
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request(refresh=refresh)
            if _issued_before_password_change(current_user, get_jwt()):
                logger.info('Token for user %s predates password change', current_user.id)
                return _unauthorized('Token expired due to password change. Please login again.')
            return view(*args, **kwargs)
        return wrapper

    if fn is not None:
        return decorator(fn)
    return decorator


def admin_required(fn):
    """Allow only admins. Must sit below ``protect``."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            role = db.session.query(User.role).filter(User.id == current_user.id).scalar()
        except SQLAlchemyError:
            logger.exception('Could not verify admin status for user %s', current_user.id)
            db.session.rollback()
            return jsonify({'message': 'Error verifying admin status'}), 500
        if role != Role.ADMIN:
            logger.warning('User %s denied admin access', current_user.id)
            return jsonify({'message': 'Not authorized as admin'}), 403
        return fn(*args, **kwargs)
    return wrapper
