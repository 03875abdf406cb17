"""Password hashing, JWT issuance and password-reset tokens."""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token

from hotel_booking import db
from hotel_booking.models import TokenBlacklist, utcnow

# Backdated so a token issued in the same second as the change stays valid.
PASSWORD_CHANGE_MARGIN = timedelta(seconds=1)


def hash_password(password):
    rounds = current_app.config['BCRYPT_ROUNDS']
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(password, hashed):
    if not password or not hashed:
        return False
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))


def set_password(user, password):
    """Hash and store a new password, invalidating tokens issued before now."""
    user.password = hash_password(password)
    user.password_changed_at = utcnow() - PASSWORD_CHANGE_MARGIN


def issue_tokens(user):
    identity = str(user.id)
    return {
        'token': create_access_token(identity=identity),
        'refreshToken': create_refresh_token(identity=identity),
    }


def hash_reset_token(raw_token):
    return hashlib.sha256(raw_token.encode('utf-8')).hexdigest()


def create_password_reset_token(user):
    """Store the hash of a fresh reset token on the user and return the raw one."""
    raw_token = secrets.token_hex(32)
    user.reset_password_token = hash_reset_token(raw_token)
    user.reset_password_expires = utcnow() + current_app.config['PASSWORD_RESET_EXPIRES']
    return raw_token


def clear_password_reset_token(user):
    user.reset_password_token = None
    user.reset_password_expires = None


def revoke_token(user, *claims):
    """Blacklist each token described by ``claims`` until it would have expired."""
    for token_claims in claims:
        if TokenBlacklist.is_revoked(token_claims['jti']):
            continue
        expires_at = datetime.fromtimestamp(token_claims['exp'], timezone.utc).replace(tzinfo=None)
        db.session.add(TokenBlacklist(token=token_claims['jti'], user_id=user.id, expires_at=expires_at))
    purged = TokenBlacklist.purge_expired()
    db.session.commit()
    return purged
