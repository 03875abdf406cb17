# hotel_booking/mailer.py
import logging

from flask import current_app
from flask_mail import Message

from hotel_booking import mail

logger = logging.getLogger(__name__)


def send_password_reset_email(user, raw_token):
    reset_url = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password/{raw_token}"
    message = Message(
        subject='Password reset request',
        recipients=[user.email],
        body=(
            f'Hello {user.name},\n\n'
            'We received a request to reset your password. '
            f'Use the link below within the next hour:\n\n{reset_url}\n\n'
            'If you did not request this, you can ignore this email.'
        ),
    )
    mail.send(message)
    logger.info('Password reset email sent to user %s', user.id)
