# hotel_booking/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from hotel_booking import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500
    message = 'Server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self):
        return jsonify({'message': self.message}), self.status_code


class ValidationError(APIError):
    status_code = 400
    message = 'Invalid request'


class Unauthorized(APIError):
    status_code = 401
    message = 'Not authorized'


class Forbidden(APIError):
    status_code = 403
    message = 'Forbidden'


class NotFound(APIError):
    status_code = 404
    message = 'Not found'


def register_error_handlers(app):

    @app.errorhandler(APIError)
    def handle_api_error(error):
        return error.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception('Unhandled error')
        db.session.rollback()
        return jsonify({'message': 'Server error', 'error': str(error)}), 500
