"""Error taxonomy for the API and the Flask handlers that render it.

Every failure a handler can report maps to one ApiError subclass. The
handlers registered here turn those into JSON bodies of the form
``{"message": ...}`` or, for field validation, ``{"errors": [...]}``.
"""
import logging

from flask import jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(ApiError):
    status_code = 400

    def __init__(self, errors, message='Validation failed'):
        super().__init__(message)
        self.errors = errors

    def to_dict(self):
        return {'errors': self.errors}


class ConflictError(ApiError):
    # The original API answered duplicates with 400, clients rely on it
    status_code = 400


class AuthError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ServerError(ApiError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error("Server error: %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'message': error.description or error.name}), error.code

    @app.errorhandler(PyMongoError)
    def handle_database_error(error):
        logger.exception("Database error")
        return jsonify({'message': 'Server error'}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error")
        return jsonify({'message': 'Server error'}), 500
