import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from moodease.models import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Failure that is reported to the client as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(APIError):
    status_code = 400


class Unauthorized(APIError):
    status_code = 401


class Forbidden(APIError):
    status_code = 403


class NotFound(APIError):
    status_code = 404


class Conflict(APIError):
    status_code = 409


class AccountConflict(Conflict):
    # register and profile update report taken emails/usernames as 400
    status_code = 400


def error_response(message, status_code):
    return jsonify({"error": message}), status_code


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(error):
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error while serving request")
        db.session.rollback()
        return error_response("Internal server error", 500)
