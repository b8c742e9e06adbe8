"""Password hashing, session tokens and the bearer-token gate."""

import logging

from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager, create_access_token, get_jwt_identity

from moodease.errors import Forbidden, Unauthorized, error_response

logger = logging.getLogger(__name__)

bcrypt = Bcrypt()
jwt = JWTManager()


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode("utf-8")


def check_password(password_hash, candidate):
    return bcrypt.check_password_hash(password_hash, candidate)


def issue_token(account_id):
    """Signed bearer token for ``account_id``, valid for JWT_ACCESS_TOKEN_EXPIRES."""
    return create_access_token(identity=str(account_id))


def current_account_id():
    """Account id of the request's verified token. Use inside ``@jwt_required()``."""
    return int(get_jwt_identity())


@jwt.unauthorized_loader
def _missing_token(reason):
    return error_response("Authorization token required", Unauthorized.status_code)


@jwt.invalid_token_loader
def _invalid_token(reason):
    logger.warning("Rejected invalid token: %s", reason)
    return error_response("Invalid token", Forbidden.status_code)


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    logger.warning("Rejected expired token for account %s", jwt_payload.get("sub"))
    return error_response("Token has expired", Forbidden.status_code)
