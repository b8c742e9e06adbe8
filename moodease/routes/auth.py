import logging

from flask import Blueprint, jsonify

from moodease import accounts
from moodease.errors import BadRequest
from moodease.routes import json_body, require_fields
from moodease.security import issue_token

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _require_strings(data, *fields):
    require_fields(data, *fields)
    for field in fields:
        if not isinstance(data[field], str):
            raise BadRequest(field + " must be a string")


@bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    _require_strings(data, "username", "email", "password")

    profile = accounts.create_account(data["username"], data["email"], data["password"])
    token = issue_token(profile["id"])

    return jsonify({"token": token, "profile": profile})


@bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    _require_strings(data, "email", "password")

    account = accounts.find_by_email(data["email"])
    if not accounts.verify_password(account, data["password"]):
        logger.warning("Failed login for %s", data["email"])
        return jsonify({"error": "Invalid credentials"}), 401

    logger.info("Account %s logged in", account.id)
    return jsonify({"token": issue_token(account.id), "profile": account.to_profile()})
