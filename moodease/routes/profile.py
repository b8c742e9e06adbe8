from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from sqlalchemy import func

from moodease import accounts, clock
from moodease.errors import BadRequest
from moodease.models import Challenge, CommunityPost, MoodEntry, db
from moodease.routes import json_body, require_fields
from moodease.security import current_account_id

bp = Blueprint("profile", __name__, url_prefix="/api/profile")


def _count(column, *criteria):
    return db.session.query(func.count(column)).filter(*criteria).scalar()


@bp.route("", methods=["GET"])
@jwt_required()
def get_profile():
    account = accounts.get_account(current_account_id())
    profile = account.to_profile()
    profile["created_at"] = clock.isoformat(account.created_at)
    return jsonify(profile)


@bp.route("/stats", methods=["GET"])
@jwt_required()
def stats():
    account = accounts.get_account(current_account_id())

    return jsonify({
        "username": account.username,
        "created_at": clock.isoformat(account.created_at),
        "totalMoods": _count(MoodEntry.id, MoodEntry.user_id == account.id),
        "totalChallenges": _count(
            Challenge.id,
            Challenge.user_id == account.id,
            Challenge.last_completed.isnot(None),
        ),
        "totalPosts": _count(CommunityPost.id, CommunityPost.user_id == account.id),
    })


@bp.route("", methods=["PUT"])
@jwt_required()
def update_profile():
    data = json_body()
    require_fields(data, "username")
    if not isinstance(data["username"], str):
        raise BadRequest("username must be a string")

    account = accounts.update_username(current_account_id(), data["username"])
    return jsonify({"username": account.username})
