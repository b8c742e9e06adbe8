from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from moodease import ledger
from moodease.security import current_account_id

bp = Blueprint("challenges", __name__, url_prefix="/api/challenges")


@bp.route("", methods=["GET"])
@jwt_required()
def list_challenges():
    challenges = ledger.list_challenges(current_account_id())
    return jsonify([c.to_dict() for c in challenges])


@bp.route("/catalog", methods=["GET"])
@jwt_required()
def catalog():
    return jsonify({"challenges": ledger.CHALLENGE_TYPES, "badges": ledger.BADGES})


# The body (streak_count, last_completed, badges) sent by older clients is
# ignored: the streak, badges and completion time are computed here.
@bp.route("/<int:challenge_id>", methods=["PUT"])
@jwt_required()
def complete_challenge(challenge_id):
    challenge = ledger.complete_challenge(current_account_id(), challenge_id)
    return jsonify(challenge.to_dict())
