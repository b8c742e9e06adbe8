from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from moodease import clock, ledger
from moodease.errors import BadRequest
from moodease.routes import json_body, require_fields
from moodease.security import current_account_id

bp = Blueprint("moods", __name__, url_prefix="/api/moods")


@bp.route("", methods=["GET"])
@jwt_required()
def list_moods():
    window = request.args.get("range")
    since = None
    if window and window != "all":
        if window not in ledger.MOOD_RANGES:
            raise BadRequest("range must be one of: week, month, all")
        since = clock.utcnow() - ledger.MOOD_RANGES[window]

    moods = ledger.list_moods(current_account_id(), since=since)
    return jsonify([m.to_dict() for m in moods])


@bp.route("", methods=["POST"])
@jwt_required()
def create_mood():
    data = json_body()
    require_fields(data, "mood_value", "mood_emoji")

    mood_value = data["mood_value"]
    if isinstance(mood_value, bool) or not isinstance(mood_value, int):
        raise BadRequest("mood_value must be an integer")
    if not ledger.MOOD_VALUE_MIN <= mood_value <= ledger.MOOD_VALUE_MAX:
        raise BadRequest(
            "mood_value must be between %d and %d" % (ledger.MOOD_VALUE_MIN, ledger.MOOD_VALUE_MAX)
        )
    if not isinstance(data["mood_emoji"], str):
        raise BadRequest("mood_emoji must be a string")
    notes = data.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise BadRequest("notes must be a string")

    entry = ledger.log_mood(
        current_account_id(),
        mood_value=mood_value,
        mood_emoji=data["mood_emoji"],
        notes=notes,
    )
    return jsonify(entry.to_dict()), 201


@bp.route("/<int:mood_id>", methods=["DELETE"])
@jwt_required()
def delete_mood(mood_id):
    ledger.delete_mood(current_account_id(), mood_id)
    return jsonify({"message": "Mood deleted"})
