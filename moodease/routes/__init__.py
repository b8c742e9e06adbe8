from flask import request

from moodease.errors import BadRequest


def json_body():
    """Request JSON object, or an empty dict when the body is absent or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_fields(data, *fields):
    missing = [f for f in fields if data.get(f) is None or data.get(f) == ""]
    if missing:
        raise BadRequest("Missing required fields: " + ", ".join(missing))


def register_blueprints(app):
    from moodease.routes.auth import bp as auth_bp
    from moodease.routes.challenges import bp as challenges_bp
    from moodease.routes.moods import bp as moods_bp
    from moodease.routes.posts import bp as posts_bp
    from moodease.routes.profile import bp as profile_bp

    for bp in (auth_bp, moods_bp, challenges_bp, posts_bp, profile_bp):
        app.register_blueprint(bp)
