from flask_sqlalchemy import SQLAlchemy

from moodease import clock

db = SQLAlchemy()


def _now():
    return clock.utcnow()


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_now)

    def to_profile(self):
        return {"id": self.id, "username": self.username, "email": self.email}


class MoodEntry(db.Model):
    __table_args__ = (
        db.UniqueConstraint("user_id", "logged_on", name="uq_mood_entry_user_day"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    mood_value = db.Column(db.Integer, nullable=False)
    mood_emoji = db.Column(db.String(32), nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=_now)
    # calendar day of created_at in the configured zone
    logged_on = db.Column(db.Date, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "mood_value": self.mood_value,
            "mood_emoji": self.mood_emoji,
            "notes": self.notes,
            "created_at": clock.isoformat(self.created_at),
        }


class Challenge(db.Model):
    __table_args__ = (
        db.UniqueConstraint("user_id", "challenge_type", name="uq_challenge_user_type"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    challenge_type = db.Column(db.String(50), nullable=False)
    streak_count = db.Column(db.Integer, nullable=False, default=0)
    last_completed = db.Column(db.DateTime)
    badges = db.Column(db.JSON, nullable=False, default=list)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "challenge_type": self.challenge_type,
            "streak_count": self.streak_count,
            "last_completed": clock.isoformat(self.last_completed),
            "badges": list(self.badges or []),
        }


class CommunityPost(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    reactions = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, nullable=False, default=_now)

    author = db.relationship("User", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.author.username if self.author else None,
            "content": self.content,
            "reactions": dict(self.reactions or {}),
            "created_at": clock.isoformat(self.created_at),
        }
