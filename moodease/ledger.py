"""Daily-action ledger: mood entries and challenge streaks, once per calendar day.

Every admission check is backed by the store itself. Mood entries carry a
unique ``(user_id, logged_on)`` pair, challenge rows a unique
``(user_id, challenge_type)`` pair, and streak increments are a single
conditional UPDATE, so concurrent requests cannot both pass a check.
"""

import logging
from datetime import timedelta

from sqlalchemy import func, or_, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from moodease import clock
from moodease.errors import Conflict, NotFound
from moodease.models import Challenge, MoodEntry, db

logger = logging.getLogger(__name__)

CHALLENGE_TYPES = [
    {
        "id": "daily_mood",
        "title": "Daily Mood Log",
        "description": "Track your mood every day",
        "icon": "📊",
    },
    {
        "id": "gratitude",
        "title": "Gratitude Practice",
        "description": "Write 3 things you are grateful for",
        "icon": "🙏",
    },
    {
        "id": "breathing",
        "title": "Breathing Exercise",
        "description": "Complete a breathing session",
        "icon": "🌬️",
    },
    {
        "id": "meditation",
        "title": "Meditation",
        "description": "Meditate for 5 minutes",
        "icon": "🧘",
    },
]

BADGES = [
    {"name": "First Step", "icon": "🌱", "threshold": 1},
    {"name": "Getting Started", "icon": "🌿", "threshold": 3},
    {"name": "Building Momentum", "icon": "🌳", "threshold": 7},
    {"name": "Consistent", "icon": "⭐", "threshold": 14},
    {"name": "Dedicated", "icon": "💫", "threshold": 30},
    {"name": "Champion", "icon": "🏆", "threshold": 60},
]

MOOD_RANGES = {"week": timedelta(days=7), "month": timedelta(days=30)}
MOOD_VALUE_MIN, MOOD_VALUE_MAX = 1, 5


def badges_for(streak):
    return [badge["name"] for badge in BADGES if badge["threshold"] <= streak]


# -------------------- MOODS --------------------

def list_moods(account_id, since=None):
    query = MoodEntry.query.filter(MoodEntry.user_id == account_id)
    if since is not None:
        query = query.filter(MoodEntry.created_at >= since)
    return query.order_by(MoodEntry.created_at.desc(), MoodEntry.id.desc()).all()


def log_mood(account_id, mood_value, mood_emoji, notes=None):
    """Record today's mood for the account, or raise Conflict if one exists."""
    now = clock.utcnow()
    zone = clock.day_zone()
    today = clock.calendar_day(now, zone)

    latest = (
        MoodEntry.query.filter_by(user_id=account_id)
        .order_by(MoodEntry.created_at.desc())
        .first()
    )
    if latest is not None and clock.calendar_day(latest.created_at, zone) == today:
        raise Conflict("Mood already logged today")

    entry = MoodEntry(
        user_id=account_id,
        mood_value=mood_value,
        mood_emoji=mood_emoji,
        notes=notes,
        created_at=now,
        logged_on=today,
    )
    db.session.add(entry)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Mood already logged today")

    logger.info("Account %s logged mood %s for %s", account_id, mood_value, today)
    return entry


def delete_mood(account_id, mood_id):
    deleted = MoodEntry.query.filter_by(id=mood_id, user_id=account_id).delete()
    if not deleted:
        db.session.rollback()
        raise NotFound("Mood not found or not authorized")
    db.session.commit()


# -------------------- CHALLENGES --------------------

def ensure_challenges(account_id):
    """Create the fixed challenge rows for the account if any are missing."""
    existing = (
        db.session.query(func.count(Challenge.id))
        .filter(Challenge.user_id == account_id)
        .scalar()
    )
    if existing >= len(CHALLENGE_TYPES):
        return

    rows = [
        {"user_id": account_id, "challenge_type": kind["id"], "streak_count": 0, "badges": []}
        for kind in CHALLENGE_TYPES
    ]
    dialect = db.engine.dialect.name
    if dialect in ("postgresql", "sqlite"):
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(Challenge).on_conflict_do_nothing(
            index_elements=["user_id", "challenge_type"]
        )
        db.session.execute(stmt, rows)
    else:
        for row in rows:
            try:
                with db.session.begin_nested():
                    db.session.add(Challenge(**row))
            except IntegrityError:
                pass
    db.session.commit()
    logger.info("Initialised challenges for account %s", account_id)


def list_challenges(account_id):
    ensure_challenges(account_id)
    order = {kind["id"]: index for index, kind in enumerate(CHALLENGE_TYPES)}
    challenges = Challenge.query.filter_by(user_id=account_id).all()
    return sorted(challenges, key=lambda c: (order.get(c.challenge_type, len(order)), c.id))


def complete_challenge(account_id, challenge_id):
    """Advance the challenge's streak by one for today.

    The streak grows by exactly one per completed calendar day, however many
    days were skipped. A second completion on the same day raises Conflict.
    """
    challenge = Challenge.query.filter_by(id=challenge_id, user_id=account_id).first()
    if challenge is None:
        raise NotFound("Challenge not found or not authorized")

    now = clock.utcnow()
    today_start = clock.start_of_day(now)
    if challenge.last_completed is not None and challenge.last_completed >= today_start:
        raise Conflict("Challenge already completed today")

    if not _advance_streak(challenge.id, account_id, challenge.streak_count, now, today_start):
        raise Conflict("Challenge already completed today")

    db.session.refresh(challenge)
    logger.info(
        "Account %s completed %s, streak now %s",
        account_id, challenge.challenge_type, challenge.streak_count,
    )
    return challenge


def _advance_streak(challenge_id, account_id, seen_streak, now, today_start):
    """Bump the streak only if the row still holds ``seen_streak`` and is not done today.

    Returns False when no row matched, i.e. another request got there first.
    """
    new_streak = seen_streak + 1
    stmt = (
        update(Challenge)
        .where(
            Challenge.id == challenge_id,
            Challenge.user_id == account_id,
            Challenge.streak_count == seen_streak,
            or_(Challenge.last_completed.is_(None), Challenge.last_completed < today_start),
        )
        .values(streak_count=new_streak, last_completed=now, badges=badges_for(new_streak))
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    if result.rowcount != 1:
        db.session.rollback()
        return False
    db.session.commit()
    return True
