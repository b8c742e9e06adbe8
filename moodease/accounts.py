"""Credential store: the only code that reads or writes the ``user`` table."""

import logging

from sqlalchemy.exc import IntegrityError

from moodease.errors import AccountConflict, NotFound
from moodease.models import User, db
from moodease.security import check_password, hash_password

logger = logging.getLogger(__name__)


def find_by_email(email):
    return User.query.filter_by(email=email).first()


def get_account(account_id):
    account = db.session.get(User, account_id)
    if account is None:
        raise NotFound("User not found")
    return account


def create_account(username, email, password):
    """Store a new account and return its public fields.

    Raises AccountConflict when the email or the username is already registered.
    The unique constraints on ``user`` close the gap between the check and the insert.
    """
    _ensure_available(email=email, username=username)

    account = User(username=username, email=email, password=hash_password(password))
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # lost a race with a concurrent registration; report which field collided
        _ensure_available(email=email, username=username)
        raise

    logger.info("Registered account %s (%s)", account.id, account.username)
    return account.to_profile()


def verify_password(account, candidate):
    if account is None:
        return False
    return check_password(account.password, candidate)


def update_username(account_id, new_username):
    account = get_account(account_id)
    if account.username == new_username:
        return account

    taken = User.query.filter(User.username == new_username, User.id != account_id).first()
    if taken is not None:
        raise AccountConflict("Username already taken")

    account.username = new_username
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise AccountConflict("Username already taken")
    return account


def _ensure_available(email, username):
    if find_by_email(email) is not None:
        raise AccountConflict("Email already taken")
    if User.query.filter_by(username=username).first() is not None:
        raise AccountConflict("Username already taken")
