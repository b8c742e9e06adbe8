"""Wall-clock helpers and calendar-day arithmetic.

All timestamps are stored naive in UTC. A "calendar day" is the 00:00-24:00
window of the zone named by the ``DAY_TIMEZONE`` setting.
"""

from datetime import datetime, time, timezone

import pytz
from flask import current_app


def utcnow():
    """Current instant as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_zone():
    return pytz.timezone(current_app.config["DAY_TIMEZONE"])


def calendar_day(moment, zone=None):
    """Calendar day (a ``date``) that the naive-UTC ``moment`` falls on."""
    zone = zone or day_zone()
    return pytz.utc.localize(moment).astimezone(zone).date()


def start_of_day(moment, zone=None):
    """Naive-UTC instant at which the calendar day containing ``moment`` began."""
    zone = zone or day_zone()
    midnight = zone.localize(datetime.combine(calendar_day(moment, zone), time.min))
    return midnight.astimezone(pytz.utc).replace(tzinfo=None)


def isoformat(moment):
    if moment is None:
        return None
    return pytz.utc.localize(moment).isoformat()
