"""Incident timing helpers: elapsed seconds and on-call shift."""

from __future__ import annotations

from datetime import UTC, datetime

WORKING = "working"
NON_WORKING = "non_working"

# Office hours expressed in UTC, start inclusive, end exclusive.
WORKDAY_START_HOUR = 14
WORKDAY_END_HOUR = 22

# datetime.weekday(): Saturday=5, Sunday=6
NON_WORKING_WEEKDAYS = frozenset({5, 6})


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Naive timestamps are assumed to already be in UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def seconds_since_incident_creation(incident_created_at: str, entry_created_at: str) -> float:
    """Seconds between incident creation and this log entry, never negative.

    Applied to every entry of an incident, not just the resolving one.
    """
    start = parse_timestamp(incident_created_at)
    recent = parse_timestamp(entry_created_at)
    elapsed = (recent - start).total_seconds()
    return elapsed if elapsed >= 0 else 0.0


def is_non_working_day(moment: datetime) -> bool:
    return moment.weekday() in NON_WORKING_WEEKDAYS


def during_office_hours(moment: datetime) -> bool:
    moment = moment.astimezone(UTC)
    if is_non_working_day(moment):
        return False
    return WORKDAY_START_HOUR <= moment.hour < WORKDAY_END_HOUR


def which_shift(incident_created_at: str) -> str:
    """Classify the incident creation time as a working or non-working shift."""
    if during_office_hours(parse_timestamp(incident_created_at)):
        return WORKING
    return NON_WORKING
