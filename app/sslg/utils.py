"""
Utilities for SSLG.

18-10-2026
"""

import json
import uuid

import pytz

from datetime import datetime
from app.config import TIMEZONE


# -- JSON manipulation --


def to_json(d: dict):
    return json.dumps(d, sort_keys=True, default=str)


def from_json(value):
    if value == "" or value is None:
        return None

    if isinstance(value, str):
        try:
            return json.loads(value)
        except Exception as e:
            raise Exception(
                "sslg.utils error: in from_json, value is not JSON parseable"
            ) from e

    return value


# -- Form values --


def clean_name(value: str | None) -> str | None:
    """
    Trim a name field; blank names come back as None so callers can reject them.
    """
    if value is None:
        return None
    value = value.strip()
    return value or None


def new_uuid() -> str:
    return str(uuid.uuid4())


# -- Datetime --
def tz_now():
    tz = pytz.timezone(TIMEZONE)
    return datetime.now(tz)


# -- Panel grouping --


def group_by_partylist(partylists, candidates) -> list[dict]:
    """
    Candidates of every partylist grouped by position, for the admin panel.
    Partylists without candidates are kept with empty groups.
    """
    grouped = {party.id: {"partylist": party, "positions": {}, "total": 0} for party in partylists}
    for candidate in candidates:
        group = grouped.get(candidate.partylist_id)
        if group is None:
            continue
        position = getattr(candidate.position, "value", candidate.position)
        group["positions"].setdefault(position, []).append(candidate)
        group["total"] += 1
    return list(grouped.values())
