"""Parse the free-text weekly schedule published by the shelter directory."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

CLOSED = "Closed"
_SEPARATOR = ": "


@dataclass(frozen=True)
class BusinessHours:
    """Day -> hours mapping plus a coarse availability flag.

    ``is_open`` only says that some day is not marked ``Closed``. It is not
    evaluated against the current time.
    """

    is_open: bool = False
    schedule: Dict[str, str] = field(default_factory=dict)


def has_posted_hours(schedule: Mapping[str, str]) -> bool:
    """True when at least one day is not marked ``Closed``."""
    return any(value != CLOSED for value in schedule.values())


def parse_business_hours(raw: Optional[str]) -> BusinessHours:
    """Split ``"<Day>: <hours>"`` lines into a schedule.

    Values are kept as published. Lines without a ``": "`` separator, or with
    an empty day or value, are skipped. Anything other than a string yields an
    empty schedule.
    """
    if not isinstance(raw, str):
        if raw is not None:
            logger.debug("Ignoring non-text business hours: %r", raw)
        return BusinessHours()
    if not raw:
        return BusinessHours()

    schedule: Dict[str, str] = {}
    for line in raw.splitlines():
        day, sep, value = line.strip().partition(_SEPARATOR)
        day = day.strip()
        value = value.strip()
        if not sep or not day or not value:
            if line.strip():
                logger.debug("Skipping malformed business hours line: %r", line)
            continue
        schedule[day] = value

    return BusinessHours(is_open=has_posted_hours(schedule), schedule=schedule)
