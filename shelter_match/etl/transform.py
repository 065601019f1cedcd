"""Utilities for transforming directory records into presentation fields."""

import logging
import math
from typing import Any, Dict, Optional, Tuple

from shelter_match.engine.hours import BusinessHours
from shelter_match.models import OrganizationRecord

logger = logging.getLogger(__name__)

_CONTACT_FIELDS = (
    ("phone", "phone_number"),
    ("website", "website"),
    ("email", "email"),
)


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_coordinates(org: OrganizationRecord) -> Optional[Tuple[float, float]]:
    """Return ``(lat, lng)`` when both are present and numeric."""
    latitude = _safe_float(org.get("latitude"))
    longitude = _safe_float(org.get("longitude"))
    if latitude is None or longitude is None:
        return None
    return latitude, longitude


def format_address(org: OrganizationRecord) -> str:
    full_address = _strip_or_none(org.get("full_address"))
    if full_address:
        return full_address

    state_zip = " ".join(filter(None, (_strip_or_none(org.get("state")), _strip_or_none(org.get("zipcode")))))
    parts = [_strip_or_none(org.get("address")), _strip_or_none(org.get("city")), state_zip or None]
    return ", ".join(part for part in parts if part)


def to_contact_info(org: OrganizationRecord) -> Dict[str, Optional[str]]:
    return {key: _strip_or_none(org.get(source)) for key, source in _CONTACT_FIELDS}


def to_service_details(org: OrganizationRecord, hours: BusinessHours) -> Dict[str, Any]:
    return {
        "type": org.get("type"),
        "hours": dict(hours.schedule),
        "description": org.get("description"),
    }
