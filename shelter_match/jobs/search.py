"""Query-shape entry points for the matching engine.

Zipcode, geo and city/state searches only differ in how the directory is
queried; all of them go through the same scoring and assembly pipeline.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

from shelter_match.core.config import get_settings
from shelter_match.engine import assembler
from shelter_match.models import RequesterPreferences, ScoredOrganization
from shelter_match.vendors import shelter_directory

logger = logging.getLogger(__name__)

_ZIPCODE_RE = re.compile(r"^\d{5}$")
_LAT_LNG_RE = re.compile(r"^-?\d+(\.\d+)?,-?\d+(\.\d+)?$")
_CITY_STATE_RE = re.compile(r"^([A-Za-z\s]+),\s*([A-Za-z\s]+)$")


def _prefs_or_default(prefs: Optional[RequesterPreferences]) -> RequesterPreferences:
    if prefs is not None:
        return prefs
    return RequesterPreferences(radius=get_settings().default_radius)


async def search_by_zipcode(
    zipcode: str, prefs: Optional[RequesterPreferences] = None
) -> List[ScoredOrganization]:
    if not zipcode or not str(zipcode).strip():
        raise ValueError("zipcode must be provided")
    prefs = _prefs_or_default(prefs)

    logger.info("Searching directory by zipcode=%s", zipcode)
    raw_orgs = await asyncio.to_thread(shelter_directory.fetch_by_zipcode, str(zipcode).strip())
    return await assembler.assemble(raw_orgs, prefs)


async def search_by_location(
    lat: float,
    lng: float,
    radius: Optional[float] = None,
    prefs: Optional[RequesterPreferences] = None,
) -> List[ScoredOrganization]:
    """Search around a point; the point also drives distance scoring."""
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError) as exc:
        raise ValueError("lat and lng must be numeric") from exc

    prefs = _prefs_or_default(prefs)
    if radius is None:
        radius = prefs.radius
    prefs = prefs.with_location(lat, lng)

    logger.info("Searching directory by location lat=%s lng=%s radius=%s", lat, lng, radius)
    raw_orgs = await asyncio.to_thread(shelter_directory.fetch_by_location, lat, lng, radius)
    return await assembler.assemble(raw_orgs, prefs)


async def search_by_state_city(
    state: str, city: str, prefs: Optional[RequesterPreferences] = None
) -> List[ScoredOrganization]:
    if not state or not city:
        raise ValueError("state and city must both be provided")
    prefs = _prefs_or_default(prefs)

    logger.info("Searching directory by state=%s city=%s", state, city)
    raw_orgs = await asyncio.to_thread(shelter_directory.fetch_by_state_city, state, city)
    return await assembler.assemble(raw_orgs, prefs)


async def get_by_id(
    organization_id: str, prefs: Optional[RequesterPreferences] = None
) -> Optional[ScoredOrganization]:
    """Score a single organization; ``None`` when the directory has no such id."""
    if organization_id is None or not str(organization_id).strip():
        raise ValueError("organization_id must be provided")
    prefs = _prefs_or_default(prefs)

    raw_org = await asyncio.to_thread(shelter_directory.fetch_by_id, str(organization_id))
    if raw_org is None:
        logger.info("Organization %s not found in directory", organization_id)
        return None
    return await assembler.assemble_one(raw_org, prefs)


async def search_results(
    text: str, prefs: Optional[RequesterPreferences] = None
) -> List[ScoredOrganization]:
    """Dispatch a free-text search to the matching query shape.

    Accepts a 5 digit zipcode, ``"<lat>,<lng>"`` or ``"<city>, <state>"``.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ValueError("Search parameter is required")
    prefs = _prefs_or_default(prefs)

    if _ZIPCODE_RE.match(trimmed):
        return await search_by_zipcode(trimmed, prefs)
    if _LAT_LNG_RE.match(trimmed):
        lat, lng = (float(part) for part in trimmed.split(","))
        return await search_by_location(lat, lng, prefs.radius, prefs)
    if _CITY_STATE_RE.match(trimmed):
        city, state = (part.strip() for part in trimmed.split(","))
        return await search_by_state_city(state, city, prefs)
    raise ValueError("Invalid search format. Please use 'zipcode', 'lat,lng', or 'city,state'")


def build_response(
    text: str, prefs: RequesterPreferences, results: List[ScoredOrganization]
) -> Dict[str, Any]:
    return {
        "results": [item.to_dict() for item in results],
        "count": len(results),
        "searchCriteria": {"search": (text or "").strip(), **prefs.to_criteria()},
    }


async def search(text: str, prefs: Optional[RequesterPreferences] = None) -> Dict[str, Any]:
    prefs = _prefs_or_default(prefs)
    results = await search_results(text, prefs)
    return build_response(text, prefs, results)
