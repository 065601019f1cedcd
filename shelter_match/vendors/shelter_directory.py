"""Client utilities for the homeless shelters and food banks directory API."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from shelter_match.core.config import get_settings
from shelter_match.models import OrganizationRecord

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class DirectoryError(RuntimeError):
    """Raised when the directory cannot be reached or answers with garbage."""


def _request(path: str, params: Optional[Dict[str, Any]] = None) -> Any:
    settings = get_settings()
    headers = {
        "x-rapidapi-key": settings.rapidapi_key,
        "x-rapidapi-host": settings.directory_host,
    }
    url = f"https://{settings.directory_host}{path}"
    try:
        response = _SESSION.get(url, params=params, headers=headers, timeout=settings.request_timeout)
    except requests.RequestException as exc:
        raise DirectoryError(f"directory request failed: {exc}") from exc

    if response.status_code == 404:
        return None
    if response.status_code >= 400:
        logger.error("Directory request failed: status=%s path=%s", response.status_code, path)
        raise DirectoryError(f"directory returned HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise DirectoryError("Failed to parse response body") from exc


def _fetch_list(params: Dict[str, Any]) -> List[OrganizationRecord]:
    try:
        payload = _request("/resources", params=params)
    except DirectoryError as exc:
        logger.warning("Directory lookup failed for %s: %s", params, exc)
        return []

    if payload is None:
        return []
    if not isinstance(payload, list):
        logger.warning("Directory returned a non-list payload for %s: %s", params, str(payload)[:200])
        return []

    records = [item for item in payload if isinstance(item, dict)]
    if len(records) != len(payload):
        logger.debug("Dropped %d non-object entries from directory payload", len(payload) - len(records))
    return records


def fetch_by_zipcode(zipcode: str) -> List[OrganizationRecord]:
    return _fetch_list({"zipcode": zipcode})


def fetch_by_location(lat: float, lng: float, radius: float) -> List[OrganizationRecord]:
    return _fetch_list({"latitude": lat, "longitude": lng, "radius": radius})


def fetch_by_state_city(state: str, city: str) -> List[OrganizationRecord]:
    return _fetch_list({"state": state, "city": city})


def fetch_by_id(organization_id: str) -> Optional[OrganizationRecord]:
    """Return one directory record, or ``None`` when missing or unreachable."""
    if organization_id is None or not str(organization_id).strip():
        raise ValueError("organization_id must be provided for directory lookups.")

    path = f"/resources/{quote(str(organization_id).strip(), safe='')}"
    try:
        payload = _request(path)
    except DirectoryError as exc:
        logger.warning("Directory lookup failed for id=%s: %s", organization_id, exc)
        return None

    if isinstance(payload, list):
        payload = payload[0] if len(payload) == 1 else None
    if not isinstance(payload, dict) or not payload:
        return None
    return payload
