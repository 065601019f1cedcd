"""Post-ranking filters over scored results."""

from typing import Iterable, List, Optional

from shelter_match.engine.hours import has_posted_hours
from shelter_match.models import ScoredOrganization

AVAILABILITY_CHOICES = ("open", "closed")


def apply_filters(
    results: Iterable[ScoredOrganization],
    *,
    type: Optional[str] = None,
    availability: Optional[str] = None,
    min_match_score: Optional[float] = None,
    min_rating: Optional[float] = None,
) -> List[ScoredOrganization]:
    """Drop results that fail any of the given filters, keeping order."""
    if availability and availability not in AVAILABILITY_CHOICES:
        raise ValueError(f"availability must be one of {', '.join(AVAILABILITY_CHOICES)}")

    kept: List[ScoredOrganization] = []
    for item in results:
        if type and item.service_details.get("type") != type:
            continue
        if availability:
            is_open = has_posted_hours(item.service_details.get("hours") or {})
            if (availability == "open") != is_open:
                continue
        if min_match_score and item.match_score < min_match_score:
            continue
        if min_rating and min_rating > 0 and item.rating.average_rating < min_rating:
            continue
        kept.append(item)
    return kept
