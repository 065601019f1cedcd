"""Core data models shared by the matching and ranking engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from shelter_match.core.config import DEFAULT_RADIUS_MILES

logger = logging.getLogger(__name__)

OrganizationRecord = Dict[str, Any]


@dataclass(frozen=True)
class RequesterPreferences:
    """What the requester is looking for.

    ``user_location`` is only set for geo-anchored queries; every other
    criterion that depends on a preference is skipped when it is missing.
    """

    service_needs: Tuple[str, ...] = ()
    type: Optional[str] = None
    radius: float = DEFAULT_RADIUS_MILES
    user_location: Optional[Tuple[float, float]] = None

    @classmethod
    def from_params(
        cls,
        service_needs: Union[str, Iterable[str], None] = None,
        type: Optional[str] = None,
        radius: Any = None,
        default_radius: float = DEFAULT_RADIUS_MILES,
    ) -> "RequesterPreferences":
        """Build preferences from loosely typed query parameters.

        ``service_needs`` may be a comma separated string or an iterable of
        tags. Blank tags are dropped and duplicates collapsed.
        """
        if isinstance(service_needs, str):
            raw_needs: Iterable[str] = service_needs.split(",")
        else:
            raw_needs = service_needs or ()

        needs = []
        for need in raw_needs:
            cleaned = str(need).strip()
            if cleaned and cleaned not in needs:
                needs.append(cleaned)

        parsed_radius = default_radius
        if radius is not None and radius != "":
            try:
                parsed_radius = float(radius)
            except (TypeError, ValueError):
                logger.debug("Ignoring invalid radius %r", radius)

        return cls(
            service_needs=tuple(needs),
            type=(type or "").strip() or None,
            radius=parsed_radius,
        )

    def with_location(self, lat: float, lng: float) -> "RequesterPreferences":
        return RequesterPreferences(
            service_needs=self.service_needs,
            type=self.type,
            radius=self.radius,
            user_location=(float(lat), float(lng)),
        )

    def to_criteria(self) -> Dict[str, Any]:
        return {
            "serviceNeeds": list(self.service_needs),
            "type": self.type,
            "radius": self.radius,
        }


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float = 0
    total_ratings: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"averageRating": self.average_rating, "totalRatings": self.total_ratings}


ZERO_RATING = RatingSummary()


@dataclass(frozen=True)
class CriterionResult:
    """Points one criterion adds to the denominator and the numerator."""

    possible: float = 0
    earned: float = 0


NOT_APPLICABLE = CriterionResult()


@dataclass(frozen=True)
class ScoreBreakdown:
    total_possible: float
    earned: float
    percentage: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "totalPossible": self.total_possible,
            "earned": self.earned,
            "percentage": self.percentage,
        }


@dataclass(slots=True)
class ScoredOrganization:
    """A directory record enriched with its match score and display fields."""

    record: OrganizationRecord = field(repr=False)
    match_score: float
    match_score_details: ScoreBreakdown
    formatted_address: str
    contact_info: Dict[str, Optional[str]]
    service_details: Dict[str, Any]
    distance_in_miles: Optional[float] = None
    rating: RatingSummary = ZERO_RATING

    @property
    def id(self) -> Optional[str]:
        value = self.record.get("id")
        return None if value is None else str(value)

    def to_dict(self) -> Dict[str, Any]:
        """Render the JSON shape returned to callers."""
        data = dict(self.record)
        data["matchScore"] = self.match_score
        data["matchScoreDetails"] = self.match_score_details.to_dict()
        if self.distance_in_miles is not None:
            data["distanceInMiles"] = self.distance_in_miles
        data["formattedAddress"] = self.formatted_address
        data["contactInfo"] = dict(self.contact_info)
        data["serviceDetails"] = {
            **self.service_details,
            "hours": dict(self.service_details.get("hours") or {}),
        }
        data["rating"] = self.rating.to_dict()
        return data
