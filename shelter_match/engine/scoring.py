"""Multi-criteria fitness scoring for directory organizations.

Every criterion is a pure function returning a ``CriterionResult``. A
criterion that does not apply to the query returns ``NOT_APPLICABLE`` so it
adds nothing to either side of the ratio; the final score is therefore only
relative to the criteria that meant something for this requester.
"""

from __future__ import annotations

import logging
import numbers
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Sequence

from shelter_match.core.config import DEFAULT_WEIGHTS, ScoringWeights
from shelter_match.engine.geo import haversine_miles
from shelter_match.engine.hours import BusinessHours, parse_business_hours
from shelter_match.etl.transform import (
    format_address,
    parse_coordinates,
    to_contact_info,
    to_service_details,
)
from shelter_match.models import (
    NOT_APPLICABLE,
    CriterionResult,
    OrganizationRecord,
    RequesterPreferences,
    ScoreBreakdown,
    ScoredOrganization,
)

logger = logging.getLogger(__name__)

Criterion = Callable[[OrganizationRecord, RequesterPreferences, ScoringWeights], CriterionResult]


def round2(value: float) -> float:
    """Round half-up to two decimals."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _clamp(earned: float, budget: float) -> CriterionResult:
    return CriterionResult(possible=budget, earned=min(max(earned, 0.0), budget))


def distance_to(org: OrganizationRecord, prefs: RequesterPreferences) -> Optional[float]:
    """Miles between the requester and the organization, if both are located."""
    if prefs.user_location is None:
        return None
    coords = parse_coordinates(org)
    if coords is None:
        return None
    user_lat, user_lng = prefs.user_location
    return haversine_miles(user_lat, user_lng, coords[0], coords[1])


def distance_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    miles = distance_to(org, prefs)
    if miles is None:
        return NOT_APPLICABLE
    return _clamp(weights.distance - weights.miles_penalty * miles, weights.distance)


def type_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    if not prefs.type:
        return NOT_APPLICABLE
    earned = weights.type_match if org.get("type") == prefs.type else 0.0
    return _clamp(earned, weights.type_match)


def availability_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    hours = parse_business_hours(org.get("business_hours"))
    return _clamp(weights.availability if hours.is_open else 0.0, weights.availability)


def _embedded_average_rating(org: OrganizationRecord) -> Optional[float]:
    snapshot = org.get("rating")
    if not isinstance(snapshot, dict):
        return None
    value = snapshot.get("averageRating")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return float(value)


def reputation_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    average = _embedded_average_rating(org)
    if average is None or not 0 <= average <= weights.max_rating:
        return NOT_APPLICABLE
    return _clamp(average / weights.max_rating * weights.reputation, weights.reputation)


def contact_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    present = sum(1 for value in to_contact_info(org).values() if value)
    # An organization publishing no contact channel at all is not penalised.
    if not present:
        return NOT_APPLICABLE
    return _clamp(present * weights.points_per_contact, weights.contact)


def service_needs_criterion(
    org: OrganizationRecord, prefs: RequesterPreferences, weights: ScoringWeights
) -> CriterionResult:
    needs = [need.lower() for need in prefs.service_needs if need]
    if not needs:
        return NOT_APPLICABLE
    description = str(org.get("description") or "").lower()
    matched = sum(1 for need in needs if description and need in description)
    return _clamp(matched / len(needs) * weights.service_needs, weights.service_needs)


CRITERIA: Sequence[Criterion] = (
    distance_criterion,
    type_criterion,
    availability_criterion,
    reputation_criterion,
    contact_criterion,
    service_needs_criterion,
)


def fold_criteria(results: Sequence[CriterionResult]) -> ScoreBreakdown:
    total_possible = sum(result.possible for result in results)
    earned = round2(sum(result.earned for result in results))
    percentage = round2(earned / total_possible * 100) if total_possible > 0 else 0.0
    return ScoreBreakdown(
        total_possible=total_possible,
        earned=earned,
        percentage=min(max(percentage, 0.0), 100.0),
    )


def score_organization(
    org: OrganizationRecord,
    prefs: RequesterPreferences,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    criteria: Sequence[Criterion] = CRITERIA,
) -> ScoredOrganization:
    """Score one directory record against the requester's preferences.

    The returned object carries the zero rating; the assembler merges the
    reputation store's figures afterwards.
    """
    breakdown = fold_criteria([criterion(org, prefs, weights) for criterion in criteria])

    miles = distance_to(org, prefs)
    hours: BusinessHours = parse_business_hours(org.get("business_hours"))

    logger.debug(
        "Scored %s: earned=%s possible=%s", org.get("id"), breakdown.earned, breakdown.total_possible
    )
    return ScoredOrganization(
        record=org,
        match_score=breakdown.percentage,
        match_score_details=breakdown,
        formatted_address=format_address(org),
        contact_info=to_contact_info(org),
        service_details=to_service_details(org, hours),
        distance_in_miles=round2(miles) if miles is not None else None,
    )
