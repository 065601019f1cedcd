"""Score, rank and enrich directory results."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from shelter_match.core.config import DEFAULT_WEIGHTS, ScoringWeights, get_settings
from shelter_match.core.reputation import get_average_rating
from shelter_match.engine.scoring import score_organization
from shelter_match.models import (
    ZERO_RATING,
    OrganizationRecord,
    RatingSummary,
    RequesterPreferences,
    ScoredOrganization,
)

logger = logging.getLogger(__name__)

RatingLookup = Callable[[str], Awaitable[RatingSummary]]


async def _guarded_lookup(
    organization_id: str, rating_lookup: RatingLookup, semaphore: asyncio.Semaphore
) -> RatingSummary:
    async with semaphore:
        try:
            summary = await rating_lookup(organization_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Rating lookup raised for %s: %s", organization_id, exc)
            return ZERO_RATING
    if not isinstance(summary, RatingSummary):
        logger.warning("Rating lookup for %s returned %r; using zero", organization_id, summary)
        return ZERO_RATING
    return summary


async def fetch_ratings(
    organization_ids: Iterable[str],
    rating_lookup: RatingLookup = get_average_rating,
    concurrency: Optional[int] = None,
) -> Dict[str, RatingSummary]:
    """Look up every distinct id concurrently; failures map to zero per id."""
    unique_ids = list(dict.fromkeys(organization_ids))
    if not unique_ids:
        return {}

    semaphore = asyncio.Semaphore(concurrency or get_settings().rating_lookup_concurrency)
    summaries = await asyncio.gather(
        *(_guarded_lookup(organization_id, rating_lookup, semaphore) for organization_id in unique_ids)
    )
    return dict(zip(unique_ids, summaries))


def score_all(
    raw_orgs: Iterable[OrganizationRecord],
    prefs: RequesterPreferences,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> List[ScoredOrganization]:
    """Score records in input order, then stable-sort by descending score."""
    scored: List[ScoredOrganization] = []
    for org in raw_orgs or []:
        if not isinstance(org, dict):
            logger.warning("Skipping non-object directory entry: %r", org)
            continue
        scored.append(score_organization(org, prefs, weights))
    scored.sort(key=lambda item: item.match_score, reverse=True)
    return scored


async def assemble(
    raw_orgs: Iterable[OrganizationRecord],
    prefs: RequesterPreferences,
    rating_lookup: RatingLookup = get_average_rating,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> List[ScoredOrganization]:
    scored = score_all(raw_orgs, prefs, weights)
    ratings = await fetch_ratings(
        (item.id for item in scored if item.id is not None),
        rating_lookup=rating_lookup,
    )
    logger.info("Assembled %d organizations (%d rating lookups)", len(scored), len(ratings))
    return [replace(item, rating=ratings.get(item.id, ZERO_RATING)) for item in scored]


async def assemble_one(
    raw_org: Optional[OrganizationRecord],
    prefs: RequesterPreferences,
    rating_lookup: RatingLookup = get_average_rating,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[ScoredOrganization]:
    if not raw_org:
        return None
    results = await assemble([raw_org], prefs, rating_lookup=rating_lookup, weights=weights)
    return results[0] if results else None
