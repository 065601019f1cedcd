"""Average-rating lookups against the ratings store."""

import asyncio
import logging
from typing import Optional

from shelter_match.core import db
from shelter_match.models import ZERO_RATING, RatingSummary

logger = logging.getLogger(__name__)


def load_average_rating(organization_id: str) -> RatingSummary:
    """Blocking lookup; raises on database errors."""
    average, total = db.fetch_rating_stats(organization_id)
    return RatingSummary(average_rating=round(average, 2), total_ratings=total)


async def get_average_rating(organization_id: Optional[str]) -> RatingSummary:
    """Return the rating summary for an organization, or the zero default.

    Never raises: an unreachable store or a bad row resolves to zero.
    """
    if not organization_id:
        return ZERO_RATING
    try:
        return await asyncio.to_thread(load_average_rating, organization_id)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Rating lookup failed for %s: %s", organization_id, exc)
        return ZERO_RATING
