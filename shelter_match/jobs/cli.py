"""CLI job that runs a shelter search and prints the ranked results as JSON."""

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from shelter_match.core.config import get_settings
from shelter_match.engine.filters import AVAILABILITY_CHOICES, apply_filters
from shelter_match.jobs import search
from shelter_match.models import RequesterPreferences

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find and rank shelters and food banks")
    parser.add_argument(
        "search",
        nargs="?",
        help="Zipcode ('12345'), coordinates ('40.71,-74.00') or 'City, State'",
    )
    parser.add_argument("--id", dest="organization_id", help="Score a single organization by directory id")
    parser.add_argument(
        "--need",
        dest="service_needs",
        action="append",
        default=[],
        help="Service need to match against descriptions (repeatable or comma separated)",
    )
    parser.add_argument("--type", dest="type", help="Organization type to prefer")
    parser.add_argument("--only-type", dest="filter_type", help="Keep only results of this organization type")
    parser.add_argument(
        "--radius",
        dest="radius",
        type=float,
        help="Search radius in miles for coordinate searches (defaults to DEFAULT_RADIUS_MILES)",
    )
    parser.add_argument("--min-score", dest="min_match_score", type=float, help="Minimum match score to keep")
    parser.add_argument("--min-rating", dest="min_rating", type=float, help="Minimum average rating to keep")
    parser.add_argument("--availability", choices=AVAILABILITY_CHOICES, help="Keep only open or closed results")
    return parser


def _preferences_from_args(args: argparse.Namespace) -> RequesterPreferences:
    needs: List[str] = []
    for value in args.service_needs:
        needs.extend(value.split(","))
    return RequesterPreferences.from_params(
        service_needs=needs,
        type=args.type,
        radius=args.radius,
        default_radius=get_settings().default_radius,
    )


async def run(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    prefs = _preferences_from_args(args)

    if args.organization_id:
        result = await search.get_by_id(args.organization_id, prefs)
        return result.to_dict() if result is not None else None

    if not args.search:
        raise ValueError("Search parameter is required")

    results = await search.search_results(args.search, prefs)
    results = apply_filters(
        results,
        type=args.filter_type,
        availability=args.availability,
        min_match_score=args.min_match_score,
        min_rating=args.min_rating,
    )
    return search.build_response(args.search, prefs, results)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    try:
        payload = asyncio.run(run(args))
    except ValueError as exc:
        parser.error(str(exc))

    if payload is None:
        logger.error("Organization %s not found", args.organization_id)
        raise SystemExit(1)
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
