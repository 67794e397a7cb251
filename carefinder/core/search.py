"""Category and radius filtering of the facility catalog."""

import logging
import math
from typing import Iterable, List, Optional

from carefinder.core.geo import distance_miles
from carefinder.models import Coordinate, Facility, FilterCriteria, RankedFacility

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CENTER = Coordinate(-73.965, 40.765)
RADIUS_PRESETS_MILES = (1, 5, 10, 25, 50)
CATEGORIES = ("Hospital", "Clinic", "Urgent Care", "Pharmacy")


def filter_by_category(facilities: Iterable[Facility], categories: Iterable[str]) -> List[Facility]:
    """Keep facilities whose category is listed. Uncategorised facilities never match."""
    wanted = set(categories)
    if not wanted:
        return list(facilities)
    return [facility for facility in facilities if facility.category in wanted]


def rank(
    facilities: Iterable[Facility],
    criteria: FilterCriteria,
    reference: Optional[Coordinate] = None,
) -> List[RankedFacility]:
    """Filter facilities and, when a reference is given with a radius, sort them by distance.

    Without a reference (or with a zero radius) the category-filtered order is
    returned as-is and no distance is attached.
    """
    if not math.isfinite(criteria.radius_miles) or criteria.radius_miles < 0:
        raise ValueError("radius_miles must be a finite, non-negative number")

    candidates = filter_by_category(facilities, criteria.categories)

    if reference is None or criteria.radius_miles <= 0:
        return [RankedFacility(facility) for facility in candidates]

    ranked = [RankedFacility(facility, distance_miles(reference, facility.position)) for facility in candidates]
    within = [item for item in ranked if item.distance_miles <= criteria.radius_miles]
    # sorted() is stable, so ties keep catalog order.
    within = sorted(within, key=lambda item: item.distance_miles)

    logger.debug(
        "Ranked %d of %d candidates within %.1f miles of %s",
        len(within),
        len(candidates),
        criteria.radius_miles,
        reference.as_position(),
    )
    return within
