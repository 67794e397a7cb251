"""Reduce a routing-service response to a drawable path plus totals."""

import logging
from typing import Any, Callable, Dict, List, Optional

from carefinder.models import Coordinate, RouteSummary
from carefinder.vendors.location_service import LocationServiceError

logger = logging.getLogger(__name__)


def summarize_route(response: Optional[Dict[str, Any]]) -> Optional[RouteSummary]:
    """Return the first route's path and summary, or None when no route was found.

    Raises LocationServiceError when the first route cannot be read.
    """
    routes = (response or {}).get("Routes") or []
    if not routes:
        return None

    try:
        route = routes[0]
        path: List[Coordinate] = []
        for leg in route.get("Legs") or []:
            line = (leg.get("Geometry") or {}).get("LineString") or []
            path.extend(Coordinate.from_position(point) for point in line)

        summary = route.get("Summary") or {}
        return RouteSummary(
            path=tuple(path),
            distance_meters=float(summary.get("Distance", 0)),
            duration_seconds=float(summary.get("Duration", 0)),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.error("Malformed route in routing response: %s", exc)
        raise LocationServiceError(f"routing service returned malformed route: {exc}") from exc


def fetch_route(
    origin: Coordinate,
    destination: Coordinate,
    calculate_routes: Callable[[Coordinate, Coordinate], Dict[str, Any]],
) -> Optional[RouteSummary]:
    """Issue one routing request and summarise it. Service errors propagate to the caller."""
    response = calculate_routes(origin, destination)
    summary = summarize_route(response)
    if summary is None:
        logger.info("No route found from %s to %s", origin.as_position(), destination.as_position())
    return summary
