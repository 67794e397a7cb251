"""HTTP entrypoint exposing facility search, directions and place autocomplete."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Any, Dict, Optional

import requests
from flask import Flask, jsonify, request

from carefinder.core.catalog import FacilityCatalog, load_catalog
from carefinder.core.config import get_settings
from carefinder.core.routes import fetch_route
from carefinder.core.search import DEFAULT_SEARCH_CENTER, rank
from carefinder.etl.transform import parse_suggestions, ranked_rows
from carefinder.models import Coordinate, FilterCriteria
from carefinder.vendors import location_service
from carefinder.vendors.location_service import LocationServiceError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)


@lru_cache(maxsize=1)
def get_catalog() -> FacilityCatalog:
    return load_catalog(get_settings().facilities_path)


def _parse_coordinate(raw: Any, field: str) -> Coordinate:
    try:
        return Coordinate.from_position(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"{field} must be a [longitude, latitude] pair within range") from exc


# ---------- Routes ----------


@app.get("/healthz")
def healthcheck() -> Any:
    return jsonify({"status": "ok", "facilities": len(get_catalog())}), 200


@app.post("/search")
def search() -> Any:
    """
    Filter and rank catalog facilities.
    Optional JSON fields: reference ([lng, lat]), radius_miles (float), categories (list of str)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        reference = (
            _parse_coordinate(payload["reference"], "reference")
            if payload.get("reference") is not None
            else DEFAULT_SEARCH_CENTER
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        radius = float(payload.get("radius_miles") or 0)
    except (TypeError, ValueError):
        return jsonify({"error": "radius_miles must be numeric"}), 400
    if not math.isfinite(radius) or radius < 0:
        return jsonify({"error": "radius_miles must be a finite, non-negative number"}), 400

    categories_raw = payload.get("categories") or []
    if not isinstance(categories_raw, list) or not all(isinstance(c, str) for c in categories_raw):
        return jsonify({"error": "categories must be a list of strings"}), 400

    criteria = FilterCriteria(radius_miles=radius, categories=frozenset(categories_raw))
    ranked = rank(get_catalog().all(), criteria, reference)
    logger.info("Search returned %d facilities (radius=%s, categories=%s)", len(ranked), radius, categories_raw)

    return jsonify({"data": {"center": reference.as_position(), "facilities": ranked_rows(ranked)}}), 200


@app.post("/directions")
def directions() -> Any:
    """
    Driving directions from an origin to a catalog facility.
    Required JSON fields: origin ([lng, lat]), facility_id
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    facility_id = payload.get("facility_id")
    if not facility_id or payload.get("origin") is None:
        return jsonify({"error": "origin and facility_id are required"}), 400
    try:
        origin = _parse_coordinate(payload["origin"], "origin")
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    facility = get_catalog().get(str(facility_id))
    if facility is None:
        return jsonify({"error": f"unknown facility: {facility_id}"}), 404

    settings = get_settings()

    def _calculate(start: Coordinate, end: Coordinate) -> Dict[str, Any]:
        return location_service.calculate_routes(
            start,
            end,
            base_url=settings.location_api_base_url,
            api_key=settings.location_api_key,
            timeout=settings.request_timeout_seconds,
        )

    try:
        summary = fetch_route(origin, facility.position, _calculate)
    except LocationServiceError as exc:
        return jsonify({"error": f"routing service error: {exc}"}), 502
    except requests.RequestException as exc:
        logger.warning("Routing request failed for %s: %s", facility_id, exc)
        return jsonify({"error": "routing service unreachable"}), 504

    if summary is None:
        return jsonify({"error": "no route found"}), 404

    return jsonify({"data": {"facility_id": facility.facility_id, **summary.to_dict()}}), 200


@app.get("/autocomplete")
def autocomplete() -> Any:
    query = (request.args.get("q") or "").strip()
    if not query:
        return jsonify({"error": "q is required"}), 400
    try:
        max_results = int(request.args.get("max", "5"))
    except ValueError:
        return jsonify({"error": "max must be numeric"}), 400

    settings = get_settings()
    try:
        payload = location_service.autocomplete(
            query,
            base_url=settings.location_api_base_url,
            api_key=settings.location_api_key,
            max_results=max_results,
            timeout=settings.request_timeout_seconds,
        )
    except LocationServiceError as exc:
        return jsonify({"error": f"autocomplete service error: {exc}"}), 502
    except requests.RequestException:
        return jsonify({"error": "autocomplete service unreachable"}), 504

    return jsonify({"data": parse_suggestions(payload)}), 200


def main(port: Optional[int] = None) -> None:
    port = port or get_settings().server_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
