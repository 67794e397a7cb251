"""Utilities for transforming location service payloads into model objects."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from carefinder.models import Address, Coordinate, Facility, GeocodeMatch, RankedFacility

logger = logging.getLogger(__name__)

_ADDRESS_FIELDS = {
    "Street": "street",
    "Municipality": "city",
    "Region": "region",
    "PostalCode": "postal_code",
    "Country": "country",
}


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def parse_address(raw: Dict[str, Any]) -> Address:
    label = _strip_or_none((raw or {}).get("Label"))
    if not label:
        raise ValueError("address Label is required")
    extras = {name: _strip_or_none(raw.get(key)) for key, name in _ADDRESS_FIELDS.items()}
    number = _strip_or_none(raw.get("AddressNumber"))
    if number and extras["street"]:
        extras["street"] = f"{number} {extras['street']}"
    return Address(label=label, **extras)


def to_facility(raw: Dict[str, Any]) -> Facility:
    """Build a Facility from a place record (service or catalog shape)."""
    facility_id = _strip_or_none(raw.get("PlaceId"))
    title = _strip_or_none(raw.get("Title"))
    if not facility_id or not title:
        raise ValueError(f"place record requires PlaceId and Title: {raw!r}")

    return Facility(
        facility_id=facility_id,
        title=title,
        address=parse_address(raw.get("Address") or {}),
        position=Coordinate.from_position(raw.get("Position")),
        category=_strip_or_none(raw.get("category")),
        specialty=_strip_or_none(raw.get("specialty")),
        phone=_strip_or_none(raw.get("phoneNumber")),
        hours=_strip_or_none(raw.get("hours")),
    )


def parse_geocode_results(payload: Dict[str, Any]) -> List[GeocodeMatch]:
    matches: List[GeocodeMatch] = []
    for item in (payload or {}).get("ResultItems") or []:
        position = item.get("Position")
        if not position:
            logger.debug("Skipping geocode item without Position: %s", item)
            continue
        label = _strip_or_none((item.get("Address") or {}).get("Label")) or _strip_or_none(item.get("Title"))
        matches.append(GeocodeMatch(position=Coordinate.from_position(position), label=label))
    return matches


def parse_suggestions(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    suggestions: List[Dict[str, Any]] = []
    for item in (payload or {}).get("ResultItems") or []:
        title = _strip_or_none(item.get("Title"))
        if not title:
            continue
        suggestions.append(
            {
                "place_id": item.get("PlaceId"),
                "title": title,
                "label": _strip_or_none((item.get("Address") or {}).get("Label")),
                "position": item.get("Position"),
            }
        )
    return suggestions


def to_facility_row(facility: Facility, distance_miles: Optional[float] = None) -> Dict[str, Any]:
    address = facility.address
    return {
        "id": facility.facility_id,
        "title": facility.title,
        "address": {
            "label": address.label,
            "street": address.street,
            "city": address.city,
            "region": address.region,
            "postal_code": address.postal_code,
            "country": address.country,
        },
        "position": facility.position.as_position(),
        "category": facility.category,
        "specialty": facility.specialty,
        "phone": facility.phone,
        "hours": facility.hours,
        "distance_miles": distance_miles,
    }


def ranked_rows(ranked: Iterable[RankedFacility]) -> List[Dict[str, Any]]:
    return [to_facility_row(item.facility, item.distance_miles) for item in ranked]
