"""Batch cross-check of stored facility coordinates against the geocoding service.

Facilities are geocoded one at a time with a fixed pause between requests so the
run never has more than one request in flight. Every failure is converted into a
``ValidationResult``; the batch itself never raises because of a single facility.
"""

import logging
import time
from typing import Callable, Iterable, List, Sequence

import requests

from carefinder.core.geo import distance_miles
from carefinder.models import Facility, GeocodeMatch, ValidationReport, ValidationResult
from carefinder.vendors.location_service import LocationServiceError

logger = logging.getLogger(__name__)

VALID_DISTANCE_MILES = 0.5
NO_RESULTS_ERROR = "No geocoding results found"

Geocoder = Callable[[str], Sequence[GeocodeMatch]]


def validate_address(facility: Facility, geocode: Geocoder) -> ValidationResult:
    """Geocode one facility's address label and compare it to the stored position."""
    label = facility.address.label
    try:
        matches = geocode(label)
    except LocationServiceError as exc:
        logger.warning("Geocoding rejected for %s: %s", facility.facility_id, exc)
        return ValidationResult(facility, is_valid=False, error=f"API error: {exc}")
    except requests.RequestException as exc:
        logger.warning("Geocoding request failed for %s: %s", facility.facility_id, exc)
        return ValidationResult(facility, is_valid=False, error=f"Network error: {exc}")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unexpected geocoding failure for %s: %s", facility.facility_id, exc)
        return ValidationResult(facility, is_valid=False, error=f"Exception: {exc}")

    if not matches:
        return ValidationResult(facility, is_valid=False, error=NO_RESULTS_ERROR)

    geocoded = matches[0].position
    distance = distance_miles(facility.position, geocoded)
    is_valid = distance < VALID_DISTANCE_MILES
    return ValidationResult(
        facility,
        is_valid=is_valid,
        error=None if is_valid else f"Position mismatch: {distance:.2f} miles away",
        geocoded_position=geocoded,
        distance_miles=distance,
    )


def validate_all(
    facilities: Iterable[Facility],
    geocode: Geocoder,
    *,
    delay_seconds: float = 0.1,
    sleep: Callable[[float], None] = time.sleep,
) -> ValidationReport:
    """Validate every facility in order, pausing ``delay_seconds`` between requests."""
    snapshot = list(facilities)
    total = len(snapshot)
    results: List[ValidationResult] = []
    logger.info("Validating addresses for %d facilities", total)

    for index, facility in enumerate(snapshot, start=1):
        result = validate_address(facility, geocode)
        results.append(result)

        if result.is_valid:
            logger.info("[%d/%d] OK %s", index, total, facility.title)
        else:
            logger.info("[%d/%d] FAILED %s: %s", index, total, facility.title, result.error)

        if index < total and delay_seconds > 0:
            sleep(delay_seconds)

    report = ValidationReport(results)
    logger.info("Validation finished: valid=%d invalid=%d", report.valid_count, report.invalid_count)
    return report


def format_report(report: ValidationReport) -> str:
    rule = "=" * 60
    lines = [
        rule,
        "VALIDATION SUMMARY",
        rule,
        f"Valid addresses: {report.valid_count}",
        f"Invalid addresses: {report.invalid_count}",
        f"Success rate: {report.success_rate:.1f}%",
    ]

    failures = report.failures
    if failures:
        lines += ["", "INVALID ADDRESSES:", "-" * 60]
        for failure in failures:
            lines += [
                "",
                failure.title,
                f"  PlaceId: {failure.facility_id}",
                f"  Address: {failure.address_label}",
                f"  Error: {failure.error}",
            ]
            if failure.stored_position is not None and failure.geocoded_position is not None:
                lines.append(f"  Stored: {failure.stored_position.as_position()}")
                lines.append(f"  Geocoded: {failure.geocoded_position.as_position()}")
            if failure.distance_miles is not None:
                lines.append(f"  Distance from geocoded: {failure.distance_miles:.2f} miles")

    return "\n".join(lines)
