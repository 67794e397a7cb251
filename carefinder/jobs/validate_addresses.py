"""CLI job that cross-checks catalog coordinates against the geocoding service."""

import argparse
import logging
from typing import List, Optional, Sequence

from carefinder.core.catalog import CatalogError, load_catalog
from carefinder.core.config import ConfigError, Settings, get_settings
from carefinder.core.validation import Geocoder, format_report, validate_all
from carefinder.etl.transform import parse_geocode_results
from carefinder.models import GeocodeMatch, ValidationReport
from carefinder.vendors import location_service

logger = logging.getLogger(__name__)


def build_geocoder(settings: Settings) -> Geocoder:
    def _geocode(query: str) -> List[GeocodeMatch]:
        payload = location_service.geocode(
            query,
            base_url=settings.location_api_base_url,
            api_key=settings.location_api_key,
            max_results=1,
            timeout=settings.request_timeout_seconds,
        )
        return parse_geocode_results(payload)

    return _geocode


def _mask_key(api_key: str) -> str:
    return f"{api_key[:8]}..." if api_key else "NOT SET"


def run_validation(*, catalog_path: Optional[str], delay_seconds: Optional[float]) -> ValidationReport:
    settings = get_settings()
    logger.info("Location service base URL: %s", settings.location_api_base_url)
    logger.info("Location service API key: %s", _mask_key(settings.location_api_key))

    catalog = load_catalog(catalog_path or settings.facilities_path)
    delay = settings.validation_delay_seconds if delay_seconds is None else delay_seconds

    return validate_all(catalog.all(), build_geocoder(settings), delay_seconds=delay)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate facility addresses against the geocoding service")
    parser.add_argument("--catalog", dest="catalog_path", help="Path to a JSON facility catalog")
    parser.add_argument(
        "--delay",
        dest="delay_seconds",
        type=float,
        default=None,
        help="Pause between geocoding requests in seconds (defaults to VALIDATION_DELAY_SECONDS)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    if args.delay_seconds is not None and args.delay_seconds < 0:
        logger.error("--delay must not be negative")
        return 2

    try:
        report = run_validation(catalog_path=args.catalog_path, delay_seconds=args.delay_seconds)
    except (ConfigError, CatalogError) as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    print(format_report(report))
    return 0 if report.invalid_count == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
