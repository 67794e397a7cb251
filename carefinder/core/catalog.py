"""Loading of the read-only facility catalog."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from carefinder.etl.transform import to_facility
from carefinder.models import Facility

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent.joinpath("data", "facilities.json")


class CatalogError(ValueError):
    """Raised when catalog data is malformed or contains duplicate ids."""


class FacilityCatalog:
    """In-memory, read-only collection of facilities in dataset order."""

    def __init__(self, facilities: Sequence[Facility]) -> None:
        self._facilities = tuple(facilities)
        self._by_id: Dict[str, Facility] = {}
        for facility in self._facilities:
            if facility.facility_id in self._by_id:
                raise CatalogError(f"duplicate facility id: {facility.facility_id}")
            self._by_id[facility.facility_id] = facility

    def __len__(self) -> int:
        return len(self._facilities)

    def __iter__(self) -> Iterator[Facility]:
        return iter(self._facilities)

    def all(self) -> List[Facility]:
        return list(self._facilities)

    def get(self, facility_id: str) -> Optional[Facility]:
        return self._by_id.get(facility_id)


def load_catalog(path: Optional[Union[str, Path]] = None) -> FacilityCatalog:
    """Read a JSON list of place records; defaults to the bundled sample catalog."""
    source = Path(path) if path else BUNDLED_CATALOG
    try:
        with source.open("r", encoding="utf-8") as fh:
            records = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"unable to read catalog {source}: {exc}") from exc

    if not isinstance(records, list):
        raise CatalogError(f"catalog {source} must contain a JSON list")

    facilities: List[Facility] = []
    for index, record in enumerate(records):
        try:
            facilities.append(to_facility(record))
        except (TypeError, ValueError, AttributeError) as exc:
            raise CatalogError(f"invalid record #{index} in {source}: {exc}") from exc

    catalog = FacilityCatalog(facilities)
    logger.info("Loaded %d facilities from %s", len(catalog), source)
    return catalog
