import sys
from pathlib import Path

import pytest

# Ensure the `carefinder` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from carefinder.models import Address, Coordinate, Facility  # noqa: E402


def make_facility(facility_id, position, category=None, title=None):
    return Facility(
        facility_id=facility_id,
        title=title or f"Facility {facility_id}",
        address=Address(label=f"{facility_id} Main St, New York, NY"),
        position=Coordinate(*position),
        category=category,
    )


@pytest.fixture
def facility_factory():
    return make_facility
