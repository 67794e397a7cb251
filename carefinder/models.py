"""Core data models shared by the facility search and validation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS-84 position, longitude first to match the location service."""

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")

    @classmethod
    def from_position(cls, position: Sequence[Any]) -> "Coordinate":
        if position is None or len(position) != 2:
            raise ValueError(f"position must be a [longitude, latitude] pair, got {position!r}")
        return cls(float(position[0]), float(position[1]))

    def as_position(self) -> List[float]:
        return [self.longitude, self.latitude]


@dataclass(frozen=True, slots=True)
class Address:
    label: str
    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Facility:
    """A searchable healthcare location. Distance is never stored here."""

    facility_id: str
    title: str
    address: Address
    position: Coordinate
    category: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    hours: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RankedFacility:
    facility: Facility
    distance_miles: Optional[float] = None


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Radius of 0 disables the distance filter; no categories disables the category filter."""

    radius_miles: float = 0.0
    categories: FrozenSet[str] = frozenset()


@dataclass(frozen=True, slots=True)
class GeocodeMatch:
    position: Coordinate
    label: Optional[str] = None


@dataclass(slots=True)
class ValidationResult:
    facility: Facility
    is_valid: bool
    error: Optional[str] = None
    geocoded_position: Optional[Coordinate] = None
    distance_miles: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    facility_id: str
    title: str
    address_label: str
    error: Optional[str]
    stored_position: Optional[Coordinate] = None
    geocoded_position: Optional[Coordinate] = None
    distance_miles: Optional[float] = None


@dataclass(slots=True)
class ValidationReport:
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def valid_count(self) -> int:
        return sum(1 for result in self.results if result.is_valid)

    @property
    def invalid_count(self) -> int:
        return self.total - self.valid_count

    @property
    def success_rate(self) -> float:
        """Percentage of valid results; 0.0 for an empty run."""
        if not self.results:
            return 0.0
        return self.valid_count / self.total * 100.0

    @property
    def failures(self) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        for result in self.results:
            if result.is_valid:
                continue
            has_geocode = result.geocoded_position is not None
            failures.append(
                ValidationFailure(
                    facility_id=result.facility.facility_id,
                    title=result.facility.title,
                    address_label=result.facility.address.label,
                    error=result.error,
                    stored_position=result.facility.position if has_geocode else None,
                    geocoded_position=result.geocoded_position,
                    distance_miles=result.distance_miles,
                )
            )
        return failures


@dataclass(frozen=True, slots=True)
class RouteSummary:
    path: Tuple[Coordinate, ...]
    distance_meters: float
    duration_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": [point.as_position() for point in self.path],
            "distance_meters": self.distance_meters,
            "duration_seconds": self.duration_seconds,
        }
