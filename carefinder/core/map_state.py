"""Selection state for one map/list screen session."""

import enum
import logging
from typing import Optional

from carefinder.models import Coordinate, Facility

logger = logging.getLogger(__name__)

DEFAULT_MAP_CENTER = Coordinate(-73.9857, 40.7484)


class SelectionState(enum.Enum):
    NONE = "no-selection"
    FROM_LIST = "selected-from-list"
    FROM_MAP = "selected-from-map"


class MapInteraction:
    """Tracks the selected facility and whether the map camera should move to it.

    Selecting from the list requests a camera move; selecting a marker on the map
    does not, since the marker is already in view.
    """

    def __init__(self, center: Coordinate = DEFAULT_MAP_CENTER) -> None:
        self.center = center
        self.state = SelectionState.NONE
        self.selected_id: Optional[str] = None
        self.should_center = False

    def select(self, facility: Facility, from_list: bool = False) -> None:
        self.selected_id = facility.facility_id
        self.state = SelectionState.FROM_LIST if from_list else SelectionState.FROM_MAP
        self.should_center = from_list
        if from_list:
            self.center = facility.position
        logger.debug("Selected %s (%s)", facility.facility_id, self.state.value)

    def clear_selection(self) -> None:
        self.selected_id = None
        self.state = SelectionState.NONE
        self.should_center = False

    def update_center(self, center: Coordinate) -> None:
        self.center = center

    def acknowledge_center(self) -> None:
        """Called once the camera has moved so the request is not replayed."""
        self.should_center = False
