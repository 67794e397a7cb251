from carefinder.core.map_state import DEFAULT_MAP_CENTER, MapInteraction, SelectionState


def test_select_from_list_moves_camera(facility_factory):
    facility = facility_factory("A", (-73.97, 40.76))
    state = MapInteraction()

    state.select(facility, from_list=True)

    assert state.state is SelectionState.FROM_LIST
    assert state.selected_id == "A"
    assert state.should_center is True
    assert state.center == facility.position

    state.acknowledge_center()
    assert state.should_center is False
    assert state.selected_id == "A"


def test_select_from_map_keeps_camera(facility_factory):
    facility = facility_factory("B", (-73.97, 40.76))
    state = MapInteraction()

    state.select(facility)

    assert state.state is SelectionState.FROM_MAP
    assert state.should_center is False
    assert state.center == DEFAULT_MAP_CENTER


def test_clear_selection(facility_factory):
    state = MapInteraction()
    state.select(facility_factory("A", (-73.97, 40.76)), from_list=True)
    state.clear_selection()
    assert state.state is SelectionState.NONE
    assert state.selected_id is None
    assert state.should_center is False
