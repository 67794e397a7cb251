import pytest

from carefinder.core.routes import fetch_route, summarize_route
from carefinder.models import Coordinate
from carefinder.vendors.location_service import LocationServiceError


def _route(legs, distance=1500.0, duration=240.0):
    return {
        "Legs": [{"Geometry": {"LineString": leg}} for leg in legs],
        "Summary": {"Distance": distance, "Duration": duration},
    }


def test_summarize_concatenates_legs_of_first_route():
    response = {
        "Routes": [
            _route([[[-73.98, 40.74], [-73.97, 40.75]], [[-73.97, 40.75], [-73.96, 40.76]]]),
            _route([[[0, 0], [1, 1]]], distance=9, duration=9),
        ]
    }

    summary = summarize_route(response)

    assert [p.as_position() for p in summary.path] == [
        [-73.98, 40.74],
        [-73.97, 40.75],
        [-73.97, 40.75],
        [-73.96, 40.76],
    ]
    assert summary.distance_meters == 1500.0
    assert summary.duration_seconds == 240.0


@pytest.mark.parametrize("response", [{"Routes": []}, {}, None])
def test_summarize_returns_none_without_routes(response):
    assert summarize_route(response) is None


def test_to_dict_uses_position_lists():
    summary = summarize_route({"Routes": [_route([[[-73.98, 40.74]]])]})
    assert summary.to_dict() == {"path": [[-73.98, 40.74]], "distance_meters": 1500.0, "duration_seconds": 240.0}


def test_fetch_route_calls_service_once():
    calls = []
    origin = Coordinate(-73.98, 40.74)
    destination = Coordinate(-73.96, 40.76)

    def calculate(start, end):
        calls.append((start, end))
        return {"Routes": []}

    assert fetch_route(origin, destination, calculate) is None
    assert calls == [(origin, destination)]


@pytest.mark.parametrize(
    "route",
    [
        _route([[[-73.98, 40.74, 12.0]]]),
        _route([[[-273.98, 40.74]]]),
        {"Legs": [{"Geometry": {"LineString": [[-73.98, 40.74]]}}], "Summary": {"Distance": "far"}},
        {"Legs": ["not-a-leg"], "Summary": {}},
    ],
)
def test_summarize_rejects_malformed_route(route):
    with pytest.raises(LocationServiceError, match="malformed route"):
        summarize_route({"Routes": [route]})
