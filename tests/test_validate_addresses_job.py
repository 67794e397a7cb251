import argparse
import json

import requests

from carefinder.core.config import ConfigError, Settings
from carefinder.jobs import validate_addresses


def _settings(**overrides):
    values = dict(
        location_api_base_url="http://svc",
        location_api_key="secret-key-123",
        facilities_path=None,
        validation_delay_seconds=0.0,
    )
    values.update(overrides)
    return Settings(**values)


def _write_catalog(tmp_path, positions):
    records = [
        {"PlaceId": pid, "Title": pid.title(), "Address": {"Label": f"{pid} address"}, "Position": pos}
        for pid, pos in positions.items()
    ]
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return str(path)


def test_build_geocoder_parses_first_result(monkeypatch):
    captured = {}

    def fake_geocode(query, *, base_url, api_key, max_results, timeout):
        captured.update(query=query, base_url=base_url, api_key=api_key, max_results=max_results)
        return {"ResultItems": [{"Position": [-73.9, 40.7]}]}

    monkeypatch.setattr(validate_addresses.location_service, "geocode", fake_geocode)
    matches = validate_addresses.build_geocoder(_settings())("1 Main St")

    assert matches[0].position.as_position() == [-73.9, 40.7]
    assert captured == {"query": "1 Main St", "base_url": "http://svc", "api_key": "secret-key-123", "max_results": 1}


def test_main_exits_zero_when_all_valid(monkeypatch, tmp_path, capsys):
    path = _write_catalog(tmp_path, {"alpha": [-73.9, 40.7], "beta": [-73.8, 40.6]})
    monkeypatch.setattr(validate_addresses, "get_settings", lambda: _settings())
    positions = {"alpha address": [-73.9, 40.7], "beta address": [-73.8, 40.6]}
    monkeypatch.setattr(
        validate_addresses.location_service,
        "geocode",
        lambda query, **kwargs: {"ResultItems": [{"Position": positions[query]}]},
    )

    assert validate_addresses.main(["--catalog", path]) == 0
    out = capsys.readouterr().out
    assert "Valid addresses: 2" in out
    assert "Success rate: 100.0%" in out


def test_main_exits_one_when_any_invalid(monkeypatch, tmp_path, capsys):
    path = _write_catalog(tmp_path, {"alpha": [-73.9, 40.7], "beta": [-73.8, 40.6]})
    monkeypatch.setattr(validate_addresses, "get_settings", lambda: _settings())

    def fake_geocode(query, **kwargs):
        if query == "beta address":
            raise requests.ConnectionError("unreachable")
        return {"ResultItems": [{"Position": [-73.9, 40.7]}]}

    monkeypatch.setattr(validate_addresses.location_service, "geocode", fake_geocode)

    assert validate_addresses.main(["--catalog", path, "--delay", "0"]) == 1
    out = capsys.readouterr().out
    assert "Invalid addresses: 1" in out
    assert "PlaceId: beta" in out
    assert "Network error" in out


def test_run_validation_uses_configured_delay(monkeypatch, tmp_path):
    path = _write_catalog(tmp_path, {"alpha": [-73.9, 40.7], "beta": [-73.8, 40.6]})
    monkeypatch.setattr(validate_addresses, "get_settings", lambda: _settings(facilities_path=path, validation_delay_seconds=0.25))
    captured = {}

    def fake_validate_all(facilities, geocode, *, delay_seconds):
        captured.update(ids=[f.facility_id for f in facilities], delay=delay_seconds)
        return "report"

    monkeypatch.setattr(validate_addresses, "validate_all", fake_validate_all)

    assert validate_addresses.run_validation(catalog_path=None, delay_seconds=None) == "report"
    assert captured == {"ids": ["alpha", "beta"], "delay": 0.25}


def test_main_returns_two_on_config_error(monkeypatch):
    def broken_settings():
        raise ConfigError("PORT must be an integer")

    monkeypatch.setattr(validate_addresses, "get_settings", broken_settings)
    assert validate_addresses.main([]) == 2


def test_main_rejects_negative_delay():
    assert validate_addresses.main(["--delay", "-1"]) == 2


def test_build_parser_defaults():
    parser = validate_addresses.build_parser()
    args = parser.parse_args([])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.catalog_path is None
    assert args.delay_seconds is None
