"""Client utilities for the location (places/geocoding/routing) service."""

import logging
from typing import Any, Dict, Iterable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from carefinder.models import Coordinate

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


def _build_session() -> requests.Session:
    session = requests.Session()
    retries = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("POST", "GET"),
        raise_on_status=False,
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    session.headers.update({"accept": "application/json"})
    return session


_SESSION = _build_session()


class LocationServiceError(RuntimeError):
    """Raised when the location service answers with a non-successful status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: requests.Response) -> str:
    fallback = f"{response.status_code} {response.reason or ''}".strip()
    try:
        payload = response.json()
    except ValueError:
        return fallback
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("message") or error.get("code") or fallback
    if isinstance(error, str) and error:
        return error
    return fallback


def _handle(response: requests.Response, operation: str) -> Dict[str, Any]:
    if not response.ok:
        message = _error_message(response)
        logger.error("%s failed: status=%s, error_message=%s", operation, response.status_code, message)
        raise LocationServiceError(message, status_code=response.status_code)
    try:
        return response.json()
    except ValueError as exc:
        logger.error("%s returned a non-JSON body: status=%s", operation, response.status_code)
        raise LocationServiceError(f"invalid JSON response: {exc}", status_code=response.status_code) from exc


def _post(operation: str, path: str, body: Dict[str, Any], base_url: str, api_key: str, timeout: float) -> Dict[str, Any]:
    response = _SESSION.post(f"{base_url}/v2/{path}", params={"key": api_key}, json=body, timeout=timeout)
    return _handle(response, operation)


def geocode(
    query: str,
    *,
    base_url: str,
    api_key: str,
    max_results: int = 1,
    timeout: float = REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    body = {"QueryText": query, "MaxResults": max_results}
    return _post("geocode", "geocode", body, base_url, api_key, timeout)


def calculate_routes(
    origin: Coordinate,
    destination: Coordinate,
    *,
    base_url: str,
    api_key: str,
    travel_mode: str = "Car",
    timeout: float = REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    body = {
        "Origin": origin.as_position(),
        "Destination": destination.as_position(),
        "TravelMode": travel_mode,
        "LegGeometryFormat": "Simple",
    }
    return _post("calculate_routes", "routes", body, base_url, api_key, timeout)


def autocomplete(
    query: str,
    *,
    base_url: str,
    api_key: str,
    max_results: int = 5,
    include_countries: Iterable[str] = ("USA",),
    bias_position: Optional[Coordinate] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"QueryText": query, "MaxResults": max_results}
    countries = list(include_countries)
    if countries:
        body["Filter"] = {"IncludeCountries": countries}
    if bias_position is not None:
        body["BiasPosition"] = bias_position.as_position()
    return _post("autocomplete", "autocomplete", body, base_url, api_key, timeout)
