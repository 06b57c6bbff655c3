"""Address geocoding against the Google Geocoding API."""

from __future__ import annotations

from healthadvisor.common.errors import GeocodeError
from healthadvisor.common.http import HttpClient, HttpRequestError

DEFAULT_ENDPOINT = "https://maps.googleapis.com/maps/api/geocode/json"


def _first_location(payload: dict, address: str) -> tuple[float, float]:
    if not isinstance(payload, dict):
        raise GeocodeError(f"Unexpected geocoding payload for {address!r}", address=address)
    status = payload.get("status")
    if status != "OK":
        detail = payload.get("error_message") or status
        raise GeocodeError(f"Geocoding returned {detail} for {address!r}", address=address)

    results = payload.get("results") or []
    if not results:
        raise GeocodeError(f"No geocoding results for {address!r}", address=address)

    try:
        location = results[0]["geometry"]["location"]
        return float(location["lat"]), float(location["lng"])
    except (KeyError, TypeError, ValueError) as exc:
        raise GeocodeError(f"Malformed geocoding result for {address!r}", address=address) from exc


class GoogleGeocoder:
    def __init__(
        self,
        http_client: HttpClient,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        api_key: str | None = None,
    ) -> None:
        self.http_client = http_client
        self.endpoint = endpoint
        self.api_key = api_key

    def geocode(self, address: str) -> tuple[float, float]:
        params = {"address": address}
        if self.api_key:
            params["key"] = self.api_key
        try:
            payload = self.http_client.get_json(self.endpoint, params=params)
        except HttpRequestError as exc:
            raise GeocodeError(f"Geocoding request failed for {address!r}: {exc}", address=address) from exc
        return _first_location(payload, address)
