"""Reverse geocoding (lat/lon -> city/state/country) via Nominatim."""
import json
from typing import Any, Optional
from urllib.error import URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

# Nominatim reports the settlement under whichever key matches its size
_CITY_KEYS = ("city", "town", "village", "hamlet")


def location_from_address(address: dict[str, Any]) -> dict[str, Optional[str]]:
    city = next((address[k] for k in _CITY_KEYS if address.get(k)), None)
    return {
        "city": city,
        "state": address.get("state") or None,
        "country": address.get("country") or None,
    }


class ReverseGeocoder:
    def __init__(self, base_url: str, user_agent: str, timeout_seconds: float = 5.0):
        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout = timeout_seconds

    def reverse(self, latitude: Optional[float], longitude: Optional[float]) -> dict[str, Optional[str]]:
        """``{city, state, country}`` or ``{}`` when coordinates are missing or lookup fails."""
        if latitude is None or longitude is None:
            return {}

        query = urlencode({"lat": latitude, "lon": longitude, "format": "json"})
        req = Request(f"{self._base_url}?{query}", method="GET")
        req.add_header("User-Agent", self._user_agent)
        req.add_header("Accept", "application/json")

        try:
            with urlopen(req, timeout=self._timeout) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except (URLError, TimeoutError, OSError, ValueError):
            return {}

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            address = {}
        return location_from_address(address)

