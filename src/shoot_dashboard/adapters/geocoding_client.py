"""Address geocoding client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from shoot_dashboard.coercion import to_optional_float
from shoot_dashboard.domain.photographers import Coordinates


class Geocoder(Protocol):
    """Interface for turning a street address into coordinates."""

    async def geocode(self, address: str) -> Coordinates | None:
        """Return coordinates for an address, or None when not found."""


@dataclass
class HttpxNominatimGeocoder(Geocoder):
    """Geocoder backed by a Nominatim-compatible search endpoint."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxNominatimGeocoder":
        """Create a geocoder with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
        )

    async def geocode(self, address: str) -> Coordinates | None:
        """Look up the best match for an address."""
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={"q": address, "format": "json", "limit": 1, "countrycodes": "us"},
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        results = response.json()
        if not results:
            return None
        lat = to_optional_float(results[0].get("lat"))
        lon = to_optional_float(results[0].get("lon"))
        if lat is None or lon is None:
            return None
        return Coordinates(lat=lat, lon=lon)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
