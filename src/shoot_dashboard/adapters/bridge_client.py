"""Bridge Data Output client for listing and parcel records."""

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

_PROPERTY_FIELDS = (
    "ListingKey,UnparsedAddress,City,StateOrProvince,PostalCode,BedroomsTotal,"
    "BathroomsTotalInteger,LivingArea,GarageSpaces,YearBuilt,LotSizeSquareFeet"
)


class PropertyDataClient(Protocol):
    """Interface for property record lookups."""

    async def search_listings(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Search RESO listings whose address contains the query."""

    async def search_parcels(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Search public parcel records by full address."""

    async def get_parcel(self, parcel_id: str) -> dict[str, Any]:
        """Fetch one parcel record."""


@dataclass
class HttpxBridgeClient(PropertyDataClient):
    """Bridge API client implemented with httpx."""

    access_token: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, access_token: str, base_url: str) -> "HttpxBridgeClient":
        """Create a Bridge client with a managed httpx session."""
        return cls(
            access_token=access_token,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def search_listings(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Search the RESO OData Property resource."""
        escaped = query.lower().replace("'", "''")
        response = await self.http_client.get(
            f"{self.base_url}/OData/pub/Property",
            params={
                "access_token": self.access_token,
                "$filter": f"contains(tolower(UnparsedAddress), '{escaped}')",
                "$top": limit,
                "$select": _PROPERTY_FIELDS,
            },
            headers={"Accept": "application/json"},
            timeout=15,
        )
        response.raise_for_status()
        return list(response.json().get("value") or [])

    async def search_parcels(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Search parcels by full address."""
        response = await self.http_client.get(
            f"{self.base_url}/pub/parcels",
            params={
                "access_token": self.access_token,
                "address.full": query,
                "limit": limit,
            },
            headers={"Accept": "application/json"},
            timeout=15,
        )
        response.raise_for_status()
        return list(response.json().get("bundle") or [])

    async def get_parcel(self, parcel_id: str) -> dict[str, Any]:
        """Fetch a parcel by id."""
        response = await self.http_client.get(
            f"{self.base_url}/pub/parcels/{parcel_id}",
            params={"access_token": self.access_token},
            headers={"Accept": "application/json"},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
