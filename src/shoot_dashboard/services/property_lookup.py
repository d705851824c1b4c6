"""Address autocomplete and property metric enrichment."""

import logging
from dataclasses import dataclass, replace
from typing import Any, Protocol

import httpx

from shoot_dashboard.adapters.bridge_client import PropertyDataClient
from shoot_dashboard.coercion import to_float, to_optional_float, to_optional_int
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.property import AddressSuggestion, PropertyMetrics
from shoot_dashboard.errors import BackendUnavailableError, DashboardError

MIN_QUERY_LENGTH = 5

AREA_TYPE_PRIORITY = (
    "Living Building Area",
    "Finished Building Area",
    "Zillow Calculated Finished Area",
    "Base Building Area",
    "Gross Building Area",
)

_logger = logging.getLogger(__name__)


def _listing_suggestion(listing: dict[str, Any]) -> AddressSuggestion:
    address = str(listing.get("UnparsedAddress") or "")
    return AddressSuggestion(
        id=str(listing.get("ListingKey") or listing.get("@odata.id") or ""),
        full_address=address,
        street_address=address,
        city=str(listing.get("City") or ""),
        state=str(listing.get("StateOrProvince") or ""),
        zip_code=str(listing.get("PostalCode") or ""),
        source="listing",
        bedrooms=to_optional_float(listing.get("BedroomsTotal")),
        bathrooms=to_optional_float(listing.get("BathroomsTotalInteger")),
        sqft=to_optional_float(listing.get("LivingArea")),
        garage_cars=to_optional_int(listing.get("GarageSpaces")),
        year_built=to_optional_int(listing.get("YearBuilt")),
    )


def _parcel_suggestion(parcel: dict[str, Any]) -> AddressSuggestion:
    address = parcel.get("address") or {}
    street = str(address.get("deliveryLine") or address.get("full") or "")
    city = str(address.get("city") or "")
    state = str(address.get("state") or "")
    zip_code = str(address.get("zip") or "")
    full = address.get("full") or f"{street}, {city}, {state} {zip_code}".strip()
    return AddressSuggestion(
        id=str(parcel.get("id") or parcel.get("_id") or ""),
        full_address=str(full),
        street_address=street,
        city=city,
        state=state,
        zip_code=zip_code,
    )


def _bathrooms(building: dict[str, Any]) -> float:
    total = (
        to_float(building.get("fullBaths"))
        + to_float(building.get("halfBaths")) * 0.5
        + to_float(building.get("threeQuarterBaths")) * 0.75
        + to_float(building.get("quarterBaths")) * 0.25
    )
    return total or to_float(building.get("baths"))


def _garage(garages: list[dict[str, Any]]) -> tuple[str, int | None, float | None]:
    if not garages:
        return "N/A", None, None
    first = garages[0]
    label = str(first.get("type") or "Garage")
    cars = to_optional_int(first.get("carCount")) or None
    area = to_optional_float(first.get("areaSquareFeet")) or None
    if cars:
        label += f" ({cars} cars)"
    elif area:
        label += f" ({area:g} sqft)"
    if len(garages) > 1:
        total_cars = sum(to_float(g.get("carCount")) for g in garages)
        total_area = sum(to_float(g.get("areaSquareFeet")) for g in garages)
        cars = int(total_cars) if total_cars else cars
        area = total_area or area
    return label, cars, area


def parse_parcel(data: dict[str, Any]) -> PropertyMetrics:
    """Extract property metrics from a Bridge parcel record."""
    parcel = data.get("bundle") or data
    building = parcel.get("building") or {}
    if isinstance(building, list):
        building = building[0] if building else {}
    if not isinstance(building, dict):
        building = {}
    address = parcel.get("address") or {}

    areas = parcel.get("areas") or []
    sqft = 0.0
    for area_type in AREA_TYPE_PRIORITY:
        match = next((a for a in areas if a.get("type") == area_type), None)
        if match and to_float(match.get("areaSquareFeet")):
            sqft = to_float(match.get("areaSquareFeet"))
            break
    if not sqft:
        sqft = to_float(building.get("size"))

    lot_size = "N/A"
    if parcel.get("lotSizeSquareFeet"):
        lot_size = f"{to_float(parcel['lotSizeSquareFeet']):,.0f} sqft"
    elif parcel.get("lotSizeAcres"):
        lot_size = f"{parcel['lotSizeAcres']} acres"

    garage, garage_cars, garage_sqft = _garage(parcel.get("garages") or [])
    return PropertyMetrics(
        address=str(address.get("deliveryLine") or address.get("full") or ""),
        city=str(address.get("city") or ""),
        state=str(address.get("state") or address.get("stateCode") or ""),
        zip_code=str(
            address.get("zip")
            or address.get("zipcode")
            or address.get("postalCode")
            or ""
        ),
        bedrooms=to_float(building.get("bedrooms") or building.get("totalRooms")),
        bathrooms=_bathrooms(building),
        sqft=sqft,
        garage=garage,
        garage_cars=garage_cars,
        garage_sqft=garage_sqft,
        year_built=int(to_float(building.get("yearBuilt"))),
        lot_size=lot_size,
    )



def _backend_suggestion(row: dict[str, Any]) -> AddressSuggestion:
    street = str(row.get("main_text") or row.get("address") or "")
    return AddressSuggestion(
        id=str(row.get("place_id") or row.get("id") or ""),
        full_address=str(row.get("description") or street),
        street_address=street,
        city=str(row.get("city") or ""),
        state=str(row.get("state") or ""),
        zip_code=str(row.get("zip") or ""),
        source="backend",
    )


def _metrics_from_details(details: dict[str, Any]) -> PropertyMetrics:
    """Read backend address details, preferring embedded parcel data."""
    metrics = PropertyMetrics(
        address="",
        city="",
        state="",
        zip_code="",
        bedrooms=to_float(details.get("bedrooms")),
        bathrooms=to_float(details.get("bathrooms")),
        sqft=to_float(details.get("sqft")),
        garage_cars=to_optional_int(details.get("garage_cars")),
        garage_sqft=to_optional_float(details.get("garage_sqft")),
    )
    raw = details.get("property_details")
    if not isinstance(raw, dict):
        return metrics
    parsed = parse_parcel(raw)
    return replace(
        parsed,
        bedrooms=parsed.bedrooms or metrics.bedrooms,
        bathrooms=parsed.bathrooms or metrics.bathrooms,
        sqft=parsed.sqft or metrics.sqft,
        garage_cars=parsed.garage_cars or metrics.garage_cars,
        garage_sqft=parsed.garage_sqft or metrics.garage_sqft,
    )


class AddressBackend(Protocol):
    """Backend interface for address autocomplete."""

    async def search_addresses(
        self, session: AuthSession, query: str
    ) -> list[dict[str, Any]]:
        """Return raw address suggestions."""

    async def address_details(
        self, session: AuthSession, place_id: str
    ) -> dict[str, Any]:
        """Return raw details for a suggestion."""


@dataclass
class PropertyLookupService:
    """Looks up addresses and fills in beds, baths and square footage."""

    client: PropertyDataClient
    backend: AddressBackend
    limit: int = 10

    async def search(
        self, session: AuthSession, query: str
    ) -> list[AddressSuggestion]:
        """Return address suggestions from listings, then parcels, then the backend."""
        cleaned = query.strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return []
        reachable = False
        try:
            listings = await self.client.search_listings(cleaned, self.limit)
            reachable = True
            if listings:
                return [_listing_suggestion(listing) for listing in listings]
        except httpx.HTTPError as exc:
            _logger.warning("Listing search failed, trying parcels: %s", exc)
        try:
            parcels = await self.client.search_parcels(cleaned, self.limit)
            reachable = True
            if parcels:
                return [_parcel_suggestion(parcel) for parcel in parcels]
        except httpx.HTTPError as exc:
            _logger.warning("Parcel search failed, trying backend: %s", exc)
        try:
            rows = await self.backend.search_addresses(session, cleaned)
        except DashboardError as exc:
            if not reachable:
                raise BackendUnavailableError("Failed to search addresses.") from exc
            _logger.warning("Backend address search failed: %s", exc.message)
            return []
        return [_backend_suggestion(row) for row in rows]

    async def lookup(
        self, session: AuthSession, suggestion: AddressSuggestion
    ) -> PropertyMetrics:
        """Return metrics for a chosen suggestion, merged with what it already had."""
        parsed = PropertyMetrics(address="", city="", state="", zip_code="")
        if suggestion.source == "parcel":
            try:
                parsed = parse_parcel(await self.client.get_parcel(suggestion.id))
            except httpx.HTTPError as exc:
                _logger.warning("Parcel lookup failed for %s: %s", suggestion.id, exc)
        elif suggestion.source == "backend":
            try:
                details = await self.backend.address_details(session, suggestion.id)
                parsed = _metrics_from_details(details)
            except DashboardError as exc:
                _logger.warning(
                    "Address details failed for %s: %s", suggestion.id, exc.message
                )
        return PropertyMetrics(
            address=suggestion.full_address or parsed.address,
            city=parsed.city or suggestion.city,
            state=parsed.state or suggestion.state,
            zip_code=parsed.zip_code or suggestion.zip_code,
            bedrooms=parsed.bedrooms or suggestion.bedrooms or 0,
            bathrooms=parsed.bathrooms or suggestion.bathrooms or 0,
            sqft=parsed.sqft or suggestion.sqft or 0,
            garage=parsed.garage,
            garage_cars=parsed.garage_cars or suggestion.garage_cars,
            garage_sqft=parsed.garage_sqft,
            year_built=parsed.year_built or suggestion.year_built or 0,
            lot_size=parsed.lot_size,
        )
