"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from typing import Any

import httpx
import pytest

from shoot_dashboard.adapters.bridge_client import PropertyDataClient
from shoot_dashboard.adapters.geocoding_client import Geocoder
from shoot_dashboard.adapters.payloads import (
    parse_property_details,
    parse_service,
    parse_shoot,
    parse_tour_links,
)
from shoot_dashboard.config import Settings
from shoot_dashboard.containers import AppContainer
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.catalog import (
    PricingType,
    Service,
    ServiceCategory,
    SqftRange,
)
from shoot_dashboard.domain.invoices import Invoice, InvoiceStatus
from shoot_dashboard.domain.photographers import (
    Coordinates,
    PhotographerCandidate,
    RankingRequest,
)
from shoot_dashboard.domain.shoots import PartyRef, Shoot
from shoot_dashboard.errors import BackendRequestError, BackendUnavailableError
from shoot_dashboard.services.cache import InMemoryCache
from shoot_dashboard.services.catalog import CatalogBackend, CatalogService
from shoot_dashboard.services.invoices import InvoiceBackend, InvoiceService
from shoot_dashboard.services.property_lookup import (
    AddressBackend,
    PropertyLookupService,
)
from shoot_dashboard.services.ranking import (
    AvailabilitySource,
    PhotographerRankingService,
)
from shoot_dashboard.services.shoots import ShootBackend, ShootService

SESSION = AuthSession(token="test-token")
AUTH_HEADERS = {"Authorization": "Bearer test-token"}
ADMIN_HEADERS = {**AUTH_HEADERS, "X-Admin-Token": "admin-token"}

TIERS = (
    SqftRange(sqft_from=0, sqft_to=1500, price=150, duration=60, photographer_pay=60),
    SqftRange(sqft_from=1501, sqft_to=3000, price=200, duration=90),
    SqftRange(sqft_from=3001, sqft_to=5000, price=275),
)


def make_variable_service(
    service_id: str = "svc-photos",
    price: float = 100,
    sqft_ranges: tuple[SqftRange, ...] = TIERS,
) -> Service:
    return Service(
        id=service_id,
        name="25 Photos",
        price=price,
        pricing_type=PricingType.VARIABLE,
        delivery_time=45,
        photographer_required=True,
        photographer_pay=40,
        category=ServiceCategory(id="photos", name="Photos"),
        photo_count=25,
        sqft_ranges=sqft_ranges,
    )


def make_fixed_service(
    service_id: str = "svc-drone", price: float = 50, name: str = "Drone Stills"
) -> Service:
    return Service(
        id=service_id,
        name=name,
        price=price,
        category=ServiceCategory(id="drone", name="Drone"),
        quantity=1,
    )


@dataclass
class InMemoryDashboardBackend(
    CatalogBackend, ShootBackend, AvailabilitySource, InvoiceBackend, AddressBackend
):
    """In-memory stand-in for the booking backend."""

    services: dict[str, Service] = field(default_factory=dict)
    categories: list[ServiceCategory] = field(default_factory=list)
    shoots: dict[str, Shoot] = field(default_factory=dict)
    roster: list[PhotographerCandidate] = field(default_factory=list)
    availability: list[PhotographerCandidate] = field(default_factory=list)
    availability_error: bool = False
    invoices: dict[str, Invoice] = field(default_factory=dict)
    list_services_calls: int = 0
    created_payloads: list[dict[str, Any]] = field(default_factory=list)
    patches: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    declined: list[tuple[str, str]] = field(default_factory=list)
    paid_payloads: list[dict[str, Any]] = field(default_factory=list)
    availability_requests: list[RankingRequest] = field(default_factory=list)
    addresses: list[dict[str, Any]] = field(default_factory=list)
    address_records: dict[str, dict[str, Any]] = field(default_factory=dict)
    address_search_error: bool = False

    async def list_services(self, session: AuthSession) -> list[Service]:
        self.list_services_calls += 1
        return list(self.services.values())

    async def create_service(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Service:
        session.headers(require_token=True)
        self.created_payloads.append(payload)
        service = parse_service({**payload, "id": f"svc-{len(self.services) + 1}"})
        self.services[service.id] = service
        return service

    async def update_service(
        self, session: AuthSession, service_id: str, payload: dict[str, Any]
    ) -> Service:
        session.headers(require_token=True)
        self.created_payloads.append(payload)
        service = parse_service({**payload, "id": service_id})
        self.services[service_id] = service
        return service

    async def delete_service(self, session: AuthSession, service_id: str) -> None:
        session.headers(require_token=True)
        self.services.pop(service_id, None)

    async def list_categories(self, session: AuthSession) -> list[ServiceCategory]:
        return list(self.categories)

    async def create_category(
        self, session: AuthSession, name: str, icon: str | None = None
    ) -> ServiceCategory:
        category = ServiceCategory(
            id=f"cat-{len(self.categories) + 1}", name=name, icon=icon
        )
        self.categories.append(category)
        return category

    async def delete_category(self, session: AuthSession, category_id: str) -> None:
        self.categories = [c for c in self.categories if c.id != category_id]

    async def get_shoot(self, session: AuthSession, shoot_id: str) -> Shoot:
        shoot = self.shoots.get(shoot_id)
        if shoot is None:
            raise BackendRequestError(404, "Shoot not found.")
        return shoot

    async def create_shoot(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Shoot:
        session.headers(require_token=True)
        self.created_payloads.append(payload)
        shoot = parse_shoot({**payload, "id": f"shoot-{len(self.shoots) + 1}"})
        self.shoots[shoot.id] = shoot
        return shoot

    async def update_shoot(
        self, session: AuthSession, shoot_id: str, payload: dict[str, Any]
    ) -> Shoot:
        session.headers(require_token=True)
        self.patches.append((shoot_id, payload))
        shoot = await self.get_shoot(session, shoot_id)
        if "tour_links" in payload:
            shoot = replace(shoot, tour_links=parse_tour_links(payload["tour_links"]))
        if "photographer_id" in payload:
            shoot = replace(
                shoot, photographer=PartyRef(id=payload["photographer_id"], name="")
            )
        if "property_details" in payload:
            shoot = replace(shoot, property_details=parse_property_details(payload))
        self.shoots[shoot_id] = shoot
        return shoot

    async def decline_shoot(
        self, session: AuthSession, shoot_id: str, reason: str
    ) -> None:
        session.headers(require_token=True)
        self.declined.append((shoot_id, reason))

    async def list_photographers(
        self, session: AuthSession
    ) -> list[PhotographerCandidate]:
        return list(self.roster)

    async def photographer_availability_for_booking(
        self, session: AuthSession, request: RankingRequest
    ) -> list[PhotographerCandidate]:
        self.availability_requests.append(request)
        if self.availability_error:
            raise BackendUnavailableError
        return list(self.availability)

    async def pending_approval_invoices(
        self, session: AuthSession, page: int = 1, per_page: int = 15
    ) -> list[Invoice]:
        return [
            invoice
            for invoice in self.invoices.values()
            if invoice.status is InvoiceStatus.PENDING
        ]

    async def approve_invoice(self, session: AuthSession, invoice_id: str) -> Invoice:
        invoice = replace(
            self.invoices[invoice_id],
            status=InvoiceStatus.APPROVED,
            approval_status="approved",
        )
        self.invoices[invoice_id] = invoice
        return invoice

    async def reject_invoice(
        self, session: AuthSession, invoice_id: str, reason: str
    ) -> Invoice:
        invoice = replace(
            self.invoices[invoice_id],
            status=InvoiceStatus.REJECTED,
            approval_status="rejected",
            rejection_reason=reason,
        )
        self.invoices[invoice_id] = invoice
        return invoice

    async def mark_invoice_paid(
        self, session: AuthSession, invoice_id: str, payload: dict[str, Any]
    ) -> Invoice:
        self.paid_payloads.append(payload)
        invoice = replace(
            self.invoices[invoice_id],
            status=InvoiceStatus.PAID,
            amount_paid=payload["amount_paid"],
        )
        self.invoices[invoice_id] = invoice
        return invoice

    async def search_addresses(
        self, session: AuthSession, query: str
    ) -> list[dict[str, Any]]:
        if self.address_search_error:
            raise BackendUnavailableError
        return list(self.addresses)

    async def address_details(
        self, session: AuthSession, place_id: str
    ) -> dict[str, Any]:
        if place_id not in self.address_records:
            raise BackendRequestError(404, "Address not found.")
        return self.address_records[place_id]


@dataclass
class FakeGeocoder(Geocoder):
    """Geocoder answering from a fixed address table."""

    coordinates: dict[str, Coordinates] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    async def geocode(self, address: str) -> Coordinates | None:
        self.calls.append(address)
        if address in self.failing:
            raise httpx.ConnectError("geocoder unreachable")
        return self.coordinates.get(address)


@dataclass
class FakePropertyDataClient(PropertyDataClient):
    """Property data client serving canned listings and parcels."""

    listings: list[dict[str, Any]] = field(default_factory=list)
    parcels: list[dict[str, Any]] = field(default_factory=list)
    parcel_records: dict[str, dict[str, Any]] = field(default_factory=dict)
    listings_down: bool = False
    parcels_down: bool = False
    parcel_requests: list[str] = field(default_factory=list)

    async def search_listings(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        if self.listings_down:
            raise httpx.ConnectError("listings unreachable")
        return self.listings[:limit]

    async def search_parcels(
        self, query: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        if self.parcels_down:
            raise httpx.ConnectError("parcels unreachable")
        return self.parcels[:limit]

    async def get_parcel(self, parcel_id: str) -> dict[str, Any]:
        self.parcel_requests.append(parcel_id)
        if self.parcels_down or parcel_id not in self.parcel_records:
            raise httpx.ConnectError("parcels unreachable")
        return self.parcel_records[parcel_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url="https://backend.example.com",
        admin_token="admin-token",
        bridge_data_token="bridge-token",
        default_tax_rate=0.08,
    )


@pytest.fixture
def backend() -> InMemoryDashboardBackend:
    return InMemoryDashboardBackend()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def property_client() -> FakePropertyDataClient:
    return FakePropertyDataClient()


@pytest.fixture
def container(
    settings: Settings,
    backend: InMemoryDashboardBackend,
    geocoder: FakeGeocoder,
    property_client: FakePropertyDataClient,
) -> AppContainer:
    cache = InMemoryCache()

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_service=CatalogService(backend=backend, cache=cache),
        shoot_service=ShootService(backend=backend),
        ranking_service=PhotographerRankingService(
            source=backend, geocoder=geocoder, cache=cache
        ),
        invoice_service=InvoiceService(backend=backend),
        property_lookup_service=PropertyLookupService(
            client=property_client, backend=backend
        ),
        close_resources=close_resources,
    )
