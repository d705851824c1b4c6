"""Tests for the dashboard HTTP API."""

from datetime import date

from fastapi.testclient import TestClient

from shoot_dashboard.api.app import create_app
from shoot_dashboard.domain.catalog import ServiceCategory
from shoot_dashboard.domain.invoices import Invoice, InvoiceStatus
from shoot_dashboard.domain.photographers import PhotographerCandidate, TimeSlot
from shoot_dashboard.domain.shoots import Location, Shoot
from tests.conftest import (
    ADMIN_HEADERS,
    AUTH_HEADERS,
    make_fixed_service,
    make_variable_service,
)

SERVICE_BODY = {
    "name": "Interior Photos",
    "price": 120,
    "pricing_type": "variable",
    "category_id": "photos",
    "category_name": "Photos",
    "sqft_ranges": [
        {"sqft_from": 0, "sqft_to": 2000, "price": 150},
        {"sqft_from": 2001, "sqft_to": 4000, "price": 225},
    ],
}


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def test_health_endpoint(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_services_priced_for_square_footage(container) -> None:
    backend = container.catalog_service.backend
    backend.services = {
        "svc-photos": make_variable_service(),
        "svc-drone": make_fixed_service(),
    }

    response = _client(container).get("/catalog/services", params={"sqft": "2200"})

    assert response.status_code == 200
    rows = {row["service"]["id"]: row for row in response.json()["services"]}
    assert rows["svc-photos"]["pricing"]["price"] == 200
    assert rows["svc-photos"]["display_price"] == "$200.00"
    assert rows["svc-photos"]["service"]["pricing_type"] == "variable"
    assert rows["svc-drone"]["display_price"] == "$50.00"


def test_categories_endpoint_merges_photo_variants(container) -> None:
    container.catalog_service.backend.categories = [
        ServiceCategory(id="3", name="Video"),
        ServiceCategory(id="1", name="Photo"),
        ServiceCategory(id="2", name="Photos"),
    ]

    response = _client(container).get("/catalog/categories")

    names = [c["name"] for c in response.json()["categories"]]
    assert names == ["Photos", "Video"]


def test_catalog_writes_require_admin_token(container) -> None:
    response = _client(container).post(
        "/catalog/services", json=SERVICE_BODY, headers=AUTH_HEADERS
    )

    assert response.status_code == 401


def test_create_service(container) -> None:
    response = _client(container).post(
        "/catalog/services", json=SERVICE_BODY, headers=ADMIN_HEADERS
    )

    assert response.status_code == 200
    data = response.json()
    assert data["service"]["name"] == "Interior Photos"
    assert len(data["service"]["sqft_ranges"]) == 2
    assert data["notice"]["variant"] == "default"


def test_overlapping_tiers_are_reported_as_notice(container) -> None:
    body = {
        **SERVICE_BODY,
        "sqft_ranges": [
            {"sqft_from": 0, "sqft_to": 2500, "price": 150},
            {"sqft_from": 2001, "sqft_to": 4000, "price": 225},
        ],
    }

    response = _client(container).post(
        "/catalog/services", json=body, headers=ADMIN_HEADERS
    )

    assert response.status_code == 422
    assert response.json()["title"] == "Invalid pricing tiers"
    assert response.json()["variant"] == "destructive"


def test_delete_service_needs_confirmation(container) -> None:
    backend = container.catalog_service.backend
    backend.services = {"svc-drone": make_fixed_service()}
    client = _client(container)

    refused = client.delete("/catalog/services/svc-drone", headers=ADMIN_HEADERS)
    accepted = client.delete(
        "/catalog/services/svc-drone",
        params={"confirm": "true"},
        headers=ADMIN_HEADERS,
    )

    assert refused.status_code == 409
    assert refused.json()["title"] == "Confirmation required"
    assert accepted.status_code == 200
    assert backend.services == {}


def test_next_range_for_service(container) -> None:
    container.catalog_service.backend.services = {
        "svc-photos": make_variable_service()
    }

    response = _client(container).get("/catalog/services/svc-photos/next-range")

    assert response.json()["range"]["sqft_from"] == 5001


def test_quote_keeps_manual_tax(container) -> None:
    container.catalog_service.backend.services = {
        "svc-base": make_fixed_service("svc-base", price=100),
        "svc-addon": make_fixed_service("svc-addon", price=50),
    }

    response = _client(container).post(
        "/quotes",
        json={"service_ids": ["svc-base", "svc-addon"], "manual_tax_amount": 5},
    )

    quote = response.json()["quote"]
    assert quote["base_quote"] == 150
    assert quote["tax_amount"] == 5
    assert quote["total_quote"] == 155
    assert quote["tax_amount_dirty"] is True
    assert quote["display_total"] == "$155.00"


def test_quote_uses_default_tax_rate(container) -> None:
    container.catalog_service.backend.services = {
        "svc-base": make_fixed_service("svc-base", price=100)
    }

    response = _client(container).post("/quotes", json={"service_ids": ["svc-base"]})

    assert response.json()["quote"]["tax_amount"] == 8


BOOKING_BODY = {
    "client_id": "client-1",
    "scheduled_date": "2026-05-04",
    "time": "10:00",
    "location": {"address": "1 Main St", "city": "Austin", "state": "TX"},
    "property_details": {"sqft": 1200},
    "service_ids": ["svc-photos"],
}


def test_booking_without_token_is_rejected(container) -> None:
    container.catalog_service.backend.services = {
        "svc-photos": make_variable_service()
    }

    response = _client(container).post("/shoots", json=BOOKING_BODY)

    assert response.status_code == 401
    assert response.json()["title"] == "Authentication required"


def test_booking_creates_shoot(container) -> None:
    backend = container.catalog_service.backend
    backend.services = {"svc-photos": make_variable_service()}

    response = _client(container).post(
        "/shoots", json={**BOOKING_BODY, "sqft": 1200}, headers=AUTH_HEADERS
    )

    assert response.status_code == 200
    data = response.json()
    assert data["quote"]["base_quote"] == 150
    assert data["shoot"]["id"] == "shoot-1"
    assert backend.created_payloads[0]["services"][0]["price"] == 150


def test_rank_photographers_endpoint(container) -> None:
    container.catalog_service.backend.availability = [
        PhotographerCandidate(id="2", name="Ben", distance=8.0),
        PhotographerCandidate(
            id="1",
            name="Ana",
            distance=2.5,
            net_available_slots=(TimeSlot("09:00", "11:00"),),
        ),
    ]

    response = _client(container).post(
        "/shoots/shoot-1/photographers/rank",
        json={
            "shoot_date": "2026-05-04",
            "location": {"address": "1 Main St", "city": "Austin", "state": "TX"},
        },
        headers=AUTH_HEADERS,
    )

    data = response.json()
    assert data["superseded"] is False
    assert [p["candidate"]["id"] for p in data["photographers"]] == ["1", "2"]
    assert data["photographers"][0]["segments"][1] is True
    assert data["photographers"][0]["availability_summary"] == "9:00 AM-11:00 AM"


def test_tour_links_for_missing_shoot_report_backend_error(container) -> None:
    response = _client(container).patch(
        "/shoots/missing/tour-links",
        json={"links": {"branded": "https://tours.example.com/1"}},
        headers=AUTH_HEADERS,
    )

    assert response.status_code == 404
    assert response.json()["description"] == "Shoot not found."


def test_tour_links_update(container) -> None:
    backend = container.catalog_service.backend
    backend.shoots["shoot-1"] = Shoot(
        id="shoot-1",
        scheduled_date=date(2026, 5, 4),
        time="10:00",
        location=Location(address="1 Main St", city="Austin", state="TX"),
    )

    response = _client(container).patch(
        "/shoots/shoot-1/tour-links",
        json={"links": {"zillow_3d": "https://zillow.example.com/3d"}},
        headers=AUTH_HEADERS,
    )

    assert response.status_code == 200
    links = response.json()["shoot"]["tour_links"]["links"]
    assert links == {"zillow_3d": "https://zillow.example.com/3d"}


def test_decline_shoot_with_confirmation(container) -> None:
    backend = container.catalog_service.backend

    response = _client(container).post(
        "/shoots/shoot-1/decline",
        params={"confirm": "true"},
        json={"reason": "Photographer unavailable"},
        headers=AUTH_HEADERS,
    )

    assert response.status_code == 200
    assert backend.declined == [("shoot-1", "Photographer unavailable")]


def test_property_lookup(container) -> None:
    client_fake = container.property_lookup_service.client
    client_fake.listings = [
        {"ListingKey": "L1", "UnparsedAddress": "1 Main St", "LivingArea": 2300}
    ]

    response = _client(container).get("/property/lookup", params={"query": "1 Main"})

    data = response.json()
    assert data["suggestions"][0]["id"] == "L1"
    assert data["metrics"]["sqft"] == 2300
    assert client_fake.parcel_requests == []


def _pending_invoice() -> Invoice:
    return Invoice(
        id="inv-1",
        status=InvoiceStatus.PENDING,
        billing_period_start=date(2026, 4, 27),
        billing_period_end=date(2026, 5, 3),
        total_amount=300,
        amount_paid=0,
    )


def test_invoice_routes_require_admin_token(container) -> None:
    response = _client(container).get("/invoices/pending", headers=AUTH_HEADERS)

    assert response.status_code == 401


def test_pending_and_reject_invoice(container) -> None:
    backend = container.invoice_service.backend
    backend.invoices = {"inv-1": _pending_invoice()}
    client = _client(container)

    pending = client.get("/invoices/pending", headers=ADMIN_HEADERS)
    rejected = client.post(
        "/invoices/inv-1/reject",
        json={"reason": "Duplicate mileage"},
        headers=ADMIN_HEADERS,
    )

    assert pending.json()["invoices"][0]["invoice"]["status"] == "pending"
    assert pending.json()["invoices"][0]["balance_due"] == 300
    assert rejected.json()["invoice"]["status"] == "rejected"
    assert rejected.json()["invoice"]["rejection_reason"] == "Duplicate mileage"


def test_approve_and_mark_paid(container) -> None:
    backend = container.invoice_service.backend
    backend.invoices = {"inv-1": _pending_invoice()}
    client = _client(container)

    approved = client.post("/invoices/inv-1/approve", headers=ADMIN_HEADERS)
    paid = client.post(
        "/invoices/inv-1/mark-paid",
        json={"amount": 300, "method": "zelle", "paid_on": "2026-05-05"},
        headers=ADMIN_HEADERS,
    )

    assert approved.json()["invoice"]["status"] == "approved"
    assert paid.json()["invoice"]["status"] == "paid"
    assert paid.json()["payment_method"] == "Zelle"
