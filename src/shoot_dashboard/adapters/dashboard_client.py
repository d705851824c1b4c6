"""HTTP client for the booking backend REST API."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from shoot_dashboard.adapters.payloads import (
    parse_candidate,
    parse_category,
    parse_invoice,
    parse_service,
    parse_shoot,
)
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.catalog import Service, ServiceCategory
from shoot_dashboard.domain.invoices import Invoice
from shoot_dashboard.domain.photographers import PhotographerCandidate, RankingRequest
from shoot_dashboard.domain.shoots import Shoot
from shoot_dashboard.errors import (
    BackendRequestError,
    BackendUnavailableError,
)

_logger = logging.getLogger(__name__)


def _unwrap(body: Any) -> Any:
    """Strip the ``{"data": ...}`` envelope the backend uses for most replies."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _invoice_from(body: Any) -> Invoice:
    """Parse an invoice from ``{"message", "invoice"}`` or enveloped replies."""
    if isinstance(body, dict) and isinstance(body.get("invoice"), dict):
        return parse_invoice(body["invoice"])
    payload = _unwrap(body)
    if not isinstance(payload, dict):
        raise BackendUnavailableError
    return parse_invoice(payload)


def _error_message(response: httpx.Response, fallback: str) -> tuple[str, dict]:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    errors = body.get("errors") if isinstance(body.get("errors"), dict) else {}
    message = body.get("message") or body.get("error")
    if not message and errors:
        first = next(iter(errors.values()))
        message = first[0] if isinstance(first, list) and first else str(first)
    if not message and response.status_code in {401, 403}:
        message = "You do not have permission to perform this action."
    return str(message or fallback), errors


@dataclass
class HttpxDashboardClient:
    """Backend client implemented with httpx; every call takes an auth session."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 15
    ) -> "HttpxDashboardClient":
        """Create a backend client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def _request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        session: AuthSession,
        *,
        require_token: bool = True,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        action: str = "complete the request",
    ) -> Any:
        headers = session.headers(require_token=require_token)
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method,
                url,
                headers=headers,
                json=json,
                params=params,
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            _logger.warning("Backend %s %s failed: %s", method, path, exc)
            raise BackendUnavailableError from exc

        if response.is_error:
            message, errors = _error_message(response, f"Failed to {action}.")
            _logger.warning(
                "Backend %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise BackendRequestError(response.status_code, message, errors)

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            _logger.warning("Backend %s %s returned invalid JSON", method, path)
            raise BackendUnavailableError from exc

    # Catalog

    async def list_services(self, session: AuthSession) -> list[Service]:
        """Return the public service list with square footage tiers."""
        body = await self._request(
            "GET", "/services", session, require_token=False, action="load services"
        )
        return [parse_service(item) for item in _unwrap(body) or []]

    async def create_service(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Service:
        """Create a service."""
        body = await self._request(
            "POST", "/admin/services", session, json=payload, action="create service"
        )
        return parse_service(_unwrap(body))

    async def update_service(
        self, session: AuthSession, service_id: str, payload: dict[str, Any]
    ) -> Service:
        """Replace a service."""
        body = await self._request(
            "PUT",
            f"/admin/services/{service_id}",
            session,
            json=payload,
            action="update service",
        )
        return parse_service(_unwrap(body))

    async def delete_service(self, session: AuthSession, service_id: str) -> None:
        """Delete a service."""
        await self._request(
            "DELETE",
            f"/admin/services/{service_id}",
            session,
            action="delete service",
        )

    async def list_categories(self, session: AuthSession) -> list[ServiceCategory]:
        """Return all service categories."""
        body = await self._request(
            "GET", "/admin/categories", session, action="load categories"
        )
        categories = [parse_category(item) for item in _unwrap(body) or []]
        return [category for category in categories if category is not None]

    async def create_category(
        self, session: AuthSession, name: str, icon: str | None = None
    ) -> ServiceCategory:
        """Create a category."""
        body = await self._request(
            "POST",
            "/admin/categories",
            session,
            json={"name": name, "icon": icon},
            action="create category",
        )
        category = parse_category(_unwrap(body))
        if category is None:
            raise BackendUnavailableError
        return category

    async def delete_category(self, session: AuthSession, category_id: str) -> None:
        """Delete a category."""
        await self._request(
            "DELETE",
            f"/admin/categories/{category_id}",
            session,
            action="delete category",
        )

    # Shoots

    async def get_shoot(self, session: AuthSession, shoot_id: str) -> Shoot:
        """Fetch a shoot."""
        body = await self._request(
            "GET", f"/shoots/{shoot_id}", session, action="load shoot"
        )
        return parse_shoot(_unwrap(body))

    async def create_shoot(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Shoot:
        """Submit a booking."""
        body = await self._request(
            "POST", "/shoots", session, json=payload, action="book shoot"
        )
        return parse_shoot(_unwrap(body))

    async def update_shoot(
        self, session: AuthSession, shoot_id: str, payload: dict[str, Any]
    ) -> Shoot:
        """Patch a shoot."""
        body = await self._request(
            "PATCH",
            f"/shoots/{shoot_id}",
            session,
            json=payload,
            action="update shoot",
        )
        return parse_shoot(_unwrap(body))

    async def decline_shoot(
        self, session: AuthSession, shoot_id: str, reason: str
    ) -> None:
        """Decline a requested shoot."""
        await self._request(
            "POST",
            f"/shoots/{shoot_id}/decline",
            session,
            json={"reason": reason},
            action="decline shoot",
        )

    # Photographers

    async def list_photographers(
        self, session: AuthSession
    ) -> list[PhotographerCandidate]:
        """Return the photographer roster."""
        body = await self._request(
            "GET", "/users/photographers", session, action="load photographers"
        )
        return [parse_candidate(item) for item in _unwrap(body) or []]

    async def photographer_availability_for_booking(
        self, session: AuthSession, request: RankingRequest
    ) -> list[PhotographerCandidate]:
        """Return origin addresses and net availability for a shoot slot."""
        payload = {
            "date": request.shoot_date.isoformat(),
            "time": request.time,
            "shoot_address": request.location.address,
            "shoot_city": request.location.city,
            "shoot_state": request.location.state,
            "shoot_zip": request.location.zip,
            "photographer_ids": [
                int(pid) if pid.isdigit() else pid for pid in request.photographer_ids
            ],
        }
        body = await self._request(
            "POST",
            "/photographer/availability/for-booking",
            session,
            json=payload,
            action="load photographer availability",
        )
        return [parse_candidate(item) for item in _unwrap(body) or []]

    # Address lookup

    async def search_addresses(
        self, session: AuthSession, query: str
    ) -> list[dict[str, Any]]:
        """Return raw address autocomplete suggestions."""
        body = await self._request(
            "GET",
            "/address/search",
            session,
            require_token=False,
            params={"query": query},
            action="search addresses",
        )
        return list(_unwrap(body) or [])

    async def address_details(
        self, session: AuthSession, place_id: str
    ) -> dict[str, Any]:
        """Return raw details for an autocomplete suggestion."""
        body = await self._request(
            "GET",
            "/address/details",
            session,
            require_token=False,
            params={"place_id": place_id},
            action="load address details",
        )
        return dict(_unwrap(body) or {})

    # Invoices

    async def pending_approval_invoices(
        self, session: AuthSession, page: int = 1, per_page: int = 15
    ) -> list[Invoice]:
        """Return weekly invoices waiting for admin approval."""
        body = await self._request(
            "GET",
            "/admin/invoices/pending-approval",
            session,
            params={"page": page, "per_page": per_page},
            action="load invoices",
        )
        return [parse_invoice(item) for item in _unwrap(body) or []]

    async def approve_invoice(self, session: AuthSession, invoice_id: str) -> Invoice:
        """Approve a weekly invoice."""
        body = await self._request(
            "POST",
            f"/admin/invoices/{invoice_id}/approve",
            session,
            action="approve invoice",
        )
        return _invoice_from(body)

    async def reject_invoice(
        self, session: AuthSession, invoice_id: str, reason: str
    ) -> Invoice:
        """Reject a weekly invoice with a reason."""
        body = await self._request(
            "POST",
            f"/admin/invoices/{invoice_id}/reject",
            session,
            json={"reason": reason},
            action="reject invoice",
        )
        return _invoice_from(body)

    async def mark_invoice_paid(
        self, session: AuthSession, invoice_id: str, payload: dict[str, Any]
    ) -> Invoice:
        """Record a payment against an invoice."""
        body = await self._request(
            "POST",
            f"/admin/invoices/{invoice_id}/mark-paid",
            session,
            json=payload,
            action="mark invoice as paid",
        )
        return _invoice_from(body)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
