"""Service catalog reads and admin edits."""

import logging
from dataclasses import dataclass, replace
from typing import Any, Protocol

from shoot_dashboard.adapters.payloads import (
    CANONICAL_PHOTO_CATEGORY,
    normalize_category_name,
    service_to_payload,
)
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.catalog import PricingInfo, Service, ServiceCategory
from shoot_dashboard.errors import ConfirmationRequiredError
from shoot_dashboard.services.cache import Cache
from shoot_dashboard.services.pricing import pricing_for_sqft, validate_sqft_ranges

CATEGORY_ORDER = (
    "photo",
    "video",
    "drone",
    "3d",
    "360/3d tours",
    "floor plans",
    "floorplan",
    "virtual staging",
    "commercials",
    "packages",
    "addons",
    "unassigned",
)

_SERVICES_CACHE_KEY = "catalog:services"

_logger = logging.getLogger(__name__)


class CatalogBackend(Protocol):
    """Backend interface for services and categories."""

    async def list_services(self, session: AuthSession) -> list[Service]:
        """Return all services."""

    async def create_service(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Service:
        """Create a service."""

    async def update_service(
        self, session: AuthSession, service_id: str, payload: dict[str, Any]
    ) -> Service:
        """Replace a service."""

    async def delete_service(self, session: AuthSession, service_id: str) -> None:
        """Delete a service."""

    async def list_categories(self, session: AuthSession) -> list[ServiceCategory]:
        """Return all categories."""

    async def create_category(
        self, session: AuthSession, name: str, icon: str | None = None
    ) -> ServiceCategory:
        """Create a category."""

    async def delete_category(self, session: AuthSession, category_id: str) -> None:
        """Delete a category."""


def merge_categories(categories: list[ServiceCategory]) -> list[ServiceCategory]:
    """Collapse categories with the same normalised name, naming photos "Photos"."""
    merged: dict[str, ServiceCategory] = {}
    for category in categories:
        key = normalize_category_name(category.name)
        if key in merged:
            continue
        if key == CANONICAL_PHOTO_CATEGORY:
            category = replace(category, name="Photos")
        merged[key] = category
    return list(merged.values())


def _category_rank(category: ServiceCategory) -> int:
    name = category.name.lower()
    for index, entry in enumerate(CATEGORY_ORDER):
        if entry in name or (name and name in entry):
            return index
    return len(CATEGORY_ORDER)


def order_categories(categories: list[ServiceCategory]) -> list[ServiceCategory]:
    """Sort categories in the dashboard tab order, then alphabetically."""
    return sorted(categories, key=lambda c: (_category_rank(c), c.name.lower()))


@dataclass
class CatalogService:
    """Reads the catalog with caching and applies validated admin edits."""

    backend: CatalogBackend
    cache: Cache
    services_ttl_seconds: int = 300

    async def list_services(self, session: AuthSession) -> list[Service]:
        """Return the service list, cached briefly."""
        cached = self.cache.get(_SERVICES_CACHE_KEY)
        if isinstance(cached, list):
            return cached
        services = await self.backend.list_services(session)
        self.cache.set(
            _SERVICES_CACHE_KEY, services, ttl_seconds=self.services_ttl_seconds
        )
        return services

    async def get_service(
        self, session: AuthSession, service_id: str
    ) -> Service | None:
        """Return one service by id."""
        for service in await self.list_services(session):
            if service.id == service_id:
                return service
        return None

    async def priced_services(
        self,
        session: AuthSession,
        sqft: float | str | None,
        category_id: str | None = None,
    ) -> list[tuple[Service, PricingInfo]]:
        """Return active services with pricing resolved for a square footage."""
        services = [s for s in await self.list_services(session) if s.active]
        if category_id:
            wanted = normalize_category_name(category_id)
            services = [
                s
                for s in services
                if s.category
                and (s.category.id == category_id or s.category.id == wanted)
            ]
        return [(service, pricing_for_sqft(service, sqft)) for service in services]

    async def list_categories(self, session: AuthSession) -> list[ServiceCategory]:
        """Return merged categories in tab order."""
        categories = await self.backend.list_categories(session)
        return order_categories(merge_categories(categories))

    async def create_category(
        self, session: AuthSession, name: str, icon: str | None = None
    ) -> ServiceCategory:
        """Create a category."""
        return await self.backend.create_category(session, name.strip(), icon)

    async def delete_category(
        self, session: AuthSession, category_id: str, *, confirmed: bool
    ) -> None:
        """Delete a category once the admin has confirmed."""
        if not confirmed:
            raise ConfirmationRequiredError("Confirm before deleting this category.")
        await self.backend.delete_category(session, category_id)
        self.cache.invalidate(_SERVICES_CACHE_KEY)

    async def create_service(self, session: AuthSession, service: Service) -> Service:
        """Validate and create a service."""
        payload = service_to_payload(_prepared(service))
        created = await self.backend.create_service(session, payload)
        self.cache.invalidate(_SERVICES_CACHE_KEY)
        _logger.info("Created service %s (%s)", created.id, created.name)
        return created

    async def update_service(self, session: AuthSession, service: Service) -> Service:
        """Validate and replace a service."""
        payload = service_to_payload(_prepared(service))
        updated = await self.backend.update_service(session, service.id, payload)
        self.cache.invalidate(_SERVICES_CACHE_KEY)
        return updated

    async def delete_service(
        self, session: AuthSession, service_id: str, *, confirmed: bool
    ) -> None:
        """Delete a service once the admin has confirmed."""
        if not confirmed:
            raise ConfirmationRequiredError("Confirm before deleting this service.")
        await self.backend.delete_service(session, service_id)
        self.cache.invalidate(_SERVICES_CACHE_KEY)


def _prepared(service: Service) -> Service:
    """Check tiers and drop the tier table from fixed-price services."""
    if not service.is_variable:
        return replace(service, sqft_ranges=())
    validate_sqft_ranges(service.sqft_ranges)
    return service
