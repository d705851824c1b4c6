"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from shoot_dashboard.adapters.bridge_client import HttpxBridgeClient
from shoot_dashboard.adapters.dashboard_client import HttpxDashboardClient
from shoot_dashboard.adapters.geocoding_client import HttpxNominatimGeocoder
from shoot_dashboard.config import Settings, normalize_api_base_url
from shoot_dashboard.services.cache import InMemoryCache
from shoot_dashboard.services.catalog import CatalogService
from shoot_dashboard.services.invoices import InvoiceService
from shoot_dashboard.services.property_lookup import PropertyLookupService
from shoot_dashboard.services.ranking import PhotographerRankingService
from shoot_dashboard.services.shoots import ShootService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    shoot_service: ShootService
    ranking_service: PhotographerRankingService
    invoice_service: InvoiceService
    property_lookup_service: PropertyLookupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    dashboard_client = HttpxDashboardClient.create(
        normalize_api_base_url(resolved_settings.api_base_url),
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )
    geocoder = HttpxNominatimGeocoder.create(
        base_url=resolved_settings.geocoder_base_url,
        user_agent=resolved_settings.geocoder_user_agent,
    )
    bridge_client = HttpxBridgeClient.create(
        access_token=resolved_settings.bridge_data_token,
        base_url=resolved_settings.bridge_data_base_url,
    )
    cache = InMemoryCache()

    async def close_resources() -> None:
        await dashboard_client.close()
        await geocoder.close()
        await bridge_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=CatalogService(backend=dashboard_client, cache=cache),
        shoot_service=ShootService(backend=dashboard_client),
        ranking_service=PhotographerRankingService(
            source=dashboard_client,
            geocoder=geocoder,
            cache=cache,
            geocode_ttl_seconds=resolved_settings.geocode_ttl_seconds,
        ),
        invoice_service=InvoiceService(backend=dashboard_client),
        property_lookup_service=PropertyLookupService(
            client=bridge_client, backend=dashboard_client
        ),
        close_resources=close_resources,
    )
