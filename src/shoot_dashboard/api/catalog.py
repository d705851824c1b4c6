"""Service catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from shoot_dashboard.api.admin import require_admin
from shoot_dashboard.api.dependencies import get_container, get_session
from shoot_dashboard.api.models import CategoryIn, ServiceIn
from shoot_dashboard.domain.auth import AuthSession  # noqa: TC001
from shoot_dashboard.errors import DashboardError
from shoot_dashboard.services.notices import success_notice
from shoot_dashboard.services.pricing import format_price, next_sqft_range

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/services")
async def list_services(
    request: Request,
    sqft: str | None = None,
    category_id: str | None = None,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Return active services priced for a square footage."""
    container = get_container(request)
    priced = await container.catalog_service.priced_services(
        session, sqft, category_id
    )
    return {
        "services": [
            {
                "service": service,
                "pricing": pricing,
                "display_price": format_price(pricing.price),
            }
            for service, pricing in priced
        ]
    }


@router.get("/services/{service_id}/next-range")
async def next_range(
    service_id: str, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Return the default tier appended after a service's last tier."""
    container = get_container(request)
    service = await container.catalog_service.get_service(session, service_id)
    if service is None:
        raise DashboardError(f"Service {service_id} was not found.")
    return {"range": next_sqft_range(service.sqft_ranges)}


@router.get("/categories")
async def list_categories(
    request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Return categories merged and in tab order."""
    container = get_container(request)
    return {"categories": await container.catalog_service.list_categories(session)}


@router.post("/categories", dependencies=[Depends(require_admin)])
async def create_category(
    body: CategoryIn, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Create a category."""
    container = get_container(request)
    category = await container.catalog_service.create_category(
        session, body.name, body.icon
    )
    return {"category": category}


@router.delete("/categories/{category_id}", dependencies=[Depends(require_admin)])
async def delete_category(
    category_id: str,
    request: Request,
    confirm: bool = False,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Delete a category."""
    container = get_container(request)
    await container.catalog_service.delete_category(
        session, category_id, confirmed=confirm
    )
    return {"notice": success_notice("Category deleted.")}


@router.post("/services", dependencies=[Depends(require_admin)])
async def create_service(
    body: ServiceIn, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Create a service."""
    container = get_container(request)
    service = await container.catalog_service.create_service(
        session, body.to_domain()
    )
    return {"service": service, "notice": success_notice("Service created.")}


@router.put("/services/{service_id}", dependencies=[Depends(require_admin)])
async def update_service(
    service_id: str,
    body: ServiceIn,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Replace a service."""
    container = get_container(request)
    service = await container.catalog_service.update_service(
        session, body.to_domain(service_id)
    )
    return {"service": service, "notice": success_notice("Service updated.")}


@router.delete("/services/{service_id}", dependencies=[Depends(require_admin)])
async def delete_service(
    service_id: str,
    request: Request,
    confirm: bool = False,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Delete a service."""
    container = get_container(request)
    await container.catalog_service.delete_service(
        session, service_id, confirmed=confirm
    )
    return {"notice": success_notice("Service deleted.")}
