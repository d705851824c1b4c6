"""Quote, booking and shoot lifecycle endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from shoot_dashboard.api.dependencies import get_container, get_session
from shoot_dashboard.api.models import (
    AssignPhotographerRequest,
    BookingRequest,
    DeclineRequest,
    QuoteRequest,
    RankRequest,
    TourLinksUpdate,
)
from shoot_dashboard.domain.auth import AuthSession  # noqa: TC001
from shoot_dashboard.domain.photographers import RankingRequest
from shoot_dashboard.services.notices import success_notice
from shoot_dashboard.services.pricing import format_price
from shoot_dashboard.services.quotes import BookingQuote
from shoot_dashboard.services.shoots import BookingDraft

if TYPE_CHECKING:
    from shoot_dashboard.containers import AppContainer

router = APIRouter(tags=["shoots"])


async def _build_quote(
    container: AppContainer, session: AuthSession, body: QuoteRequest
) -> BookingQuote:
    services = await container.catalog_service.list_services(session)
    tax_rate = body.tax_rate
    if tax_rate is None:
        tax_rate = container.settings.default_tax_rate
    quote = BookingQuote.for_services(services, sqft=body.sqft, tax_rate=tax_rate)
    for service_id in body.service_ids:
        quote.select_service(service_id)
    for service_id, value in body.overrides.items():
        if service_id in quote.selected_ids:
            quote.set_override(service_id, value)
    if body.manual_tax_amount is not None:
        quote.set_manual_tax(body.manual_tax_amount)
    return quote


def _quote_body(quote: BookingQuote) -> dict[str, object]:
    totals = quote.totals
    return {
        **asdict(totals),
        "sqft": quote.sqft,
        "tax_amount_dirty": quote.tax_amount_dirty,
        "display_total": format_price(totals.total_quote),
    }


@router.post("/quotes")
async def compute_quote(
    body: QuoteRequest, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Compute a quote for a service selection."""
    container = get_container(request)
    quote = await _build_quote(container, session, body)
    return {"quote": _quote_body(quote)}


@router.post("/shoots")
async def book_shoot(
    body: BookingRequest, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Submit a booking priced from the quote inputs."""
    container = get_container(request)
    quote = await _build_quote(container, session, body)
    draft = BookingDraft(
        client_id=body.client_id,
        scheduled_date=body.scheduled_date,
        time=body.time,
        location=body.location.to_domain(),
        property_details=body.property_details.to_domain(),
        photographer_id=body.photographer_id,
        notes=body.notes,
    )
    shoot = await container.shoot_service.create_shoot(session, draft, quote)
    return {
        "shoot": shoot,
        "quote": _quote_body(quote),
        "notice": success_notice("Shoot booked."),
    }


@router.post("/shoots/{shoot_id}/photographers/rank")
async def rank_photographers(
    shoot_id: str,
    body: RankRequest,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Rank photographers for a shoot by distance or name."""
    container = get_container(request)
    ranked = await container.ranking_service.rank(
        session,
        RankingRequest(
            key=f"shoot:{shoot_id}",
            shoot_date=body.shoot_date,
            location=body.location.to_domain(),
            time=body.time,
            photographer_ids=tuple(body.photographer_ids),
            sort_by=body.sort_by,
            search_query=body.search_query,
        ),
    )
    if ranked is None:
        return {"photographers": [], "superseded": True}
    return {"photographers": ranked, "superseded": False}


@router.patch("/shoots/{shoot_id}/photographer")
async def assign_photographer(
    shoot_id: str,
    body: AssignPhotographerRequest,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Assign a photographer to a shoot."""
    container = get_container(request)
    shoot = await container.shoot_service.assign_photographer(
        session, shoot_id, body.photographer_id
    )
    return {"shoot": shoot}


@router.patch("/shoots/{shoot_id}/tour-links")
async def update_tour_links(
    shoot_id: str,
    body: TourLinksUpdate,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Save tour links for a shoot."""
    container = get_container(request)
    embeds = None
    if body.embeds is not None:
        embeds = [embed.to_domain() for embed in body.embeds]
    shoot = await container.shoot_service.update_tour_links(
        session, shoot_id, body.links, embeds=embeds, tour_style=body.tour_style
    )
    return {"shoot": shoot, "notice": success_notice("Tour links saved.")}


@router.post("/shoots/{shoot_id}/decline")
async def decline_shoot(
    shoot_id: str,
    body: DeclineRequest,
    request: Request,
    confirm: bool = False,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Decline a shoot request."""
    container = get_container(request)
    await container.shoot_service.decline_shoot(
        session, shoot_id, body.reason, confirmed=confirm
    )
    return {"notice": success_notice("Shoot declined.")}


@router.get("/property/lookup")
async def lookup_property(
    query: str, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Return address suggestions and metrics for the best match."""
    container = get_container(request)
    lookup = container.property_lookup_service
    suggestions = await lookup.search(session, query)
    metrics = await lookup.lookup(session, suggestions[0]) if suggestions else None
    return {"suggestions": suggestions, "metrics": metrics}
