"""Shoot booking and lifecycle updates."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Protocol

from shoot_dashboard.adapters.payloads import tour_links_to_payload
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.shoots import (
    TOUR_LINK_KEYS,
    Location,
    PropertyDetails,
    Shoot,
    TourEmbed,
    TourLinks,
)
from shoot_dashboard.errors import ConfirmationRequiredError, DashboardError
from shoot_dashboard.services.quotes import BookingQuote

_logger = logging.getLogger(__name__)


class ShootBackend(Protocol):
    """Backend interface for shoot records."""

    async def get_shoot(self, session: AuthSession, shoot_id: str) -> Shoot:
        """Fetch a shoot."""

    async def create_shoot(
        self, session: AuthSession, payload: dict[str, Any]
    ) -> Shoot:
        """Create a shoot."""

    async def update_shoot(
        self, session: AuthSession, shoot_id: str, payload: dict[str, Any]
    ) -> Shoot:
        """Patch a shoot."""

    async def decline_shoot(
        self, session: AuthSession, shoot_id: str, reason: str
    ) -> None:
        """Decline a shoot."""


def _payment_payload(quote: BookingQuote) -> dict[str, Any]:
    totals = quote.totals
    return {
        "base_quote": totals.base_quote,
        "tax_rate": totals.tax_rate,
        "tax_amount": totals.tax_amount,
        "total_quote": totals.total_quote,
    }


def _services_payload(quote: BookingQuote) -> list[dict[str, Any]]:
    return [
        {
            "id": selected.service_id,
            "price": selected.price,
            "quantity": selected.quantity,
            "photographer_pay": selected.photographer_pay,
        }
        for selected in quote.snapshot()
    ]


def _property_payload(details: PropertyDetails) -> dict[str, Any]:
    return {
        "beds": details.beds,
        "baths": details.baths,
        "sqft": details.sqft,
        "access_notes": details.access_notes,
    }


@dataclass(frozen=True)
class BookingDraft:
    """Everything needed to submit a booking."""

    client_id: str
    scheduled_date: date
    time: str
    location: Location
    property_details: PropertyDetails
    photographer_id: str | None = None
    notes: str | None = None


@dataclass
class ShootService:
    """Creates shoots from quotes and applies lifecycle PATCHes."""

    backend: ShootBackend

    async def create_shoot(
        self, session: AuthSession, draft: BookingDraft, quote: BookingQuote
    ) -> Shoot:
        """Submit a booking with the quote's frozen service prices."""
        payload = {
            "client_id": draft.client_id,
            "scheduled_date": draft.scheduled_date.isoformat(),
            "time": draft.time,
            "address": draft.location.address,
            "city": draft.location.city,
            "state": draft.location.state,
            "zip": draft.location.zip,
            "photographer_id": draft.photographer_id,
            "notes": draft.notes,
            "services": _services_payload(quote),
            "property_details": _property_payload(draft.property_details),
            **_payment_payload(quote),
        }
        shoot = await self.backend.create_shoot(session, payload)
        _logger.info("Booked shoot %s for %s", shoot.id, draft.scheduled_date)
        return shoot

    async def update_services(
        self, session: AuthSession, shoot_id: str, quote: BookingQuote
    ) -> Shoot:
        """Save a changed service selection and the recomputed payment."""
        payload = {"services": _services_payload(quote), **_payment_payload(quote)}
        return await self.backend.update_shoot(session, shoot_id, payload)

    async def reschedule(
        self, session: AuthSession, shoot_id: str, scheduled_date: date, time: str
    ) -> Shoot:
        """Move a shoot to another date and time."""
        return await self.backend.update_shoot(
            session,
            shoot_id,
            {"scheduled_date": scheduled_date.isoformat(), "time": time},
        )

    async def assign_photographer(
        self, session: AuthSession, shoot_id: str, photographer_id: str
    ) -> Shoot:
        """Assign a photographer to a shoot."""
        shoot = await self.backend.update_shoot(
            session, shoot_id, {"photographer_id": photographer_id}
        )
        _logger.info("Assigned photographer %s to shoot %s", photographer_id, shoot_id)
        return shoot

    async def update_property_details(
        self, session: AuthSession, shoot_id: str, details: PropertyDetails
    ) -> Shoot:
        """Save edited property metrics."""
        return await self.backend.update_shoot(
            session, shoot_id, {"property_details": _property_payload(details)}
        )

    async def update_tour_links(
        self,
        session: AuthSession,
        shoot_id: str,
        links: dict[str, str],
        embeds: list[TourEmbed] | None = None,
        tour_style: str | None = None,
    ) -> Shoot:
        """Merge link changes into the shoot's existing tour links and save them."""
        unknown = set(links) - set(TOUR_LINK_KEYS)
        if unknown:
            keys = ", ".join(sorted(unknown))
            raise DashboardError(f"Unknown tour link keys: {keys}")
        current = (await self.backend.get_shoot(session, shoot_id)).tour_links
        merged_links = {**current.links, **links}
        merged = TourLinks(
            links={key: value for key, value in merged_links.items() if value},
            embeds=tuple(embeds) if embeds is not None else current.embeds,
            featured_embed_id=current.featured_embed_id,
            tour_style=tour_style or current.tour_style,
            settings=current.settings,
        )
        if merged.featured_embed_id and all(
            e.id != merged.featured_embed_id for e in merged.embeds
        ):
            merged = replace(merged, featured_embed_id=None)
        return await self.backend.update_shoot(
            session, shoot_id, {"tour_links": tour_links_to_payload(merged)}
        )

    async def decline_shoot(
        self, session: AuthSession, shoot_id: str, reason: str, *, confirmed: bool
    ) -> None:
        """Decline a shoot once the admin has confirmed."""
        if not confirmed:
            raise ConfirmationRequiredError("Confirm before declining this shoot.")
        await self.backend.decline_shoot(session, shoot_id, reason.strip())
        _logger.info("Declined shoot %s", shoot_id)
