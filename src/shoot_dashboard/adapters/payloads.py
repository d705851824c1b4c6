"""Mapping between backend JSON payloads and domain models.

The backend is inconsistent about field names (``pricing_type`` and
``pricingType``, ``sqft_ranges`` and ``sqftRanges``, nested ``location``
objects or flat ``address`` fields). Everything is normalised here, once,
so the rest of the package only deals with the domain dataclasses.
"""

import re
from datetime import date, datetime
from typing import Any

from shoot_dashboard.coercion import (
    to_float,
    to_optional_float,
    to_optional_int,
)
from shoot_dashboard.domain.catalog import (
    PricingType,
    Service,
    ServiceCategory,
    SqftRange,
)
from shoot_dashboard.domain.invoices import (
    Invoice,
    InvoiceItem,
    InvoiceItemType,
    InvoiceStatus,
)
from shoot_dashboard.domain.photographers import PhotographerCandidate, TimeSlot
from shoot_dashboard.domain.shoots import (
    TOUR_LINK_KEYS,
    Location,
    PartyRef,
    PaymentSummary,
    PropertyDetails,
    SelectedService,
    Shoot,
    TourEmbed,
    TourLinks,
)

Payload = dict[str, Any]

CANONICAL_PHOTO_CATEGORY = "photos"

_PHOTO_COUNT_PATTERN = re.compile(r"(\d+)\s*photo", re.IGNORECASE)

_STATUS_ALIASES = {
    "requested": "requested",
    "scheduled": "scheduled",
    "booked": "scheduled",
    "raw_upload_pending": "scheduled",
    "uploaded": "uploaded",
    "completed": "uploaded",
    "raw_uploaded": "uploaded",
    "raw_issue": "uploaded",
    "in_progress": "uploaded",
    "photos_uploaded": "uploaded",
    "editing": "editing",
    "editing_uploaded": "editing",
    "editing_issue": "editing",
    "editing_complete": "editing",
    "pending_review": "editing",
    "ready_for_review": "editing",
    "review": "editing",
    "qc": "editing",
    "delivered": "delivered",
    "ready_for_client": "delivered",
    "admin_verified": "delivered",
    "ready": "delivered",
    "on_hold": "on_hold",
    "hold_on": "on_hold",
    "cancelled": "cancelled",
    "canceled": "cancelled",
    "declined": "declined",
}

_TOUR_LINK_ALIASES = {
    "generic_mls": ("generic_mls", "genericMls"),
    "matterport_branded": ("matterport_branded", "matterport"),
    "iguide_branded": ("iguide_branded", "iGuide"),
}


def _first(raw: Payload, *keys: str) -> Any:
    """Return the first present, non-empty value among the keys."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None


def normalize_category_name(name: str | None) -> str:
    """Return the lookup key of a category name, merging Photo and Photos."""
    normalized = (name or "").strip().lower()
    if normalized in {"photo", "photos"}:
        return CANONICAL_PHOTO_CATEGORY
    return normalized


def normalize_status(status: str | None, fallback: str = "scheduled") -> str:
    """Map legacy and aliased workflow statuses to the unified set."""
    if not status:
        return fallback
    key = status.strip().lower()
    return _STATUS_ALIASES.get(key, key)


def parse_category(raw: Any) -> ServiceCategory | None:
    """Parse a category given as an object or a bare name."""
    if not raw:
        return None
    if isinstance(raw, str):
        key = normalize_category_name(raw)
        name = "Photos" if key == CANONICAL_PHOTO_CATEGORY else raw
        return ServiceCategory(id=key, name=name)
    name = _text(raw.get("name"))
    if normalize_category_name(name) == CANONICAL_PHOTO_CATEGORY:
        name = "Photos"
    return ServiceCategory(
        id=_text(_first(raw, "id") or normalize_category_name(name)),
        name=name,
        icon=raw.get("icon"),
    )


def parse_sqft_range(raw: Payload) -> SqftRange:
    """Parse one square footage tier."""
    return SqftRange(
        id=to_optional_int(raw.get("id")),
        sqft_from=to_float(_first(raw, "sqft_from", "sqftFrom")),
        sqft_to=to_float(_first(raw, "sqft_to", "sqftTo")),
        price=to_float(raw.get("price")),
        duration=to_optional_int(raw.get("duration")),
        photographer_pay=to_optional_float(
            _first(raw, "photographer_pay", "photographerPay")
        ),
        photo_count=to_optional_int(_first(raw, "photo_count", "photoCount")),
    )


def parse_service(raw: Payload) -> Service:
    """Parse a service, including its tiers and category."""
    category = parse_category(raw.get("category"))
    name = _text(raw.get("name"))
    pricing_type = _text(_first(raw, "pricing_type", "pricingType")).lower()
    photo_count = to_optional_int(_first(raw, "photo_count", "photoCount"))
    if photo_count is None and category and "photo" in category.name.lower():
        match = _PHOTO_COUNT_PATTERN.search(name)
        photo_count = int(match.group(1)) if match else None
    raw_ranges = _first(raw, "sqft_ranges", "sqftRanges") or []
    return Service(
        id=_text(raw.get("id")),
        name=name,
        price=to_float(raw.get("price")),
        pricing_type=(
            PricingType.VARIABLE if pricing_type == "variable" else PricingType.FIXED
        ),
        delivery_time=to_optional_int(_first(raw, "delivery_time", "deliveryTime")),
        photographer_required=bool(
            _first(raw, "photographer_required", "photographerRequired")
        ),
        photographer_pay=to_optional_float(
            _first(raw, "photographer_pay", "photographerPay")
        ),
        category=category,
        photo_count=photo_count,
        quantity=(
            None if photo_count is not None else to_optional_int(raw.get("quantity"))
        ),
        sqft_ranges=tuple(parse_sqft_range(r) for r in raw_ranges),
        allow_multiple=bool(_first(raw, "allow_multiple", "allowMultiple")),
        description=_text(raw.get("description")),
        icon=raw.get("icon"),
        active=raw.get("active", True) is not False,
    )


def service_to_payload(service: Service) -> Payload:
    """Serialise a service for create and update requests."""
    is_photo = bool(
        service.category
        and normalize_category_name(service.category.name) == CANONICAL_PHOTO_CATEGORY
    )
    payload: Payload = {
        "name": service.name,
        "description": service.description,
        "price": service.price,
        "pricing_type": service.pricing_type.value,
        "allow_multiple": service.allow_multiple,
        "delivery_time": service.delivery_time,
        "photographer_required": service.photographer_required,
        "photographer_pay": service.photographer_pay,
        "category_id": service.category.id if service.category else None,
        "icon": service.icon,
        "sqft_ranges": [
            {
                "sqft_from": r.sqft_from,
                "sqft_to": r.sqft_to,
                "price": r.price,
                "duration": r.duration,
                "photographer_pay": r.photographer_pay,
                "photo_count": r.photo_count,
            }
            for r in service.sqft_ranges
        ]
        if service.is_variable
        else [],
    }
    if is_photo:
        payload["photo_count"] = service.photo_count
    else:
        payload["quantity"] = service.quantity
    return payload


def parse_location(raw: Payload) -> Location:
    """Parse a location given as a nested object or flat shoot fields."""
    nested = raw.get("location")
    source = nested if isinstance(nested, dict) else raw
    return Location(
        address=_text(_first(source, "address", "street", "deliveryLine")),
        city=_text(source.get("city")),
        state=_text(_first(source, "state", "stateCode")),
        zip=_text(_first(source, "zip", "zipcode", "postalCode")),
        lat=to_optional_float(_first(source, "lat", "latitude")),
        lon=to_optional_float(_first(source, "lon", "lng", "longitude")),
    )


def _parse_party(raw: Any) -> PartyRef | None:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    return PartyRef(
        id=_text(raw["id"]), name=_text(raw.get("name")), email=raw.get("email")
    )


def parse_property_details(raw: Payload) -> PropertyDetails:
    """Parse property metrics from a shoot, accepting the many sqft spellings."""
    details = _first(raw, "property_details", "propertyDetails") or {}
    merged = {**raw, **details}
    return PropertyDetails(
        beds=to_optional_float(_first(merged, "beds", "bedrooms")),
        baths=to_optional_float(_first(merged, "baths", "bathrooms")),
        sqft=to_optional_float(
            _first(
                merged,
                "sqft",
                "squareFeet",
                "square_feet",
                "livingArea",
                "living_area",
            )
        ),
        access_notes=_first(merged, "access_notes", "accessNotes", "lockbox"),
    )


def parse_payment(raw: Payload) -> PaymentSummary:
    """Parse quote and payment totals."""
    payment = raw.get("payment") if isinstance(raw.get("payment"), dict) else raw
    return PaymentSummary(
        base_quote=to_float(_first(payment, "base_quote", "baseQuote")),
        tax_rate=to_float(_first(payment, "tax_rate", "taxRate")),
        tax_amount=to_float(_first(payment, "tax_amount", "taxAmount")),
        total_quote=to_float(_first(payment, "total_quote", "totalQuote")),
        total_paid=to_float(_first(payment, "total_paid", "totalPaid")),
    )


def parse_tour_links(raw: Any) -> TourLinks:
    """Parse the tour links blob, folding legacy keys into canonical ones."""
    if not isinstance(raw, dict):
        return TourLinks()
    links: dict[str, str] = {}
    for key in TOUR_LINK_KEYS:
        aliases = _TOUR_LINK_ALIASES.get(key, (key,))
        value = _first(raw, *aliases)
        if value:
            links[key] = str(value)
    embeds = tuple(
        TourEmbed(
            id=_text(embed.get("id")) or f"embed-{index}",
            title=_text(embed.get("title")) or f"Embed {index + 1}",
            branded=_text(_first(embed, "branded", "branded_embed", "url")),
            mls=_text(_first(embed, "mls", "mls_embed")),
        )
        for index, embed in enumerate(raw.get("embeds") or [])
        if isinstance(embed, dict)
    )
    featured = _first(raw, "featured_embed_id", "featured_embed")
    return TourLinks(
        links=links,
        embeds=embeds,
        featured_embed_id=_text(featured) or None,
        tour_style=_text(raw.get("tour_style")) or "default",
        settings={
            "header_position": raw.get("header_position") or "center",
            "tour_version": raw.get("tour_version") or "standard",
            "realtor_info": raw.get("realtor_info") or "",
            "autoplay": bool(raw.get("autoplay")),
        },
    )


def tour_links_to_payload(tour_links: TourLinks) -> Payload:
    """Serialise tour links for a shoot PATCH."""
    payload: Payload = dict(tour_links.links)
    payload["embeds"] = [
        {"id": e.id, "title": e.title, "branded": e.branded, "mls": e.mls}
        for e in tour_links.embeds
    ]
    payload["featured_embed_id"] = tour_links.featured_embed_id
    payload["tour_style"] = tour_links.tour_style
    payload.update(tour_links.settings)
    return payload


def _parse_selected_service(raw: Payload) -> SelectedService:
    pivot = raw.get("pivot") if isinstance(raw.get("pivot"), dict) else {}
    merged = {**raw, **pivot}
    return SelectedService(
        service_id=_text(_first(merged, "service_id", "serviceId", "id")),
        price=to_float(_first(merged, "price", "resolved_price")),
        quantity=to_optional_int(merged.get("quantity")) or 1,
        photographer_pay=to_optional_float(
            _first(merged, "photographer_pay", "photographerPay")
        ),
    )


def parse_shoot(raw: Payload) -> Shoot:
    """Parse a shoot with its location, services, payment and tour links."""
    return Shoot(
        id=_text(raw.get("id")),
        scheduled_date=_parse_date(_first(raw, "scheduled_date", "scheduledDate")),
        time=_first(raw, "time", "scheduled_time"),
        location=parse_location(raw),
        client=_parse_party(raw.get("client")),
        photographer=_parse_party(raw.get("photographer")),
        services=tuple(
            _parse_selected_service(s)
            for s in raw.get("services") or []
            if isinstance(s, dict)
        ),
        payment=parse_payment(raw),
        property_details=parse_property_details(raw),
        tour_links=parse_tour_links(_first(raw, "tour_links", "tourLinks")),
        status=normalize_status(_first(raw, "workflow_status", "status")),
    )


def _parse_slots(raw: Any) -> tuple[TimeSlot, ...]:
    return tuple(
        TimeSlot(
            start_time=_text(_first(slot, "start_time", "start")),
            end_time=_text(_first(slot, "end_time", "end")),
        )
        for slot in raw or []
        if isinstance(slot, dict)
    )


def parse_candidate(raw: Payload) -> PhotographerCandidate:
    """Parse a photographer entry from the roster or booking availability."""
    origin_raw = _first(raw, "origin_address", "originAddress")
    origin = parse_location(origin_raw if isinstance(origin_raw, dict) else raw)
    distance_from = _first(raw, "distance_from", "distanceFrom")
    previous_shoot = _first(raw, "previous_shoot_id", "previousShootId")
    return PhotographerCandidate(
        id=_text(raw.get("id")),
        name=_text(raw.get("name")),
        email=_text(raw.get("email")),
        avatar=raw.get("avatar"),
        origin_address=origin,
        distance_from="previous_shoot" if distance_from == "previous_shoot" else "home",
        previous_shoot_id=_text(previous_shoot) or None,
        distance=to_optional_float(raw.get("distance")),
        availability_slots=_parse_slots(
            _first(raw, "availability_slots", "availabilitySlots")
        ),
        booked_slots=_parse_slots(_first(raw, "booked_slots", "bookedSlots")),
        net_available_slots=_parse_slots(
            _first(raw, "net_available_slots", "netAvailableSlots")
        ),
        is_available_at_time=bool(
            _first(raw, "is_available_at_time", "isAvailableAtTime")
        ),
        shoots_count_today=to_optional_int(
            _first(raw, "shoots_count_today", "shootsCountToday")
        )
        or 0,
    )


def _item_type(value: Any) -> InvoiceItemType:
    if value in {"charge", "expense", "payment"}:
        return value
    return "charge"


def _parse_invoice_status(raw: Payload, due: date | None) -> InvoiceStatus:
    status = _text(raw.get("status")).lower()
    if raw.get("is_paid") or status == "paid":
        return InvoiceStatus.PAID
    approval = _text(raw.get("approval_status")).lower()
    if approval in {"approved", "rejected"}:
        return InvoiceStatus(approval)
    if due is not None and due < date.today():
        return InvoiceStatus.OVERDUE
    try:
        return InvoiceStatus(status)
    except ValueError:
        return InvoiceStatus.PENDING


def parse_invoice(raw: Payload) -> Invoice:
    """Parse a weekly invoice and its lines."""
    period_end = _parse_date(
        _first(raw, "billing_period_end", "period_end", "due_date")
    )
    photographer = raw.get("photographer")
    sales_rep = _first(raw, "salesRep", "sales_rep")
    payee = photographer if isinstance(photographer, dict) else sales_rep
    return Invoice(
        id=_text(raw.get("id")),
        status=_parse_invoice_status(raw, period_end),
        billing_period_start=_parse_date(
            _first(raw, "billing_period_start", "period_start", "issue_date")
        ),
        billing_period_end=period_end,
        total_amount=to_float(_first(raw, "total_amount", "total", "amount")),
        amount_paid=to_float(_first(raw, "amount_paid", "paid_amount")),
        items=tuple(
            InvoiceItem(
                id=_text(item.get("id")),
                type=_item_type(item.get("type")),
                description=_text(item.get("description")),
                quantity=to_float(item.get("quantity"), default=1.0),
                unit_amount=to_float(item.get("unit_amount")),
                total_amount=to_float(item.get("total_amount")),
                shoot_id=_text(item.get("shoot_id")) or None,
            )
            for item in raw.get("items") or []
            if isinstance(item, dict)
        ),
        payee_name=payee.get("name") if isinstance(payee, dict) else None,
        payee_role=(
            "photographer"
            if isinstance(photographer, dict)
            else "sales_rep"
            if isinstance(sales_rep, dict)
            else None
        ),
        approval_status=raw.get("approval_status"),
        rejection_reason=raw.get("rejection_reason"),
    )
