"""Running quote for a booking: selected services, overrides and tax."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from shoot_dashboard.coercion import to_float, usable_sqft
from shoot_dashboard.domain.catalog import Service
from shoot_dashboard.domain.shoots import SelectedService, Shoot
from shoot_dashboard.services.pricing import pricing_for_sqft, resolve_price

TAX_TOLERANCE = 0.01


def normalize_tax_rate(raw: object) -> float:
    """Return a fractional tax rate; values above 1 are read as percentages."""
    rate = to_float(raw)
    return rate / 100 if rate > 1 else rate


@dataclass(frozen=True)
class QuoteLine:
    """Resolved price of one selected service."""

    service_id: str
    name: str
    price: float
    base_price: float
    has_override: bool
    photographer_pay: float | None


@dataclass(frozen=True)
class QuoteTotals:
    """Quote totals derived from the current selection."""

    lines: tuple[QuoteLine, ...] = ()
    base_quote: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    total_quote: float = 0.0


@dataclass
class BookingQuote:
    """Mutable quote state; every change recomputes the totals.

    A manually entered tax amount marks the quote dirty, and stays
    authoritative across later selection changes until ``clear_manual_tax``.
    """

    catalog: dict[str, Service]
    sqft: float | None = None
    tax_rate: float = 0.0
    selected_ids: list[str] = field(default_factory=list)
    overrides: dict[str, str] = field(default_factory=dict)
    tax_amount_dirty: bool = False
    manual_tax_amount: float = 0.0
    totals: QuoteTotals = field(default_factory=QuoteTotals)

    def __post_init__(self) -> None:
        self.sqft = usable_sqft(self.sqft)
        self.recompute()

    @classmethod
    def for_services(
        cls,
        services: Iterable[Service],
        *,
        sqft: float | None = None,
        tax_rate: float = 0.0,
    ) -> "BookingQuote":
        """Create an empty quote over a catalog listing."""
        return cls(catalog={s.id: s for s in services}, sqft=sqft, tax_rate=tax_rate)

    @classmethod
    def from_shoot(cls, shoot: Shoot, services: Iterable[Service]) -> "BookingQuote":
        """Seed a quote from a saved shoot, keeping admin-entered tax figures."""
        catalog = {s.id: s for s in services}
        quote = cls(
            catalog=catalog,
            sqft=shoot.property_details.sqft,
            tax_rate=shoot.payment.tax_rate,
            selected_ids=[s.service_id for s in shoot.services],
        )
        for selected in shoot.services:
            service = catalog.get(selected.service_id)
            if service is None:
                continue
            base = resolve_price(service, quote.sqft).base_price
            if abs(selected.price - base) > TAX_TOLERANCE:
                quote.overrides[selected.service_id] = f"{selected.price:.2f}"
        quote.recompute()
        if abs(shoot.payment.tax_amount - quote.totals.tax_amount) > TAX_TOLERANCE:
            quote.set_manual_tax(shoot.payment.tax_amount)
        return quote

    def select_service(self, service_id: str) -> None:
        """Add a service to the selection."""
        if service_id not in self.selected_ids:
            self.selected_ids.append(service_id)
        self.recompute()

    def deselect_service(self, service_id: str) -> None:
        """Remove a service and forget its override."""
        if service_id in self.selected_ids:
            self.selected_ids.remove(service_id)
        self.overrides.pop(service_id, None)
        self.recompute()

    def toggle_service(self, service_id: str) -> None:
        """Select or deselect a service."""
        if service_id in self.selected_ids:
            self.deselect_service(service_id)
        else:
            self.select_service(service_id)

    def set_override(self, service_id: str, value: str | None) -> None:
        """Set or clear a manual price for a selected service."""
        if value in (None, ""):
            self.overrides.pop(service_id, None)
        else:
            self.overrides[service_id] = value
        self.recompute()

    def set_sqft(self, sqft: object) -> None:
        """Change the effective square footage."""
        self.sqft = usable_sqft(sqft)
        self.recompute()

    def set_tax_rate(self, rate: object) -> None:
        """Change the tax rate, as a fraction or a percentage."""
        self.tax_rate = to_float(rate)
        self.recompute()

    def set_manual_tax(self, amount: object) -> None:
        """Enter a tax amount by hand."""
        self.manual_tax_amount = to_float(amount)
        self.tax_amount_dirty = True
        self.recompute()

    def clear_manual_tax(self) -> None:
        """Return to automatic tax calculation."""
        self.tax_amount_dirty = False
        self.recompute()

    def recompute(self) -> QuoteTotals:
        """Resolve each selected service and rebuild the totals."""
        lines = []
        for service_id in self.selected_ids:
            service = self.catalog.get(service_id)
            if service is None:
                continue
            resolved = resolve_price(service, self.sqft, self.overrides.get(service_id))
            lines.append(
                QuoteLine(
                    service_id=service_id,
                    name=service.name,
                    price=resolved.price,
                    base_price=resolved.base_price,
                    has_override=resolved.has_override,
                    photographer_pay=pricing_for_sqft(
                        service, self.sqft
                    ).photographer_pay,
                )
            )
        base_quote = round(sum(line.price for line in lines), 2)
        rate = normalize_tax_rate(self.tax_rate)
        tax_amount = (
            self.manual_tax_amount
            if self.tax_amount_dirty
            else round(base_quote * rate, 2)
        )
        self.totals = QuoteTotals(
            lines=tuple(lines),
            base_quote=base_quote,
            tax_rate=rate,
            tax_amount=tax_amount,
            total_quote=round(base_quote + tax_amount, 2),
        )
        return self.totals

    def snapshot(self) -> list[SelectedService]:
        """Freeze the resolved prices for saving on a shoot."""
        return [
            SelectedService(
                service_id=line.service_id,
                price=line.price,
                photographer_pay=line.photographer_pay,
            )
            for line in self.totals.lines
        ]
