"""Square footage tiered pricing for catalog services."""

import math
from collections.abc import Sequence

from shoot_dashboard.coercion import parse_number, to_float, usable_sqft
from shoot_dashboard.domain.catalog import (
    PricingInfo,
    ResolvedPrice,
    Service,
    SqftRange,
)
from shoot_dashboard.errors import InvalidSqftRangesError

OVERRIDE_TOLERANCE = 0.01
DEFAULT_RANGE_SPAN = 1499
DEFAULT_RANGE_DURATION = 60


def find_sqft_range(
    sqft_ranges: Sequence[SqftRange], sqft: float
) -> SqftRange | None:
    """Return the first tier containing the square footage, in insertion order."""
    for sqft_range in sqft_ranges:
        if sqft_range.contains(sqft):
            return sqft_range
    return None


def _matched_range(service: Service, sqft: object) -> SqftRange | None:
    resolved_sqft = usable_sqft(sqft)
    if resolved_sqft is None or not service.is_variable or not service.sqft_ranges:
        return None
    return find_sqft_range(service.sqft_ranges, resolved_sqft)


def calculate_service_price(service: Service, sqft: object) -> float:
    """Return the tier price for variable services, else the base price."""
    base_price = to_float(service.price)
    matched = _matched_range(service, sqft)
    if matched is None:
        return base_price
    return to_float(matched.price) or base_price


def pricing_for_sqft(service: Service, sqft: object) -> PricingInfo:
    """Return price, photographer pay and duration at a square footage."""
    matched = _matched_range(service, sqft)
    photographer_pay = service.photographer_pay
    duration = service.delivery_time
    if matched is not None:
        if matched.photographer_pay is not None:
            photographer_pay = matched.photographer_pay
        if matched.duration is not None:
            duration = matched.duration
    return PricingInfo(
        price=calculate_service_price(service, sqft),
        photographer_pay=photographer_pay,
        duration=duration,
        is_variable=service.is_variable,
        matched_range=matched,
    )


def resolve_price(
    service: Service, sqft: object, override_value: str | None = None
) -> ResolvedPrice:
    """Resolve the unit price of a service, honouring a material manual override."""
    base_price = calculate_service_price(service, sqft)
    parsed_override = (
        parse_number(override_value) if override_value not in (None, "") else math.nan
    )
    has_override = math.isfinite(parsed_override) and (
        (base_price == 0 and parsed_override > 0)
        or abs(parsed_override - base_price) > OVERRIDE_TOLERANCE
    )
    return ResolvedPrice(
        price=parsed_override if has_override else base_price,
        base_price=base_price,
        has_override=has_override,
    )


def validate_sqft_ranges(sqft_ranges: Sequence[SqftRange]) -> None:
    """Reject tiers that are inverted or overlap one another."""
    for sqft_range in sqft_ranges:
        if sqft_range.sqft_from > sqft_range.sqft_to:
            raise InvalidSqftRangesError(
                f"Range {sqft_range.sqft_from:g}-{sqft_range.sqft_to:g} "
                "starts after it ends."
            )
    ordered = sorted(sqft_ranges, key=lambda r: (r.sqft_from, r.sqft_to))
    for previous, current in zip(ordered, ordered[1:], strict=False):
        if current.sqft_from <= previous.sqft_to:
            raise InvalidSqftRangesError(
                f"Range {previous.sqft_from:g}-{previous.sqft_to:g} overlaps "
                f"{current.sqft_from:g}-{current.sqft_to:g}."
            )


def next_sqft_range(sqft_ranges: Sequence[SqftRange]) -> SqftRange:
    """Return the default tier appended after the last one."""
    start = sqft_ranges[-1].sqft_to + 1 if sqft_ranges else 1
    return SqftRange(
        sqft_from=start,
        sqft_to=start + DEFAULT_RANGE_SPAN,
        price=0,
        duration=DEFAULT_RANGE_DURATION,
    )


def format_price(amount: float) -> str:
    """Format an amount as a USD display string."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
