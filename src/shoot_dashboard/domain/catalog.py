"""Domain models for the service catalog."""

from dataclasses import dataclass, field
from enum import Enum


class PricingType(str, Enum):
    """How a service is priced."""

    FIXED = "fixed"
    VARIABLE = "variable"


@dataclass(frozen=True)
class SqftRange:
    """A square footage tier of a variable-priced service."""

    sqft_from: float
    sqft_to: float
    price: float
    duration: int | None = None
    photographer_pay: float | None = None
    photo_count: int | None = None
    id: int | None = None

    def contains(self, sqft: float) -> bool:
        """Return True when the square footage falls inside this tier."""
        return self.sqft_from <= sqft <= self.sqft_to


@dataclass(frozen=True)
class ServiceCategory:
    """A grouping of services shown as a tab in the dashboard."""

    id: str
    name: str
    icon: str | None = None


@dataclass(frozen=True)
class Service:
    """A sellable offering in the catalog."""

    id: str
    name: str
    price: float
    pricing_type: PricingType = PricingType.FIXED
    delivery_time: int | None = None
    photographer_required: bool = False
    photographer_pay: float | None = None
    category: ServiceCategory | None = None
    photo_count: int | None = None
    quantity: int | None = None
    sqft_ranges: tuple[SqftRange, ...] = field(default_factory=tuple)
    allow_multiple: bool = False
    description: str = ""
    icon: str | None = None
    active: bool = True

    @property
    def is_variable(self) -> bool:
        """Return True when the service uses square footage tiers."""
        return self.pricing_type is PricingType.VARIABLE


@dataclass(frozen=True)
class PricingInfo:
    """Price, pay and duration of a service at a given square footage."""

    price: float
    photographer_pay: float | None
    duration: int | None
    is_variable: bool
    matched_range: SqftRange | None


@dataclass(frozen=True)
class ResolvedPrice:
    """Unit price of a service after applying any manual override."""

    price: float
    base_price: float
    has_override: bool
