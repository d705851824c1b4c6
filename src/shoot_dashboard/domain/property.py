"""Domain models for address lookup and property metrics."""

from dataclasses import dataclass
from typing import Literal

SuggestionSource = Literal["listing", "parcel", "backend"]


@dataclass(frozen=True)
class AddressSuggestion:
    """A candidate address returned by the autocomplete search."""

    id: str
    full_address: str
    street_address: str
    city: str
    state: str
    zip_code: str
    source: SuggestionSource = "parcel"
    bedrooms: float | None = None
    bathrooms: float | None = None
    sqft: float | None = None
    garage_cars: int | None = None
    year_built: int | None = None


@dataclass(frozen=True)
class PropertyMetrics:
    """Property facts used to price and describe a shoot."""

    address: str
    city: str
    state: str
    zip_code: str
    bedrooms: float = 0
    bathrooms: float = 0
    sqft: float = 0
    garage: str = "N/A"
    garage_cars: int | None = None
    garage_sqft: float | None = None
    year_built: int = 0
    lot_size: str = "N/A"
