"""Pydantic models for dashboard API payloads."""

from datetime import date

from pydantic import BaseModel, Field

from shoot_dashboard.domain.catalog import (
    PricingType,
    Service,
    ServiceCategory,
    SqftRange,
)
from shoot_dashboard.domain.photographers import SortBy
from shoot_dashboard.domain.shoots import Location, PropertyDetails, TourEmbed


class SqftRangeIn(BaseModel):
    """Square footage tier payload."""

    sqft_from: float
    sqft_to: float
    price: float
    duration: int | None = None
    photographer_pay: float | None = None
    photo_count: int | None = None
    id: int | None = None

    def to_domain(self) -> SqftRange:
        """Convert to a domain tier."""
        return SqftRange(**self.model_dump())


class ServiceIn(BaseModel):
    """Service create/update payload."""

    name: str = Field(min_length=1)
    price: float = 0
    pricing_type: PricingType = PricingType.FIXED
    delivery_time: int | None = None
    photographer_required: bool = False
    photographer_pay: float | None = None
    category_id: str | None = None
    category_name: str | None = None
    photo_count: int | None = None
    quantity: int | None = None
    sqft_ranges: list[SqftRangeIn] = Field(default_factory=list)
    allow_multiple: bool = False
    description: str = ""
    icon: str | None = None
    active: bool = True

    def to_domain(self, service_id: str = "") -> Service:
        """Convert to a domain service."""
        category = None
        if self.category_id:
            category = ServiceCategory(
                id=self.category_id, name=self.category_name or self.category_id
            )
        return Service(
            id=service_id,
            name=self.name.strip(),
            price=self.price,
            pricing_type=self.pricing_type,
            delivery_time=self.delivery_time,
            photographer_required=self.photographer_required,
            photographer_pay=self.photographer_pay,
            category=category,
            photo_count=self.photo_count,
            quantity=self.quantity,
            sqft_ranges=tuple(r.to_domain() for r in self.sqft_ranges),
            allow_multiple=self.allow_multiple,
            description=self.description,
            icon=self.icon,
            active=self.active,
        )


class CategoryIn(BaseModel):
    """Category create payload."""

    name: str = Field(min_length=1)
    icon: str | None = None


class QuoteRequest(BaseModel):
    """Inputs for computing a booking quote."""

    service_ids: list[str] = Field(default_factory=list)
    sqft: float | str | None = None
    tax_rate: float | None = None
    overrides: dict[str, str] = Field(default_factory=dict)
    manual_tax_amount: float | None = None


class LocationIn(BaseModel):
    """Street address payload."""

    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    lat: float | None = None
    lon: float | None = None

    def to_domain(self) -> Location:
        """Convert to a domain location."""
        return Location(**self.model_dump())


class PropertyDetailsIn(BaseModel):
    """Property metrics payload."""

    beds: float | None = None
    baths: float | None = None
    sqft: float | None = None
    access_notes: str | None = None

    def to_domain(self) -> PropertyDetails:
        """Convert to domain property details."""
        return PropertyDetails(**self.model_dump())


class BookingRequest(QuoteRequest):
    """A booking submission: quote inputs plus scheduling details."""

    client_id: str
    scheduled_date: date
    time: str
    location: LocationIn
    property_details: PropertyDetailsIn = Field(default_factory=PropertyDetailsIn)
    photographer_id: str | None = None
    notes: str | None = None


class RankRequest(BaseModel):
    """Inputs for ranking photographers against a shoot."""

    shoot_date: date
    location: LocationIn
    time: str | None = None
    photographer_ids: list[str] = Field(default_factory=list)
    sort_by: SortBy = "distance"
    search_query: str = ""


class AssignPhotographerRequest(BaseModel):
    """Photographer assignment payload."""

    photographer_id: str


class TourEmbedIn(BaseModel):
    """Tour embed payload."""

    id: str
    title: str
    branded: str = ""
    mls: str = ""

    def to_domain(self) -> TourEmbed:
        """Convert to a domain embed."""
        return TourEmbed(**self.model_dump())


class TourLinksUpdate(BaseModel):
    """Tour link changes for a shoot."""

    links: dict[str, str] = Field(default_factory=dict)
    embeds: list[TourEmbedIn] | None = None
    tour_style: str | None = None


class DeclineRequest(BaseModel):
    """Shoot decline payload."""

    reason: str = ""


class RejectInvoiceRequest(BaseModel):
    """Invoice rejection payload."""

    reason: str


class MarkPaidRequest(BaseModel):
    """Invoice payment payload."""

    amount: float
    method: str
    paid_on: date | None = None
    details: dict[str, str] | None = None
