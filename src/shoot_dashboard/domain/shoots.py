"""Domain models for shoots."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Location:
    """Street address of a shoot or a photographer origin."""

    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    lat: float | None = None
    lon: float | None = None

    @property
    def is_complete(self) -> bool:
        """Return True when the address is precise enough to geocode."""
        return bool(self.address and self.city and self.state)

    @property
    def is_locatable(self) -> bool:
        """Return True when the location has coordinates or a geocodable address."""
        return (self.lat is not None and self.lon is not None) or self.is_complete

    def full_address(self) -> str:
        """Return the address parts joined for display or geocoding."""
        parts = [self.address, self.city, self.state, self.zip]
        return ", ".join(part.strip() for part in parts if part and part.strip())


@dataclass(frozen=True)
class PartyRef:
    """Reference to a client or photographer attached to a shoot."""

    id: str
    name: str
    email: str | None = None


@dataclass(frozen=True)
class PropertyDetails:
    """Property metrics and access notes for a shoot."""

    beds: float | None = None
    baths: float | None = None
    sqft: float | None = None
    access_notes: str | None = None


@dataclass(frozen=True)
class PaymentSummary:
    """Quote and payment totals for a shoot."""

    base_quote: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    total_quote: float = 0.0
    total_paid: float = 0.0

    @property
    def balance_due(self) -> float:
        """Return the outstanding amount, never negative."""
        return max(round(self.total_quote - self.total_paid, 2), 0.0)

    @property
    def is_paid(self) -> bool:
        """Return True when the remaining balance is within a cent."""
        return self.total_quote - self.total_paid <= 0.01


@dataclass(frozen=True)
class SelectedService:
    """A service attached to a shoot with its price frozen at save time."""

    service_id: str
    price: float
    quantity: int = 1
    photographer_pay: float | None = None


@dataclass(frozen=True)
class TourEmbed:
    """An HTML embed shown on the public tour page."""

    id: str
    title: str
    branded: str = ""
    mls: str = ""


TOUR_LINK_KEYS = (
    "branded",
    "mls",
    "generic_mls",
    "matterport_branded",
    "matterport_mls",
    "iguide_branded",
    "iguide_mls",
    "zillow_3d",
    "video_link",
)


@dataclass(frozen=True)
class TourLinks:
    """Virtual tour URLs and embeds published for a shoot."""

    links: dict[str, str] = field(default_factory=dict)
    embeds: tuple[TourEmbed, ...] = ()
    featured_embed_id: str | None = None
    tour_style: str = "default"
    settings: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> str:
        """Return a link by key, or an empty string."""
        return self.links.get(key, "")

    @property
    def has_matterport(self) -> bool:
        """Return True when any Matterport link is set."""
        return bool(self.get("matterport_branded") or self.get("matterport_mls"))

    @property
    def has_iguide(self) -> bool:
        """Return True when any iGUIDE link is set."""
        return bool(self.get("iguide_branded") or self.get("iguide_mls"))

    @property
    def has_zillow_3d(self) -> bool:
        """Return True when a Zillow 3D link is set."""
        return bool(self.get("zillow_3d"))


@dataclass(frozen=True)
class Shoot:
    """A scheduled photography engagement."""

    id: str
    scheduled_date: date | None
    time: str | None
    location: Location
    client: PartyRef | None = None
    photographer: PartyRef | None = None
    services: tuple[SelectedService, ...] = ()
    payment: PaymentSummary = field(default_factory=PaymentSummary)
    property_details: PropertyDetails = field(default_factory=PropertyDetails)
    tour_links: TourLinks = field(default_factory=TourLinks)
    status: str = "scheduled"
