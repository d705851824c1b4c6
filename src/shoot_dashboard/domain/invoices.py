"""Domain models for weekly photographer and sales rep invoices."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Literal

InvoiceItemType = Literal["charge", "expense", "payment"]


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class InvoiceItem:
    """A single line of an invoice."""

    id: str
    type: InvoiceItemType
    description: str
    quantity: float
    unit_amount: float
    total_amount: float
    shoot_id: str | None = None


@dataclass(frozen=True)
class Invoice:
    """A billing period rollup for a photographer or sales rep."""

    id: str
    status: InvoiceStatus
    billing_period_start: date | None
    billing_period_end: date | None
    total_amount: float
    amount_paid: float
    items: tuple[InvoiceItem, ...] = ()
    payee_name: str | None = None
    payee_role: Literal["photographer", "sales_rep"] | None = None
    approval_status: str | None = None
    rejection_reason: str | None = None

    @property
    def charges_total(self) -> float:
        """Return the sum of charge lines."""
        return round(sum(i.total_amount for i in self.items if i.type == "charge"), 2)

    @property
    def expenses_total(self) -> float:
        """Return the sum of expense lines."""
        return round(sum(i.total_amount for i in self.items if i.type == "expense"), 2)

    @property
    def balance_due(self) -> float:
        """Return the unpaid remainder of the invoice."""
        return round(self.total_amount - self.amount_paid, 2)
