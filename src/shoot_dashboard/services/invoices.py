"""Admin review of weekly invoices."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.invoices import Invoice
from shoot_dashboard.errors import DashboardError

PAYMENT_METHODS = {
    "square": "Card (Square)",
    "zelle": "Zelle",
    "cash": "Cash",
    "check": "Check",
    "ach": "ACH",
    "other": "Other",
}

_logger = logging.getLogger(__name__)


class InvoiceBackend(Protocol):
    """Backend interface for invoice approval."""

    async def pending_approval_invoices(
        self, session: AuthSession, page: int = 1, per_page: int = 15
    ) -> list[Invoice]:
        """Return invoices waiting for approval."""

    async def approve_invoice(self, session: AuthSession, invoice_id: str) -> Invoice:
        """Approve an invoice."""

    async def reject_invoice(
        self, session: AuthSession, invoice_id: str, reason: str
    ) -> Invoice:
        """Reject an invoice."""

    async def mark_invoice_paid(
        self, session: AuthSession, invoice_id: str, payload: dict[str, Any]
    ) -> Invoice:
        """Mark an invoice as paid."""


def normalize_payment_method(method: str | None) -> str | None:
    """Map legacy payment method names onto the supported set."""
    if not method:
        return None
    key = method.strip().lower()
    return {"manual": "other", "bank_transfer": "ach"}.get(key, key)


def payment_method_label(method: str | None) -> str:
    """Return the display label of a payment method."""
    normalized = normalize_payment_method(method)
    if normalized is None:
        return "N/A"
    return PAYMENT_METHODS.get(normalized, method or "N/A")


@dataclass
class InvoiceService:
    """Lists pending invoices and records approval decisions."""

    backend: InvoiceBackend

    async def pending(
        self, session: AuthSession, page: int = 1, per_page: int = 15
    ) -> list[Invoice]:
        """Return invoices awaiting approval."""
        return await self.backend.pending_approval_invoices(session, page, per_page)

    async def approve(self, session: AuthSession, invoice_id: str) -> Invoice:
        """Approve an invoice."""
        invoice = await self.backend.approve_invoice(session, invoice_id)
        _logger.info("Approved invoice %s", invoice_id)
        return invoice

    async def reject(
        self, session: AuthSession, invoice_id: str, reason: str
    ) -> Invoice:
        """Reject an invoice; a reason is mandatory."""
        if not reason.strip():
            raise DashboardError("A rejection reason is required.")
        invoice = await self.backend.reject_invoice(session, invoice_id, reason.strip())
        _logger.info("Rejected invoice %s", invoice_id)
        return invoice

    async def mark_paid(  # noqa: PLR0913
        self,
        session: AuthSession,
        invoice_id: str,
        amount: float,
        method: str,
        paid_on: date | None = None,
        details: dict[str, Any] | None = None,
    ) -> Invoice:
        """Record a payment against an invoice."""
        if amount < 0.01:
            raise DashboardError("Payment amount must be at least $0.01.")
        normalized = normalize_payment_method(method)
        if normalized not in PAYMENT_METHODS:
            raise DashboardError(f"Unsupported payment method: {method}")
        payload = {
            "amount_paid": round(amount, 2),
            "payment_method": normalized,
            "paid_at": (paid_on or date.today()).isoformat(),
            "payment_details": details,
        }
        return await self.backend.mark_invoice_paid(session, invoice_id, payload)
