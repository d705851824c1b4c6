"""Admin-only endpoints guarded by a shared token."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from shoot_dashboard.api.dependencies import get_container, get_session
from shoot_dashboard.api.models import MarkPaidRequest, RejectInvoiceRequest
from shoot_dashboard.domain.auth import AuthSession  # noqa: TC001
from shoot_dashboard.services.invoices import payment_method_label

if TYPE_CHECKING:
    from shoot_dashboard.containers import AppContainer


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/invoices", tags=["invoices"], dependencies=[Depends(require_admin)]
)


@router.get("/pending")
async def pending_invoices(
    request: Request,
    page: int = 1,
    per_page: int = 15,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Return invoices waiting for approval."""
    container = get_container(request)
    invoices = await container.invoice_service.pending(session, page, per_page)
    return {
        "invoices": [
            {
                "invoice": invoice,
                "charges_total": invoice.charges_total,
                "expenses_total": invoice.expenses_total,
                "balance_due": invoice.balance_due,
            }
            for invoice in invoices
        ]
    }


@router.post("/{invoice_id}/approve")
async def approve_invoice(
    invoice_id: str, request: Request, session: AuthSession = Depends(get_session)
) -> dict[str, object]:
    """Approve an invoice."""
    container = get_container(request)
    invoice = await container.invoice_service.approve(session, invoice_id)
    return {"invoice": invoice}


@router.post("/{invoice_id}/reject")
async def reject_invoice(
    invoice_id: str,
    body: RejectInvoiceRequest,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Reject an invoice with a reason."""
    container = get_container(request)
    invoice = await container.invoice_service.reject(session, invoice_id, body.reason)
    return {"invoice": invoice}


@router.post("/{invoice_id}/mark-paid")
async def mark_invoice_paid(
    invoice_id: str,
    body: MarkPaidRequest,
    request: Request,
    session: AuthSession = Depends(get_session),
) -> dict[str, object]:
    """Record a payment against an invoice."""
    container = get_container(request)
    invoice = await container.invoice_service.mark_paid(
        session,
        invoice_id,
        amount=body.amount,
        method=body.method,
        paid_on=body.paid_on,
        details=body.details,
    )
    return {"invoice": invoice, "payment_method": payment_method_label(body.method)}
