"""Invoice and payment API routes."""

import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ...models import APIResponse
from ...models.invoice import InvoiceStatus, PaymentMethod
from ...api.dependencies import InvoiceServiceDep, StoreDep
from ...utils import log_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Invoice"])


class InvoiceStatusRequest(BaseModel):
    """Request model for changing the order status of an invoice."""
    status: InvoiceStatus


class PaymentRequest(BaseModel):
    """Request model for recording a payment."""
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = "cash"
    payment_date: Optional[datetime] = None
    notes: str = ""


@router.get(
    "/invoices",
    response_model=APIResponse,
    summary="List invoices",
)
async def list_invoices(
    store: StoreDep,
    customer_id: Optional[str] = Query(None, description="Only this customer's invoices"),
) -> dict:
    """List invoices, newest first."""
    try:
        invoices = store.list_invoices(customer_id=customer_id)

        return {
            "success": True,
            "message": f"Found {len(invoices)} invoice(s)",
            "data": {
                "invoices": [inv.model_dump() for inv in invoices],
                "total": len(invoices),
            },
        }

    except Exception as e:
        log_error(e, context="List invoices")
        raise


@router.get(
    "/invoices/{invoice_id}",
    response_model=APIResponse,
    summary="Get invoice",
)
async def get_invoice(invoice_id: str, invoice_service: InvoiceServiceDep) -> dict:
    """Get an invoice with its payments."""
    try:
        details = invoice_service.invoice_details(invoice_id)

        return {
            "success": True,
            "message": "Invoice found",
            "data": details,
        }

    except Exception as e:
        log_error(e, context=f"Get invoice: {invoice_id}")
        raise


@router.put(
    "/invoices/{invoice_id}/status",
    response_model=APIResponse,
    summary="Update invoice status",
)
async def update_invoice_status(
    invoice_id: str,
    request: InvoiceStatusRequest,
    invoice_service: InvoiceServiceDep,
) -> dict:
    """Move the order through pending, confirmed, in_production, ... or cancel it."""
    try:
        invoice = invoice_service.update_status(invoice_id, request.status)

        return {
            "success": True,
            "message": f"Invoice {invoice.invoice_number} is {invoice.status}",
            "data": invoice.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update invoice status: {invoice_id}")
        raise


@router.post(
    "/invoices/{invoice_id}/payments",
    status_code=201,
    response_model=APIResponse,
    summary="Record payment",
)
async def record_payment(
    invoice_id: str,
    request: PaymentRequest,
    invoice_service: InvoiceServiceDep,
) -> dict:
    """
    Record a payment against an invoice.

    - **amount**: must not exceed the amount due
    - **payment_method**: cash, bank_transfer, check, card, upi or other
    """
    try:
        payment = invoice_service.record_payment(
            invoice_id,
            amount=request.amount,
            payment_method=request.payment_method,
            payment_date=request.payment_date,
            notes=request.notes,
        )

        return {
            "success": True,
            "message": f"Payment recorded: {payment.receipt_number}",
            "data": {
                "payment": payment.model_dump(),
                "invoice": invoice_service.store.get_invoice(invoice_id).model_dump(),
            },
        }

    except Exception as e:
        log_error(e, context=f"Record payment: {invoice_id}")
        raise


@router.delete(
    "/payments/{payment_id}",
    response_model=APIResponse,
    summary="Delete payment",
)
async def delete_payment(payment_id: str, invoice_service: InvoiceServiceDep) -> dict:
    """Delete a payment; the invoice's paid / due amounts are recomputed."""
    try:
        invoice = invoice_service.delete_payment(payment_id)

        return {
            "success": True,
            "message": "Payment deleted",
            "data": invoice.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Delete payment: {payment_id}")
        raise
