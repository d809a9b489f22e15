"""Invoices created from saved quotations, and their payment ledger."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..config import settings
from ..models import Invoice, Payment
from ..store import InMemoryStore, get_store
from ..utils import ErrorCode, build_model, raise_error, round_money

logger = logging.getLogger(__name__)


class InvoiceService:
    """Converts quotations to invoices and keeps amount paid / due current."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        """
        Initialize InvoiceService.

        Args:
            store: Backing store; None uses the global store
        """
        self.store = store or get_store()

    def convert_to_invoice(
        self,
        quotation_id: str,
        expected_delivery_date: Optional[datetime] = None,
        notes: str = "",
    ) -> Invoice:
        """
        Create an invoice for the quotation's final price.

        The quotation must be saved and not converted before; it is marked
        converted afterwards and can no longer be edited.

        Args:
            quotation_id: Quotation ID
            expected_delivery_date: Defaults to order date + configured days
            notes: Free-text notes

        Returns:
            The new Invoice

        Raises:
            APIError: QUOTATION_ALREADY_CONVERTED or QUOTATION_NOT_SAVED (409)
        """
        quotation = self.store.get_quotation(quotation_id)
        if quotation.status == "converted" or self.store.get_invoice_by_quotation(quotation_id):
            raise_error(ErrorCode.QUOTATION_ALREADY_CONVERTED, status_code=409)
        if quotation.status != "saved":
            raise_error(ErrorCode.QUOTATION_NOT_SAVED, status_code=409)

        now = datetime.now()
        seq = self.store.next_sequence("invoice")
        invoice = Invoice(
            invoice_number=f"SO-{now.year}-{seq:03d}",
            quotation_id=quotation.id,
            customer_id=quotation.customer_id,
            total_amount=quotation.final_price,
            amount_paid=0.0,
            amount_due=quotation.final_price,
            order_date=now,
            expected_delivery_date=(
                expected_delivery_date or now + timedelta(days=settings.invoice_delivery_days)
            ),
            notes=notes or "",
        )
        self.store.add_invoice(invoice)

        quotation.status = "converted"
        self.store.update_quotation(quotation)

        logger.info(
            f"Quotation {quotation.quotation_number} converted to invoice "
            f"{invoice.invoice_number} ({invoice.total_amount})"
        )
        return invoice

    def update_status(self, invoice_id: str, status: str) -> Invoice:
        """Change the order status of an invoice."""
        invoice = self.store.get_invoice(invoice_id)
        invoice = build_model(Invoice, {**invoice.model_dump(), "status": status})
        self.store.update_invoice(invoice)
        return invoice

    def record_payment(
        self,
        invoice_id: str,
        amount: float,
        payment_method: str = "cash",
        payment_date: Optional[datetime] = None,
        notes: str = "",
    ) -> Payment:
        """
        Record a payment and refresh the invoice ledger fields.

        Args:
            invoice_id: Invoice ID
            amount: Amount received (> 0, at most the amount due)
            payment_method: cash, bank_transfer, check, card, upi or other
            payment_date: Defaults to now
            notes: Free-text notes

        Returns:
            The stored Payment

        Raises:
            APIError: VALIDATION_ERROR when the amount rounds to zero,
                PAYMENT_EXCEEDS_DUE, INVOICE_CANCELLED
        """
        invoice = self.store.get_invoice(invoice_id)
        if invoice.status == "cancelled":
            raise_error(ErrorCode.INVOICE_CANCELLED, status_code=409)
        amount = round_money(amount)
        if amount <= 0:
            raise_error(
                ErrorCode.VALIDATION_ERROR,
                f"Payment amount must be at least 0.01, got {amount:.2f}",
            )
        if amount > invoice.amount_due:
            raise_error(
                ErrorCode.PAYMENT_EXCEEDS_DUE,
                f"Payment of {amount:.2f} exceeds the amount due of {invoice.amount_due:.2f}",
            )

        now = datetime.now()
        seq = self.store.next_sequence("receipt")
        payment = build_model(
            Payment,
            {
                "invoice_id": invoice.id,
                "amount": amount,
                "payment_method": payment_method,
                "payment_date": payment_date or now,
                "transaction_id": f"TXN-{int(now.timestamp() * 1000)}-{secrets.token_hex(3).upper()}",
                "receipt_number": f"RCPT-{now.year}-{seq:03d}",
                "notes": notes or "",
            },
        )
        self.store.add_payment(payment)
        self.refresh_ledger(invoice_id)
        return payment

    def delete_payment(self, payment_id: str) -> Invoice:
        """Delete a payment and return the refreshed invoice."""
        payment = self.store.get_payment(payment_id)
        self.store.delete_payment(payment_id)
        return self.refresh_ledger(payment.invoice_id)

    def refresh_ledger(self, invoice_id: str) -> Invoice:
        """
        Recompute amount paid, amount due and payment status from payments.

        Args:
            invoice_id: Invoice ID

        Returns:
            Updated Invoice
        """
        invoice = self.store.get_invoice(invoice_id)
        paid = round_money(sum(p.amount for p in self.store.get_payments_by_invoice(invoice_id)))

        invoice.amount_paid = paid
        invoice.amount_due = max(round_money(invoice.total_amount - paid), 0.0)
        if invoice.amount_due == 0:
            invoice.payment_status = "paid"
        elif paid > 0:
            invoice.payment_status = "partially_paid"
        else:
            invoice.payment_status = "unpaid"

        self.store.update_invoice(invoice)
        return invoice

    def invoice_details(self, invoice_id: str) -> Dict[str, Any]:
        """Invoice with its payments."""
        invoice = self.store.get_invoice(invoice_id)
        return {
            **invoice.model_dump(),
            "payments": [p.model_dump() for p in self.store.get_payments_by_invoice(invoice_id)],
        }

    def customer_ledger(self, customer_id: str) -> Dict[str, Any]:
        """
        Summarise a customer's invoices and payments.

        Args:
            customer_id: Customer ID

        Returns:
            Dict with invoices (each with payments), total_invoiced,
            total_paid and balance
        """
        customer = self.store.get_customer(customer_id)
        invoices: List[Invoice] = self.store.list_invoices(customer_id=customer_id)
        active = [inv for inv in invoices if inv.status != "cancelled"]

        total_invoiced = round_money(sum(inv.total_amount for inv in active))
        total_paid = round_money(sum(inv.amount_paid for inv in active))
        return {
            "customer": customer.model_dump(),
            "invoices": [self.invoice_details(inv.id) for inv in invoices],
            "total_invoiced": total_invoiced,
            "total_paid": total_paid,
            "balance": round_money(total_invoiced - total_paid),
        }
