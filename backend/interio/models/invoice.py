"""Invoice (sales order) and payment models."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime
import uuid

InvoiceStatus = Literal[
    "pending",
    "confirmed",
    "in_production",
    "ready_for_delivery",
    "delivered",
    "completed",
    "cancelled",
]
PaymentStatus = Literal["unpaid", "partially_paid", "paid"]
PaymentMethod = Literal["cash", "bank_transfer", "check", "card", "upi", "other"]


class Invoice(BaseModel):
    """Invoice created from a saved quotation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier (UUID)")
    invoice_number: str = Field(..., description="SO-YYYY-NNN")
    quotation_id: str = Field(..., description="Source quotation ID")
    customer_id: str = Field(..., description="Customer ID")

    total_amount: float = Field(..., ge=0, description="Quotation final price at conversion")
    amount_paid: float = Field(0.0, ge=0)
    amount_due: float = Field(0.0, ge=0)

    status: InvoiceStatus = Field("pending", description="Order status")
    payment_status: PaymentStatus = Field("unpaid", description="Payment status")

    order_date: datetime = Field(default_factory=datetime.now)
    expected_delivery_date: Optional[datetime] = None
    notes: str = ""

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Payment(BaseModel):
    """A payment recorded against an invoice."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier (UUID)")
    invoice_id: str = Field(..., description="Invoice ID")
    amount: float = Field(..., gt=0, description="Amount received")
    payment_method: PaymentMethod = "cash"
    payment_date: datetime = Field(default_factory=datetime.now)
    transaction_id: str = Field(..., description="TXN-<timestamp>-<random>")
    receipt_number: str = Field(..., description="RCPT-YYYY-NNN")
    notes: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
