"""Models package."""

from .customer import Customer
from .quotation import Quotation, Room, LineItem, InstallationCharge, SQ_MM_PER_SQ_FT
from .app_settings import AppSettings
from .pricing import (
    QuotationTotals,
    RoomTotals,
    ValidationIssue,
    ValidationWarning,
    ValidationResult,
)
from .invoice import Invoice, Payment
from .catalog import AccessoryCatalogItem
from .responses import APIResponse, ErrorResponse

__all__ = [
    "Customer",
    "Quotation",
    "Room",
    "LineItem",
    "InstallationCharge",
    "SQ_MM_PER_SQ_FT",
    "AppSettings",
    "QuotationTotals",
    "RoomTotals",
    "ValidationIssue",
    "ValidationWarning",
    "ValidationResult",
    "Invoice",
    "Payment",
    "AccessoryCatalogItem",
    "APIResponse",
    "ErrorResponse",
]
