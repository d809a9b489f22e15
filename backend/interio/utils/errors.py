"""Error handling utilities."""

from enum import Enum
from typing import Optional, Any, Dict
import logging


logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Error code enumeration."""

    # Data validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Resource errors
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    QUOTATION_NOT_FOUND = "QUOTATION_NOT_FOUND"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INSTALLATION_CHARGE_NOT_FOUND = "INSTALLATION_CHARGE_NOT_FOUND"
    INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"
    ACCESSORY_NOT_FOUND = "ACCESSORY_NOT_FOUND"

    # Quotation workflow errors
    QUOTATION_INVALID = "QUOTATION_INVALID"
    QUOTATION_LOCKED = "QUOTATION_LOCKED"
    QUOTATION_NOT_SAVED = "QUOTATION_NOT_SAVED"
    QUOTATION_ALREADY_CONVERTED = "QUOTATION_ALREADY_CONVERTED"
    CUSTOMER_HAS_QUOTATIONS = "CUSTOMER_HAS_QUOTATIONS"

    # Ledger errors
    PAYMENT_EXCEEDS_DUE = "PAYMENT_EXCEEDS_DUE"
    INVOICE_CANCELLED = "INVOICE_CANCELLED"

    # Processing errors
    VALIDATION_UNAVAILABLE = "VALIDATION_UNAVAILABLE"
    EXPORT_FAILED = "EXPORT_FAILED"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    # Data validation errors
    ErrorCode.VALIDATION_ERROR: "Data validation failed",
    ErrorCode.INVALID_REQUEST: "Invalid request",

    # Resource errors
    ErrorCode.CUSTOMER_NOT_FOUND: "Customer not found",
    ErrorCode.QUOTATION_NOT_FOUND: "Quotation not found",
    ErrorCode.ROOM_NOT_FOUND: "Room not found",
    ErrorCode.ITEM_NOT_FOUND: "Line item not found",
    ErrorCode.INSTALLATION_CHARGE_NOT_FOUND: "Installation charge not found",
    ErrorCode.INVOICE_NOT_FOUND: "Invoice not found",
    ErrorCode.PAYMENT_NOT_FOUND: "Payment not found",
    ErrorCode.ACCESSORY_NOT_FOUND: "Accessory catalogue item not found",

    # Quotation workflow errors
    ErrorCode.QUOTATION_INVALID: "Quotation is incomplete and cannot be saved",
    ErrorCode.QUOTATION_LOCKED: "Quotation has been converted and can no longer be edited",
    ErrorCode.QUOTATION_NOT_SAVED: "Only saved quotations can be converted to an invoice",
    ErrorCode.QUOTATION_ALREADY_CONVERTED: "Quotation has already been converted to an invoice",
    ErrorCode.CUSTOMER_HAS_QUOTATIONS: "Customer still has quotations",

    # Ledger errors
    ErrorCode.PAYMENT_EXCEEDS_DUE: "Payment amount exceeds the amount due",
    ErrorCode.INVOICE_CANCELLED: "Invoice has been cancelled",

    # Processing errors
    ErrorCode.VALIDATION_UNAVAILABLE: "Could not validate quotation",
    ErrorCode.EXPORT_FAILED: "Export failed",

    # Server errors
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}


class APIError(Exception):
    """Custom API error exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        status_code: int = 400,
        details: Optional[Any] = None,
    ):
        """
        Initialize APIError.

        Args:
            error_code: Error code from ErrorCode enum
            message: Custom error message (overrides default)
            status_code: HTTP status code
            details: Additional error details, returned as ``data``
        """
        self.error_code = error_code
        self.message = message or ERROR_MESSAGES.get(error_code, "An error occurred")
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation."""
        return self.message


def raise_error(
    error_code: ErrorCode,
    message: Optional[str] = None,
    status_code: int = 400,
    details: Optional[Any] = None,
) -> None:
    """
    Raise an API error.

    Args:
        error_code: Error code from ErrorCode enum
        message: Custom error message (overrides default)
        status_code: HTTP status code
        details: Additional error details

    Raises:
        APIError: Always raises APIError with provided parameters
    """
    raise APIError(
        error_code=error_code,
        message=message,
        status_code=status_code,
        details=details,
    )


def log_error(error: Exception, context: str = "") -> None:
    """
    Log an error with context.

    Args:
        error: Exception to log
        context: Context description
    """
    if isinstance(error, APIError):
        logger.error(
            f"APIError [{context}]: {error.error_code} - {error.message}",
            extra={"details": error.details},
        )
    else:
        logger.error(f"Error [{context}]: {str(error)}", exc_info=True)
