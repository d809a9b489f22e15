"""In-memory store for customers, quotations, invoices, payments and settings."""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional
from cachetools import TTLCache

from .config import settings
from .models import (
    AccessoryCatalogItem,
    AppSettings,
    Customer,
    Invoice,
    Payment,
    Quotation,
)
from .utils import ErrorCode, raise_error


logger = logging.getLogger(__name__)


class InMemoryStore:
    """In-memory storage for all application data."""

    def __init__(self, cache_ttl: int = 3600, app_settings: Optional[AppSettings] = None):
        """
        Initialize InMemoryStore.

        Args:
            cache_ttl: Time-to-live in seconds of the recently-used caches
            app_settings: Initial AppSettings (defaults seeded from config)
        """
        self.cache_ttl = cache_ttl

        self.customers: Dict[str, Customer] = {}

        self.quotations: Dict[str, Quotation] = {}
        self.quotation_cache = TTLCache(maxsize=100, ttl=cache_ttl)

        self.invoices: Dict[str, Invoice] = {}
        self.invoice_cache = TTLCache(maxsize=100, ttl=cache_ttl)

        self.payments: Dict[str, Payment] = {}

        self.accessory_catalog: Dict[str, AccessoryCatalogItem] = {}

        self.app_settings: AppSettings = app_settings or default_app_settings()

        # Document number sequences
        self._sequence_lock = threading.Lock()
        self._sequences: Dict[str, int] = {"quotation": 0, "invoice": 0, "receipt": 0}

        logger.info("InMemoryStore initialized")

    def next_sequence(self, name: str) -> int:
        """
        Return the next value of a document number sequence.

        Args:
            name: quotation, invoice or receipt

        Returns:
            1-based sequence number
        """
        with self._sequence_lock:
            self._sequences[name] = self._sequences.get(name, 0) + 1
            return self._sequences[name]

    # ===== Customer Management =====

    def add_customer(self, customer: Customer) -> None:
        """Add a customer."""
        self.customers[customer.id] = customer
        logger.info(f"Customer added: {customer.id}")

    def get_customer(self, customer_id: str) -> Customer:
        """
        Get a customer by ID.

        Raises:
            APIError: If customer not found
        """
        if customer_id not in self.customers:
            raise_error(ErrorCode.CUSTOMER_NOT_FOUND, status_code=404)
        return self.customers[customer_id]

    def list_customers(self) -> List[Customer]:
        """List all customers, newest first."""
        return sorted(self.customers.values(), key=lambda c: c.created_at, reverse=True)

    def update_customer(self, customer: Customer) -> None:
        """Replace a stored customer."""
        if customer.id not in self.customers:
            raise_error(ErrorCode.CUSTOMER_NOT_FOUND, status_code=404)
        self.customers[customer.id] = customer
        logger.info(f"Customer updated: {customer.id}")

    def delete_customer(self, customer_id: str) -> None:
        """Delete a customer."""
        if customer_id not in self.customers:
            raise_error(ErrorCode.CUSTOMER_NOT_FOUND, status_code=404)
        del self.customers[customer_id]
        logger.info(f"Customer deleted: {customer_id}")

    # ===== Quotation Management =====

    def add_quotation(self, quotation: Quotation) -> None:
        """Add a quotation."""
        self.quotations[quotation.id] = quotation
        self.quotation_cache[quotation.id] = quotation
        logger.info(f"Quotation added: {quotation.id}")

    def get_quotation(self, quotation_id: str) -> Quotation:
        """
        Get a quotation by ID.

        Raises:
            APIError: If quotation not found
        """
        if quotation_id not in self.quotations:
            raise_error(ErrorCode.QUOTATION_NOT_FOUND, status_code=404)
        return self.quotations[quotation_id]

    def list_quotations(self, customer_id: Optional[str] = None) -> List[Quotation]:
        """
        List quotations, newest first.

        Args:
            customer_id: Only return quotations of this customer
        """
        quotations = [
            q for q in self.quotations.values()
            if customer_id is None or q.customer_id == customer_id
        ]
        quotations.sort(key=lambda q: q.created_at, reverse=True)
        return quotations

    def update_quotation(self, quotation: Quotation) -> None:
        """Replace a stored quotation."""
        if quotation.id not in self.quotations:
            raise_error(ErrorCode.QUOTATION_NOT_FOUND, status_code=404)
        quotation.updated_at = datetime.now()
        self.quotations[quotation.id] = quotation
        self.quotation_cache[quotation.id] = quotation
        logger.info(f"Quotation updated: {quotation.id}")

    def delete_quotation(self, quotation_id: str) -> None:
        """Delete a quotation."""
        if quotation_id not in self.quotations:
            raise_error(ErrorCode.QUOTATION_NOT_FOUND, status_code=404)
        del self.quotations[quotation_id]
        self.quotation_cache.pop(quotation_id, None)
        logger.info(f"Quotation deleted: {quotation_id}")

    # ===== Invoice Management =====

    def add_invoice(self, invoice: Invoice) -> None:
        """Add an invoice."""
        self.invoices[invoice.id] = invoice
        self.invoice_cache[invoice.id] = invoice
        logger.info(f"Invoice added: {invoice.id}")

    def get_invoice(self, invoice_id: str) -> Invoice:
        """
        Get an invoice by ID.

        Raises:
            APIError: If invoice not found
        """
        if invoice_id not in self.invoices:
            raise_error(ErrorCode.INVOICE_NOT_FOUND, status_code=404)
        return self.invoices[invoice_id]

    def get_invoice_by_quotation(self, quotation_id: str) -> Optional[Invoice]:
        """Invoice created from a quotation, if any."""
        return next(
            (inv for inv in self.invoices.values() if inv.quotation_id == quotation_id),
            None,
        )

    def list_invoices(self, customer_id: Optional[str] = None) -> List[Invoice]:
        """List invoices, newest first."""
        invoices = [
            inv for inv in self.invoices.values()
            if customer_id is None or inv.customer_id == customer_id
        ]
        invoices.sort(key=lambda inv: inv.order_date, reverse=True)
        return invoices

    def update_invoice(self, invoice: Invoice) -> None:
        """Replace a stored invoice."""
        if invoice.id not in self.invoices:
            raise_error(ErrorCode.INVOICE_NOT_FOUND, status_code=404)
        invoice.updated_at = datetime.now()
        self.invoices[invoice.id] = invoice
        self.invoice_cache[invoice.id] = invoice
        logger.info(f"Invoice updated: {invoice.id}")

    # ===== Payment Management =====

    def add_payment(self, payment: Payment) -> None:
        """Add a payment."""
        self.payments[payment.id] = payment
        logger.info(f"Payment added: {payment.id} ({payment.amount})")

    def get_payment(self, payment_id: str) -> Payment:
        """
        Get a payment by ID.

        Raises:
            APIError: If payment not found
        """
        if payment_id not in self.payments:
            raise_error(ErrorCode.PAYMENT_NOT_FOUND, status_code=404)
        return self.payments[payment_id]

    def get_payments_by_invoice(self, invoice_id: str) -> List[Payment]:
        """Payments of an invoice, oldest first."""
        payments = [p for p in self.payments.values() if p.invoice_id == invoice_id]
        payments.sort(key=lambda p: p.payment_date)
        return payments

    def delete_payment(self, payment_id: str) -> None:
        """Delete a payment."""
        if payment_id not in self.payments:
            raise_error(ErrorCode.PAYMENT_NOT_FOUND, status_code=404)
        del self.payments[payment_id]
        logger.info(f"Payment deleted: {payment_id}")

    # ===== Accessory Catalogue =====

    def add_catalog_item(self, item: AccessoryCatalogItem) -> None:
        """Add an accessory catalogue item."""
        self.accessory_catalog[item.id] = item
        logger.info(f"Catalogue item added: {item.id} ({item.code})")

    def get_catalog_item(self, item_id: str) -> AccessoryCatalogItem:
        """
        Get an accessory catalogue item by ID.

        Raises:
            APIError: If item not found
        """
        if item_id not in self.accessory_catalog:
            raise_error(ErrorCode.ACCESSORY_NOT_FOUND, status_code=404)
        return self.accessory_catalog[item_id]

    def list_catalog_items(self, category: Optional[str] = None) -> List[AccessoryCatalogItem]:
        """Catalogue items ordered by code, optionally of one category."""
        items = [
            item for item in self.accessory_catalog.values()
            if category is None or item.category == category
        ]
        items.sort(key=lambda item: item.code)
        return items

    def update_catalog_item(self, item: AccessoryCatalogItem) -> None:
        """Replace a stored catalogue item."""
        if item.id not in self.accessory_catalog:
            raise_error(ErrorCode.ACCESSORY_NOT_FOUND, status_code=404)
        self.accessory_catalog[item.id] = item
        logger.info(f"Catalogue item updated: {item.id}")

    def delete_catalog_item(self, item_id: str) -> None:
        """Delete a catalogue item."""
        if item_id not in self.accessory_catalog:
            raise_error(ErrorCode.ACCESSORY_NOT_FOUND, status_code=404)
        del self.accessory_catalog[item_id]
        logger.info(f"Catalogue item deleted: {item_id}")

    # ===== Settings =====

    def get_app_settings(self) -> AppSettings:
        """Current AppSettings (a copy, so callers cannot mutate the store)."""
        return self.app_settings.model_copy(deep=True)

    def update_app_settings(self, app_settings: AppSettings) -> None:
        """Replace AppSettings."""
        app_settings.updated_at = datetime.now()
        self.app_settings = app_settings
        logger.info("App settings updated")

    # ===== Utility Methods =====

    def get_stats(self) -> Dict[str, int]:
        """
        Get store statistics.

        Returns:
            Dictionary with counts of stored records
        """
        return {
            "customers": len(self.customers),
            "quotations": len(self.quotations),
            "invoices": len(self.invoices),
            "payments": len(self.payments),
            "accessory_catalog": len(self.accessory_catalog),
        }


def default_app_settings() -> AppSettings:
    """AppSettings seeded from environment configuration."""
    return AppSettings(
        default_gst_percent=settings.default_gst_percent,
        default_global_discount=settings.default_global_discount,
        default_price_per_sqft=settings.default_price_per_sqft,
        required_accessories=settings.required_accessories,
    )


# Global store instance (singleton pattern)
_store: Optional[InMemoryStore] = None


def get_store(cache_ttl: int = 3600) -> InMemoryStore:
    """
    Get or create global store instance.

    Args:
        cache_ttl: Cache time-to-live in seconds

    Returns:
        InMemoryStore instance
    """
    global _store
    if _store is None:
        _store = InMemoryStore(cache_ttl=cache_ttl)
    return _store
