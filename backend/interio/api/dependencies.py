"""API dependencies and injection."""

from typing import Annotated
from fastapi import Depends
import logging

from ..store import InMemoryStore, get_store
from ..services.quotation_service import QuotationService
from ..services.invoice_service import InvoiceService
from ..services.excel_generator import ExcelGeneratorService
from ..utils import FileManager
from ..config import settings


logger = logging.getLogger(__name__)


def get_store_dependency() -> InMemoryStore:
    """
    Dependency to get the in-memory store.

    Returns:
        InMemoryStore instance
    """
    return get_store(cache_ttl=settings.store_cache_ttl)


def get_quotation_service(store: Annotated[InMemoryStore, Depends(get_store_dependency)]) -> QuotationService:
    """Dependency to get a QuotationService bound to the request's store."""
    return QuotationService(store=store)


def get_invoice_service(store: Annotated[InMemoryStore, Depends(get_store_dependency)]) -> InvoiceService:
    """Dependency to get an InvoiceService bound to the request's store."""
    return InvoiceService(store=store)


def get_file_manager() -> FileManager:
    """
    Dependency to get file manager.

    Returns:
        FileManager instance
    """
    return FileManager(export_dir=settings.export_dir_path)


FileManagerDep = Annotated[FileManager, Depends(get_file_manager)]


def get_excel_generator_dependency(file_manager: FileManagerDep) -> ExcelGeneratorService:
    """Dependency to get the Excel generator writing into the export directory."""
    return ExcelGeneratorService(file_manager=file_manager)


# Type aliases for common dependencies
StoreDep = Annotated[InMemoryStore, Depends(get_store_dependency)]
QuotationServiceDep = Annotated[QuotationService, Depends(get_quotation_service)]
InvoiceServiceDep = Annotated[InvoiceService, Depends(get_invoice_service)]
ExcelGeneratorDep = Annotated[ExcelGeneratorService, Depends(get_excel_generator_dependency)]
