"""FastAPI application entry point."""

import logging
import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .config import settings
from .store import get_store
from .utils import APIError, ErrorCode, FileManager
from .models import ErrorResponse


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Interio Quotation Service"
VERSION = "0.1.0"


async def cleanup_exports() -> None:
    """Background task to delete old exported files."""
    try:
        file_manager = FileManager(export_dir=settings.export_dir_path)
        deleted = file_manager.cleanup_exports(days=settings.export_retention_days)
        logger.info(f"Cleaned up {deleted} exported files")
    except OSError as e:
        logger.error(f"Cleanup task failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Application starting up...")
    logger.info(f"Settings: host={settings.backend_host}, port={settings.backend_port}")
    logger.info(f"Export directory: {settings.export_dir}")
    logger.info(f"Store stats: {get_store(cache_ttl=settings.store_cache_ttl).get_stats()}")

    # Schedule cleanup task (every 24 hours)
    async def run_cleanup():
        while True:
            await asyncio.sleep(86400)  # 24 hours
            await cleanup_exports()

    cleanup_task = asyncio.create_task(run_cleanup())

    yield

    # Shutdown
    logger.info("Application shutting down...")
    cleanup_task.cancel()
    logger.info("Application stopped")


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Quotations, invoices and payments for interior design projects",
    version=VERSION,
    lifespan=lifespan,
)


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handler for APIError
@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle API errors with proper response format."""
    error_response = ErrorResponse(
        success=False,
        message=exc.message,
        error_code=exc.error_code.value,
        data=exc.details,
    )
    logger.error(f"APIError: {exc.error_code} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_response),
    )


# General exception handler
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions."""
    error_response = ErrorResponse(
        success=False,
        message="Internal server error",
        error_code=ErrorCode.INTERNAL_ERROR.value,
    )
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=jsonable_encoder(error_response),
    )


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        Health status and store statistics
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "store": get_store(cache_ttl=settings.store_cache_ttl).get_stats(),
    }


# Register API routers
from .api.routes import health, customers, quotations, invoices, accessory_catalog
from .api.routes import utils as utils_routes
from .api.routes import settings as settings_routes

app.include_router(health.router)
app.include_router(customers.router)
app.include_router(quotations.router)
app.include_router(invoices.router)
app.include_router(accessory_catalog.router)
app.include_router(settings_routes.router)
app.include_router(utils_routes.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.backend_debug,
    )
