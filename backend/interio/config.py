"""Application configuration module."""

from pathlib import Path
from pydantic_settings import BaseSettings

# Resolve paths relative to this file so startup directory does not matter
_THIS_DIR = Path(__file__).parent  # backend/interio/
_BACKEND_ROOT = _THIS_DIR.parent  # backend/
_PROJECT_ROOT = _BACKEND_ROOT.parent  # repository root
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # Backend Configuration
    backend_host: str = "localhost"
    backend_port: int = 8000
    backend_debug: bool = False

    # Company shown on exported quotations
    company_name: str = "Interio Designs"
    company_address: str = "123 Design Avenue, Suite 456, Design District"
    company_phone: str = "+91 99887 76655"
    company_email: str = "info@interiodesigns.com"
    company_tax_id: str = "TAX123456789"

    # Seed values for AppSettings (editable at runtime through the API)
    default_gst_percent: float = 18.0
    default_global_discount: float = 0.0
    default_price_per_sqft: float = 130.0
    required_accessories: str = "skirting,handles,sliding mechanism,t profile"

    # Invoices
    invoice_delivery_days: int = 30

    # Exports
    export_dir: str = str(_BACKEND_ROOT / "exports")
    export_retention_days: int = 7

    # Store
    store_cache_ttl: int = 3600

    # Logging
    log_level: str = "INFO"

    @property
    def export_dir_path(self) -> Path:
        """Get export directory path as Path object (always absolute)."""
        path = Path(self.export_dir)
        if not path.is_absolute():
            path = _PROJECT_ROOT / path
        path.mkdir(parents=True, exist_ok=True)
        return path

    model_config = {
        "env_file": str(_ENV_FILE),
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
