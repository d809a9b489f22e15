"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
import tempfile
import shutil
from fastapi.testclient import TestClient

from interio import store as store_module
from interio.main import app
from interio.api.dependencies import get_file_manager
from interio.models import AppSettings, Customer
from interio.services.quotation_service import QuotationService
from interio.services.invoice_service import InvoiceService
from interio.services.service_factory import clear_all_service_caches
from interio.store import InMemoryStore
from interio.utils import FileManager


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_global_store():
    """Give every test a fresh global store and service singletons."""
    store_module._store = None
    clear_all_service_caches()
    yield
    store_module._store = None


@pytest.fixture
def mock_store():
    """Create an isolated in-memory store."""
    return InMemoryStore(cache_ttl=60, app_settings=AppSettings())


@pytest.fixture
def quotation_service(mock_store: InMemoryStore) -> QuotationService:
    """QuotationService over the isolated store."""
    return QuotationService(store=mock_store)


@pytest.fixture
def invoice_service(mock_store: InMemoryStore) -> InvoiceService:
    """InvoiceService over the isolated store."""
    return InvoiceService(store=mock_store)


@pytest.fixture
def customer(mock_store: InMemoryStore) -> Customer:
    """A stored customer."""
    customer = Customer(name="Demo Customer", email="demo@example.com", phone="9988776655")
    mock_store.add_customer(customer)
    return customer


@pytest.fixture
def client(temp_dir: Path):
    """Create FastAPI test client writing exports into a temp directory."""
    app.dependency_overrides[get_file_manager] = lambda: FileManager(export_dir=temp_dir)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_product_data():
    """Sample product: 1 x 10000 at 10% off."""
    return {
        "kind": "product",
        "name": "Modular Kitchen Base Unit",
        "selling_price": 10000,
        "discount_percent": 10,
        "quantity": 1,
    }


@pytest.fixture
def sample_accessory_data():
    """Sample accessory: 2 x 500, no discount."""
    return {
        "kind": "accessory",
        "name": "Handles - Brushed Steel",
        "selling_price": 500,
        "discount_percent": 0,
        "quantity": 2,
    }


@pytest.fixture
def sample_charge_data():
    """Sample installation charge: 1000mm x 1000mm at 130/sq.ft."""
    return {
        "cabinet_type": "Base unit",
        "width_mm": 1000,
        "height_mm": 1000,
        "price_per_sqft": 130,
    }


@pytest.fixture
def sample_room_data(sample_product_data, sample_accessory_data, sample_charge_data):
    """Sample room with one product, one accessory and one charge."""
    return {
        "name": "Kitchen",
        "description": "L-shaped kitchen",
        "products": [sample_product_data],
        "accessories": [sample_accessory_data],
        "installation_charges": [sample_charge_data],
    }


@pytest.fixture
def complete_quotation(quotation_service: QuotationService, customer: Customer, sample_room_data):
    """A quotation that passes validation."""
    return quotation_service.create_quotation(
        customer_id=customer.id,
        title="3BHK Whitefield",
        installation_handling=500,
        rooms=[sample_room_data],
    )


@pytest.fixture
def api_customer(client: TestClient) -> dict:
    """A customer created through the API."""
    response = client.post(
        "/api/customers",
        json={"name": "API Customer", "email": "api@example.com", "phone": "9876543210"},
    )
    return response.json()["data"]


@pytest.fixture
def api_quotation(client: TestClient, api_customer: dict, sample_room_data) -> dict:
    """A complete quotation created through the API."""
    response = client.post(
        "/api/quotations",
        json={
            "customer_id": api_customer["id"],
            "title": "API Project",
            "installation_handling": 500,
            "rooms": [sample_room_data],
        },
    )
    return response.json()["data"]
