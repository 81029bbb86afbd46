"""Pytest configuration and fixtures for the storefront catalog service."""

import asyncio

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.models.cart import CartMutationResponse
from src.models.catalog import InventoryFetchResult, InventoryLookupResult
from src.services.catalog.store import CatalogStore, get_catalog_store
from src.services.clients.cart_client import get_cart_client
from src.services.clients.inventory_client import get_inventory_client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


def raw_item(**overrides) -> dict:
    """Inventory record shaped like the storefront API returns it."""
    item = {
        "_id": "A1",
        "itemDescription": "UltraTech OPC 53 Grade Cement",
        "category": "Cement",
        "subCategory": "OPC",
        "grade": "53 Grade",
        "specification": "IS 12269",
        "details": "50 kg bag",
        "units": "BAG",
        "vendor": {"name": "UltraTech"},
        "primaryImage": "https://cdn.example.com/ultratech.png",
        "pricing": {"basePrice": 500, "unitPrice": 400},
        "totalPrice": 450,
        "isDeliveryAvailable": True,
        "warehouse": {"warehouseName": "Hyderabad", "stock": {"available": 120}},
    }
    item.update(overrides)
    return item


@pytest.fixture()
def make_item():
    """Factory for raw inventory records with per-test overrides."""
    return raw_item


class StubInventoryClient:
    def __init__(self) -> None:
        self.result = InventoryFetchResult(success=True, inventory=[raw_item()])
        self.categories = InventoryLookupResult(
            success=True, data={"Cement": ["OPC", "PPC"], "Steel": ["TMT"]}
        )
        self.subcategories = InventoryLookupResult(success=True, data=["OPC", "PPC"])
        self.item_pricing = InventoryLookupResult(success=True, data=raw_item())
        self.calls: list[dict] = []

    async def fetch_inventory(self, **params) -> InventoryFetchResult:
        await asyncio.sleep(0)
        self.calls.append(params)
        return self.result

    async def fetch_categories(self) -> InventoryLookupResult:
        await asyncio.sleep(0)
        return self.categories

    async def fetch_subcategories(self, category) -> InventoryLookupResult:
        await asyncio.sleep(0)
        self.calls.append({"subcategories": category})
        return self.subcategories

    async def fetch_item_pricing(self, item_id, pincode=None) -> InventoryLookupResult:
        await asyncio.sleep(0)
        self.calls.append({"item_id": item_id, "pincode": pincode})
        return self.item_pricing


class StubCartClient:
    def __init__(self) -> None:
        self.response = CartMutationResponse(success=True)
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    async def add_to_cart(self, product, quantity, *, pincode=None):
        await asyncio.sleep(0)
        self.calls.append((product.id, quantity, pincode))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def inventory_stub():
    """Provide a stub inventory client so tests do not call the storefront API."""
    from src.main import app

    stub = StubInventoryClient()
    app.dependency_overrides[get_inventory_client] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_inventory_client, None)


@pytest.fixture()
def cart_stub():
    """Provide a stub cart client that records every call."""
    from src.main import app

    stub = StubCartClient()
    app.dependency_overrides[get_cart_client] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_cart_client, None)


@pytest.fixture()
def catalog_store():
    """Give each test an empty catalog snapshot."""
    from src.main import app

    store = CatalogStore()
    app.dependency_overrides[get_catalog_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_catalog_store, None)


@pytest_asyncio.fixture()
async def client(inventory_stub, cart_stub, catalog_store):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client
