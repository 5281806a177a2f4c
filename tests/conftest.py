"""
Test Suite Configuration
"""
from datetime import datetime
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from studio.config import Settings
from studio.database.connection import Database
from studio.main import create_app
from studio.serving.api.deps import get_now

# Every API test runs at this instant
FROZEN_NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with the schema created"""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW


@pytest.fixture
def app(test_settings, database, now):
    """Application bound to the test database with a frozen clock"""
    application = create_app(settings=test_settings, database=database)
    application.dependency_overrides[get_now] = lambda: now
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
async def staff_member(client) -> dict:
    payload = {
        "staffEmail": "ansel@studio.test",
        "firstName": "Ansel",
        "lastName": "Adams",
        "role": "Photographer",
        "phone": "555-0100",
        "payRate": 45.00,
    }
    response = await client.post("/api/staff", json=payload)
    assert response.status_code == 201
    return payload


@pytest.fixture
async def client_record(client) -> dict:
    payload = {
        "clientEmail": "jane@x.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "phone": "555-0199",
        "city": "Springfield",
    }
    response = await client.post("/api/clients", json=payload)
    assert response.status_code == 201
    return payload


@pytest.fixture
async def products(client) -> list:
    payloads = [
        {"productId": "PRT-8X10", "productName": "8x10 Print", "costPrice": 6.00, "salePrice": 25.00, "stockLevel": 4},
        {"productId": "ALB-LTH", "productName": "Leather Album", "costPrice": 120.00, "salePrice": 450.00, "stockLevel": 12},
        {"productId": "FRM-OAK", "productName": "Oak Frame", "costPrice": 22.00, "salePrice": 65.00, "stockLevel": 30},
    ]
    for payload in payloads:
        response = await client.post("/api/products", json=payload)
        assert response.status_code == 201
    return payloads
