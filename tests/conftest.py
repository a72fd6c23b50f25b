"""
SiteList Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    ├── memory_store:        Empty MemoryStore
    ├── collection_service:  CollectionService over memory_store
    ├── asset_service:       AssetService over memory_store
    ├── app:                 FastAPI app bound to memory_store
    ├── test_client:         HTTPX AsyncClient for endpoint testing
    └── post_action:         Helper that POSTs {action, ...} to /api/websites
"""

import asyncio
import os
from typing import Any, Optional

# Override settings for testing BEFORE any sitelist imports
os.environ["STORE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["EXPOSE_REQUEST_ID"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from sitelist.exceptions import StoreError
from sitelist.main import create_app
from sitelist.services.asset_service import AssetService
from sitelist.services.collection_service import CollectionService
from sitelist.storage.memory import MemoryStore


# ══════════════════════════════════════════════════════════════════════════
# Test doubles
# ══════════════════════════════════════════════════════════════════════════

class YieldingStore(MemoryStore):
    """MemoryStore that yields to the event loop on every call, exposing races."""

    async def read(self, key: str) -> Optional[bytes]:
        await asyncio.sleep(0)
        value = await super().read(key)
        await asyncio.sleep(0)
        return value

    async def write(self, key: str, value: bytes) -> None:
        await asyncio.sleep(0)
        await super().write(key, value)


class FailingStore(MemoryStore):
    """MemoryStore whose reads and/or writes raise StoreError."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def read(self, key: str) -> Optional[bytes]:
        if self.fail_reads:
            raise StoreError(message="simulated read failure", key=key)
        return await super().read(key)

    async def write(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise StoreError(message="simulated write failure", key=key)
        await super().write(key, value)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def collection_service(memory_store):
    return CollectionService(memory_store, key="websites")


@pytest.fixture
def asset_service(memory_store):
    return AssetService(memory_store)


@pytest.fixture
def app(memory_store):
    return create_app(store=memory_store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_preflight(test_client):
            response = await test_client.options("/anything")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def post_action(test_client):
    """POST a JSON action body to the API path and return the response."""

    async def _post(action: Any, path: str = "/api/websites", **fields: Any):
        body = {"action": action, **fields}
        return await test_client.post(path, json=body)

    return _post
