"""
Shared fixtures and store test doubles for the basket service tests.
"""
import asyncio
import os

# No log file during tests; must be set before basket_service is imported
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from basket_service.main import create_app
from basket_service.models import CustomerBasket
from basket_service.store import BasketNotFoundError, InMemoryBasketStore


class RecordingStore(InMemoryBasketStore):
    """In-memory store that records every call as (operation, customer_id)."""

    def __init__(self):
        super().__init__()
        self.calls = []

    async def read(self, customer_id):
        self.calls.append(("read", customer_id))
        return await super().read(customer_id)

    async def write(self, basket):
        self.calls.append(("write", basket.customerID))
        await super().write(basket)

    async def delete(self, customer_id):
        self.calls.append(("delete", customer_id))
        await super().delete(customer_id)


class FailingStore(RecordingStore):
    """Recording store that raises the configured exception per operation."""

    def __init__(self, read_error=None, write_error=None, delete_error=None):
        super().__init__()
        self.read_error = read_error
        self.write_error = write_error
        self.delete_error = delete_error

    async def read(self, customer_id):
        if self.read_error is not None:
            self.calls.append(("read", customer_id))
            raise self.read_error
        return await super().read(customer_id)

    async def write(self, basket):
        if self.write_error is not None:
            self.calls.append(("write", basket.customerID))
            raise self.write_error
        await super().write(basket)

    async def delete(self, customer_id):
        if self.delete_error is not None:
            self.calls.append(("delete", customer_id))
            raise self.delete_error
        await super().delete(customer_id)


class StrictDeleteStore(RecordingStore):
    """Store that reports deleting a missing basket as BasketNotFoundError."""

    async def delete(self, customer_id):
        self.calls.append(("delete", customer_id))
        if customer_id not in self._baskets:
            raise BasketNotFoundError(customer_id)
        await InMemoryBasketStore.delete(self, customer_id)


class BlockingWriteStore(RecordingStore):
    """Store whose write never completes. Must be created inside a running loop."""

    def __init__(self):
        super().__init__()
        self.write_started = asyncio.Event()

    async def write(self, basket):
        self.calls.append(("write", basket.customerID))
        self.write_started.set()
        await asyncio.Event().wait()


def make_basket_payload(customer_id="c1", items=None):
    if items is None:
        items = [{"productID": "p1", "productName": "Widget", "unitPrice": 9.99, "quantity": 2}]
    return {"customerID": customer_id, "items": items}


@pytest.fixture
def basket_payload():
    return make_basket_payload()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def test_client(store):
    return TestClient(create_app(store))


@pytest.fixture
def seeded_store(store, basket_payload):
    asyncio.run(InMemoryBasketStore.write(store, CustomerBasket.model_validate(basket_payload)))
    return store
