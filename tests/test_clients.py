"""
Tests for the Redis basket store

The Redis client is replaced by an AsyncMock, so these tests check key
layout, serialization, expiry and error propagation without a Redis server.
"""
import asyncio
import logging
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import ConnectionError as RedisConnectionError, TimeoutError as RedisTimeoutError

from basket_service.clients import RedisBasketStore
from basket_service.models import CustomerBasket
from basket_service.store import BasketNotFoundError
from tests.conftest import make_basket_payload


@pytest.fixture
def redis_client():
    return AsyncMock()


@pytest.fixture
def basket():
    return CustomerBasket.model_validate(make_basket_payload())


class TestRedisBasketStore:

    def test_write_stores_json_under_customer_id(self, redis_client, basket):
        store = RedisBasketStore(client=redis_client, ttl_seconds=0)

        asyncio.run(store.write(basket))

        redis_client.set.assert_awaited_once()
        args, kwargs = redis_client.set.call_args
        assert args[0] == "c1"
        assert CustomerBasket.model_validate_json(args[1]) == basket
        assert kwargs["ex"] is None

    def test_write_applies_ttl(self, redis_client, basket):
        store = RedisBasketStore(client=redis_client, ttl_seconds=3600)

        asyncio.run(store.write(basket))

        assert redis_client.set.call_args.kwargs["ex"] == 3600

    def test_read_parses_stored_json(self, redis_client, basket):
        redis_client.get.return_value = basket.model_dump_json()
        store = RedisBasketStore(client=redis_client)

        result = asyncio.run(store.read("c1"))

        redis_client.get.assert_awaited_once_with("c1")
        assert result == basket

    def test_read_missing_key_raises_not_found(self, redis_client):
        redis_client.get.return_value = None
        store = RedisBasketStore(client=redis_client)

        with pytest.raises(BasketNotFoundError) as exc_info:
            asyncio.run(store.read("unknown-id"))

        assert exc_info.value.customer_id == "unknown-id"

    def test_read_error_is_reraised(self, redis_client):
        redis_client.get.side_effect = RedisTimeoutError("Timeout reading from socket")
        store = RedisBasketStore(client=redis_client)

        with pytest.raises(RedisTimeoutError):
            asyncio.run(store.read("c1"))

    def test_read_corrupt_value_is_logged_and_reraised(self, redis_client, caplog):
        redis_client.get.return_value = '{"customerID": "c1", "items": [{"productID": "p1", "unitPrice": null}]}'
        store = RedisBasketStore(client=redis_client)

        with caplog.at_level(logging.ERROR, logger="basket_service.clients"):
            with pytest.raises(PydanticValidationError):
                asyncio.run(store.read("c1"))

        assert any("[Basket: c1]" in record.getMessage() for record in caplog.records)

    def test_delete_removes_key(self, redis_client):
        redis_client.delete.return_value = 0
        store = RedisBasketStore(client=redis_client)

        asyncio.run(store.delete("c1"))

        redis_client.delete.assert_awaited_once_with("c1")

    def test_write_error_is_reraised(self, redis_client, basket):
        redis_client.set.side_effect = RedisConnectionError("Connection refused")
        store = RedisBasketStore(client=redis_client)

        with pytest.raises(RedisConnectionError):
            asyncio.run(store.write(basket))

    def test_close_closes_client(self, redis_client):
        store = RedisBasketStore(client=redis_client)

        asyncio.run(store.close())

        redis_client.aclose.assert_awaited_once()
