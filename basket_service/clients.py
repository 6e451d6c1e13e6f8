"""
This module provides the client for the remote key-value service that backs
the basket store in production:
- Redis (redis.asyncio)
The client encapsulates key layout, serialization, timeouts and connection
management. Errors are logged and re-raised for the controller to classify.
"""

import logging
import os

from pydantic import ValidationError as PydanticValidationError
import redis.asyncio as redis
from redis.exceptions import RedisError

from .models import CustomerBasket
from .store import BasketNotFoundError, BasketStore

# Verbindungsdaten (normalerweise aus Env Vars)
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
REDIS_TIMEOUT_SECONDS = float(os.environ.get("REDIS_TIMEOUT_SECONDS", "5"))
BASKET_TTL_SECONDS = int(os.environ.get("BASKET_TTL_SECONDS", "0"))

log = logging.getLogger(__name__)


# --- Basket Store (Redis) ---
class RedisBasketStore(BasketStore):
    """
    Basket store backed by Redis.
    Each basket is stored as one JSON string under the customer id.
    """
    def __init__(self, client=None, ttl_seconds: int = BASKET_TTL_SECONDS):
        """
        Initializes the Redis client with the configured timeout.
        Args:
            client: Optional pre-built ``redis.asyncio.Redis`` instance.
            ttl_seconds (int): Expiry applied on every write. 0 disables expiry.
        """
        if client is None:
            client = redis.Redis.from_url(
                REDIS_URL,
                decode_responses=True,
                socket_timeout=REDIS_TIMEOUT_SECONDS,
                socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
            )
        self.client = client
        self.ttl_seconds = ttl_seconds

    async def read(self, customer_id: str) -> CustomerBasket:
        """
        Loads a basket.
        Args:
            customer_id (str): Key of the basket.
        Returns:
            CustomerBasket: The stored basket.
        Raises:
            BasketNotFoundError: If the key does not exist.
            RedisError: If the Redis call fails or times out.
            pydantic.ValidationError: If the stored value is not a valid basket.
        """
        try:
            raw = await self.client.get(customer_id)
        except RedisError as e:
            log.error(f"[Basket: {customer_id}] Redis GET fehlgeschlagen: {e}")
            raise

        if raw is None:
            raise BasketNotFoundError(customer_id)

        try:
            return CustomerBasket.model_validate_json(raw)
        except PydanticValidationError as e:
            log.error(f"[Basket: {customer_id}] Gespeicherter Wert ist kein gültiger Warenkorb: {e}")
            raise

    async def write(self, basket: CustomerBasket) -> None:
        """
        Stores a basket, replacing any previous value.
        Raises:
            RedisError: If the Redis call fails or times out.
        """
        try:
            await self.client.set(
                basket.customerID,
                basket.model_dump_json(),
                ex=self.ttl_seconds or None,
            )
        except RedisError as e:
            log.error(f"[Basket: {basket.customerID}] Redis SET fehlgeschlagen: {e}")
            raise

    async def delete(self, customer_id: str) -> None:
        """
        Removes a basket. Deleting a missing key is not an error.
        Raises:
            RedisError: If the Redis call fails or times out.
        """
        try:
            await self.client.delete(customer_id)
        except RedisError as e:
            log.error(f"[Basket: {customer_id}] Redis DEL fehlgeschlagen: {e}")
            raise

    async def close(self) -> None:
        await self.client.aclose()
