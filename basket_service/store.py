"""
store.py — Basket Store Capability

Defines the interface every basket storage backend implements, plus an
in-memory backend used for local runs and tests. The controller only ever
talks to ``BasketStore``; the concrete backend is chosen at startup.

Contract:
    - read(customer_id)   → CustomerBasket, raises BasketNotFoundError if absent
    - write(basket)       → full replace of the stored value, never a merge
    - delete(customer_id) → removes the basket, an absent key is not an error
"""

from abc import ABC, abstractmethod
import logging
from typing import Dict

from .models import CustomerBasket

log = logging.getLogger(__name__)


class BasketNotFoundError(Exception):
    """Raised by a store when no basket exists for the requested customer."""

    def __init__(self, customer_id: str):
        super().__init__(f"basket not found for customer '{customer_id}'")
        self.customer_id = customer_id


class BasketStore(ABC):
    """Durable mapping from customer identifier to basket state."""

    @abstractmethod
    async def read(self, customer_id: str) -> CustomerBasket:
        """Return the stored basket or raise BasketNotFoundError."""

    @abstractmethod
    async def write(self, basket: CustomerBasket) -> None:
        """Replace whatever is stored under ``basket.customerID``."""

    @abstractmethod
    async def delete(self, customer_id: str) -> None:
        """Remove the basket stored for ``customer_id``."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""


class InMemoryBasketStore(BasketStore):
    """
    Process-local store backed by a dict.

    Baskets are copied on the way in and on the way out so that neither the
    caller nor the response serialization can mutate what is stored.
    """

    def __init__(self):
        self._baskets: Dict[str, CustomerBasket] = {}

    async def read(self, customer_id: str) -> CustomerBasket:
        basket = self._baskets.get(customer_id)
        if basket is None:
            raise BasketNotFoundError(customer_id)
        return basket.model_copy(deep=True)

    async def write(self, basket: CustomerBasket) -> None:
        self._baskets[basket.customerID] = basket.model_copy(deep=True)
        log.debug(f"[Basket: {basket.customerID}] In-Memory gespeichert ({len(basket.items)} Positionen).")

    async def delete(self, customer_id: str) -> None:
        self._baskets.pop(customer_id, None)

    def __len__(self):
        return len(self._baskets)
