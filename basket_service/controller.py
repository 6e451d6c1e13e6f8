"""
controller.py — Core Logic for Basket Requests

This module contains the decision logic between the HTTP layer and the basket
store. It validates writes, performs the confirmation read after every upsert
and classifies every store failure exactly once.

Request Flow:
1. Validate the payload (upsert only)
2. Call the store (write / read / delete)
3. Upsert only: read the basket back so the response reflects the stored state
4. Translate failures into ValidationError / NotFoundError / StoreError

No retries are performed. Cancellation (asyncio.CancelledError) is never
caught here and propagates to the caller unchanged.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfirmationReadError, NotFoundError, StoreError, ValidationError
from .models import CustomerBasket
from .store import BasketNotFoundError, BasketStore

log = logging.getLogger(__name__)


class BasketController:
    """
    Translates the three basket actions into calls on a BasketStore.

    The store is passed in explicitly; the controller itself holds no
    mutable state and can serve any number of concurrent requests.
    """

    def __init__(self, store: BasketStore):
        self.store = store

    async def upsert(self, payload) -> CustomerBasket:
        """
        Creates or fully replaces the basket of a customer.

        Args:
            payload (CustomerBasket | dict): The basket to store.

        Returns:
            CustomerBasket: The basket as read back from the store after the write,
            not the payload that was sent.

        Raises:
            ValidationError: If the payload is malformed. The store is not called.
            StoreError: If the write fails.
            ConfirmationReadError: If the write succeeded but the read-back failed.
        """
        basket = self._validate(payload)
        customer_id = basket.customerID
        log_prefix = f"[Basket: {customer_id}]"

        # --- 1. Write ---
        try:
            await self.store.write(basket)
        except Exception as e:
            log.error(f"{log_prefix} Schreiben fehlgeschlagen: {e}")
            raise StoreError(f"customerID: {customer_id}: write failed: {e}") from e

        log.info(f"{log_prefix} Warenkorb gespeichert ({len(basket.items)} Positionen).")

        # --- 2. Confirmation read ---
        try:
            return await self.store.read(customer_id)
        except Exception as e:
            # Daten sind gespeichert, nur die Bestätigung fehlt.
            log.critical(f"{log_prefix} Gespeichert, aber Bestätigungs-Lesen fehlgeschlagen: {e}")
            raise ConfirmationReadError(
                f"customerID: {customer_id}: basket was stored but reading it back failed: {e}"
            ) from e

    async def fetch(self, customer_id: str) -> CustomerBasket:
        """
        Returns the stored basket of a customer verbatim.

        Raises:
            NotFoundError: If no basket exists (an empty id counts as not found).
            StoreError: For any other store failure.
        """
        if not customer_id:
            raise NotFoundError("customerID: <empty>: basket not found")

        log_prefix = f"[Basket: {customer_id}]"
        try:
            return await self.store.read(customer_id)
        except BasketNotFoundError as e:
            log.info(f"{log_prefix} Kein Warenkorb vorhanden.")
            raise NotFoundError(f"customerID: {customer_id}: {e}") from e
        except Exception as e:
            log.error(f"{log_prefix} Lesen fehlgeschlagen: {e}")
            raise StoreError(f"customerID: {customer_id}: read failed: {e}") from e

    async def remove(self, customer_id: str) -> None:
        """
        Deletes the basket of a customer.

        Deleting a basket that does not exist is reported as success, also
        when the store signals the absence with BasketNotFoundError.

        Raises:
            ValidationError: If the customer id is empty. The store is not called.
            StoreError: For any other store failure.
        """
        if not customer_id:
            raise ValidationError("customerID must not be empty")

        log_prefix = f"[Basket: {customer_id}]"
        try:
            await self.store.delete(customer_id)
        except BasketNotFoundError:
            log.info(f"{log_prefix} Löschen: Warenkorb war bereits entfernt.")
            return
        except Exception as e:
            log.error(f"{log_prefix} Löschen fehlgeschlagen: {e}")
            raise StoreError(f"customerID: {customer_id}: delete failed: {e}") from e

        log.info(f"{log_prefix} Warenkorb gelöscht.")

    @staticmethod
    def _validate(payload) -> CustomerBasket:
        try:
            basket = CustomerBasket.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(f"invalid basket: {e}") from e

        # model_validate does not re-check instances built with model_construct
        if not basket.customerID:
            raise ValidationError("invalid basket: customerID must not be empty")
        return basket
