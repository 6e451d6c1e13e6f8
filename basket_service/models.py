"""
models.py — Data Models for the Basket Service

This module defines the data structures persisted per customer and returned
by the HTTP API. It uses Pydantic models so that inbound payloads are
validated before anything reaches the basket store.

Models:
    - BasketItem: A single line entry within a basket.
    - CustomerBasket: The complete basket stored for one customer.
    - HTTPError: Structured error body returned for every failed request.
"""

from pydantic import BaseModel, Field
from typing import List


class BasketItem(BaseModel):
    """
    Represents a single line entry in a customer's basket.

    Attributes:
        productID (str): Opaque product identifier.
        productName (str): Display name of the product.
        unitPrice (float): Caller-supplied price per unit. Must be finite and not negative.
        quantity (int): Number of units. Must be greater than zero.
    """
    productID: str
    productName: str
    unitPrice: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(..., gt=0)


class CustomerBasket(BaseModel):
    """
    Represents the basket persisted for one customer.

    Items are kept in the order the caller sent them. Duplicate products are
    allowed and never merged. A basket without items is valid and is not the
    same thing as a missing basket.

    Attributes:
        customerID (str): Caller-chosen customer identifier, primary key of the store.
        items (List[BasketItem]): Line entries of the basket.
    """
    customerID: str = Field(..., min_length=1)
    items: List[BasketItem] = Field(default_factory=list)


class HTTPError(BaseModel):
    """
    Error body returned by the API.

    Attributes:
        code (int): HTTP status code of the response.
        message (str): Human-readable message derived from the underlying cause.
        error (str): Name of the error classification (e.g. 'NotFoundError').
    """
    code: int
    message: str
    error: str
