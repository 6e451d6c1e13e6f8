"""
main.py — FastAPI Entry Point for the Basket Service

This module provides the REST API interface for the per-customer basket store.
It wires the HTTP routes to the BasketController and maps classified errors
to structured HTTP error responses.

Responsibilities:
    • Create, replace, fetch and delete customer baskets via HTTP API
    • Build the configured basket store on startup and close it on shutdown
    • Translate controller errors into ``HTTPError`` bodies
    • Provide system health information
"""

import os

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from .clients import RedisBasketStore
from .controller import BasketController
from .errors import BasketServiceError
from .logging_config import get_logger, setup_logging
from .models import CustomerBasket, HTTPError
from .store import BasketStore, InMemoryBasketStore

BASKET_STORE_BACKEND = os.environ.get("BASKET_STORE_BACKEND", "memory")

setup_logging()
log = get_logger(__name__)

ERROR_RESPONSES = {
    400: {"model": HTTPError},
    404: {"model": HTTPError},
}


def build_store(backend: str = BASKET_STORE_BACKEND) -> BasketStore:
    """
    Creates the basket store selected by configuration.

    Args:
        backend (str): 'memory' or 'redis'.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "memory":
        return InMemoryBasketStore()
    if backend == "redis":
        return RedisBasketStore()
    raise ValueError(f"Unknown BASKET_STORE_BACKEND: {backend!r}")


def error_response(status_code: int, message: str, error: str) -> JSONResponse:
    body = HTTPError(code=status_code, message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def get_controller(request: Request) -> BasketController:
    return request.app.state.controller


def create_app(store: BasketStore = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        store (BasketStore, optional): Store to serve from. If omitted, the store is
            built from ``BASKET_STORE_BACKEND`` on startup and closed on shutdown.

    Returns:
        FastAPI: The configured application.
    """
    app = FastAPI(title="Basket Service")
    app.state.owns_store = store is None
    if store is not None:
        app.state.controller = BasketController(store)

    @app.on_event("startup")
    async def on_startup():
        log.info("Basket-Service startet...")
        if app.state.owns_store:
            app.state.controller = BasketController(build_store())
            log.info(f"Basket Store initialisiert (Backend: {BASKET_STORE_BACKEND}).")

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.owns_store:
            await app.state.controller.store.close()
            log.info("Basket Store geschlossen.")

    @app.exception_handler(BasketServiceError)
    async def basket_error_handler(request: Request, exc: BasketServiceError):
        return error_response(exc.status_code, exc.message, type(exc).__name__)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        log.warning(f"Ungültige Anfrage an {request.url.path}: {details}")
        return error_response(400, f"invalid request: {details}", "ValidationError")

    # API Endpoints: Basket CRUD
    @app.post("/v1/items", response_model=CustomerBasket, responses=ERROR_RESPONSES)
    async def create_basket(
            basket: CustomerBasket,
            controller: BasketController = Depends(get_controller)
    ):
        """
        Creates or replaces the basket of ``basket.customerID``.

        The response is the basket as read back from the store after the write.
        """
        return await controller.upsert(basket)

    @app.get("/v1/items/{customer_id}", response_model=CustomerBasket, responses=ERROR_RESPONSES)
    async def get_basket(
            customer_id: str,
            controller: BasketController = Depends(get_controller)
    ):
        """Returns the basket of a customer, 404 if none exists."""
        return await controller.fetch(customer_id)

    @app.delete("/v1/items/{customer_id}", responses=ERROR_RESPONSES)
    async def delete_basket(
            customer_id: str,
            controller: BasketController = Depends(get_controller)
    ):
        """Deletes the basket of a customer. Deleting a missing basket succeeds."""
        await controller.remove(customer_id)
        return Response(status_code=200)

    # Health Check Endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("basket_service.main:app", host="0.0.0.0", port=8000)
