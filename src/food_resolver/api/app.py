"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from food_resolver.app_logging import configure_logging
from food_resolver.containers import AppContainer
from food_resolver.domain.errors import (
    ApiError,
    DecodingError,
    FoodDatabaseError,
    InvalidBarcodeError,
    InvalidQueryError,
    InvalidResponseError,
    NetworkError,
    ProductNotFoundError,
)
from food_resolver.domain.products import FoodProduct

_ERROR_STATUS: dict[type[FoodDatabaseError], int] = {
    InvalidBarcodeError: 400,
    InvalidQueryError: 400,
    ProductNotFoundError: 404,
    NetworkError: 504,
    ApiError: 502,
    InvalidResponseError: 502,
    DecodingError: 502,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(FoodDatabaseError)
    async def food_database_error_handler(
        request: Request, exc: FoodDatabaseError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), 500)
        logger.info(
            "Food database error on %s: kind=%s status=%s",
            request.url.path,
            exc.kind,
            status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.kind,
                "detail": exc.detail,
                "recovery": exc.recovery_suggestion,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/products/search")
    async def search_products(
        request: Request,
        query: str = Query(default=""),
        page: int = Query(default=1, ge=1),
    ) -> dict[str, object]:
        """Search generic and branded foods."""
        if not query.strip():
            raise InvalidQueryError()
        state_container: AppContainer = request.app.state.container
        products = await state_container.search_aggregator.search(query, page=page)
        return {"products": [_product_payload(product) for product in products]}

    @app.get("/products/{barcode}")
    async def get_product(barcode: str, request: Request) -> dict[str, object]:
        """Resolve a product by barcode."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.product_resolver.lookup(barcode)
        return _product_payload(product)

    return app


def _product_payload(product: FoodProduct) -> dict[str, object]:
    payload: dict[str, object] = asdict(product)
    payload["display_name"] = product.display_name
    payload["formatted_serving_size"] = product.formatted_serving_size
    return payload
