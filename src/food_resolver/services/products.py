"""Barcode resolution backed by Open Food Facts."""

import logging
from dataclasses import dataclass

import httpx

from food_resolver.adapters.off_client import OpenFoodFactsClient
from food_resolver.domain.errors import (
    ApiError,
    DecodingError,
    InvalidBarcodeError,
    NetworkError,
    ProductNotFoundError,
)
from food_resolver.domain.products import FoodProduct
from food_resolver.services.cache import Cache
from food_resolver.services.parsers import parse_branded_product

_logger = logging.getLogger(__name__)


@dataclass
class ProductResolver:
    """Resolve barcodes to products, memoizing successful lookups."""

    client: OpenFoodFactsClient
    cache: Cache
    ttl_seconds: int = 3600

    async def lookup(self, barcode: str) -> FoodProduct:
        """Return the product for a barcode.

        Raises a ``FoodDatabaseError`` subclass when the barcode is empty, the
        upstream has no such product, or the request or payload fails.
        """
        if not barcode or not barcode.strip():
            raise InvalidBarcodeError()

        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodProduct):
            _logger.debug("Product cache hit: barcode=%s", barcode)
            return cached

        payload = await self._fetch(barcode)
        product = parse_branded_product(payload, barcode=barcode)
        self.cache.set(cache_key, product, ttl_seconds=self.ttl_seconds)
        _logger.info("Resolved barcode=%s name=%s", barcode, product.name)
        return product

    def clear_cache(self) -> None:
        """Forget every previously resolved product."""
        self.cache.clear()

    async def _fetch(self, barcode: str) -> object:
        try:
            return await self.client.get_product(barcode)
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            _logger.warning(
                "Product lookup failed: barcode=%s status=%s", barcode, status_code
            )
            if status_code == 404:
                raise ProductNotFoundError() from exc
            raise ApiError(status_code) from exc
        except httpx.DecodingError as exc:
            raise DecodingError(exc) from exc
        except httpx.RequestError as exc:
            _logger.warning("Product lookup request error: barcode=%s", barcode)
            raise NetworkError(exc) from exc
        except ValueError as exc:
            raise DecodingError(exc) from exc
