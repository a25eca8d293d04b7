"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from food_resolver.adapters.fdc_client import FdcClient
from food_resolver.adapters.off_client import OpenFoodFactsClient
from food_resolver.config import Settings
from food_resolver.containers import AppContainer
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.products import ProductResolver
from food_resolver.services.search import SearchAggregator


def off_product(name: str, code: str = "000", **extra: object) -> dict[str, object]:
    """Build an Open Food Facts product record."""
    return {"code": code, "product_name": name, **extra}


def fdc_food(name: str, fdc_id: int = 1, **extra: object) -> dict[str, object]:
    """Build an FDC search food record."""
    return {"fdcId": fdc_id, "description": name, "foodNutrients": [], **extra}


def http_status_error(status_code: int) -> httpx.HTTPStatusError:
    """Build the error httpx raises for a non-2xx response."""
    request = httpx.Request("GET", "https://upstream.test")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"status {status_code}", request=request, response=response
    )


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with in-memory responses."""

    product_payload: object = field(
        default_factory=lambda: {
            "status": 1,
            "product": {
                "product_name": "Nutella",
                "brands": "Ferrero",
                "serving_size": "15g",
                "image_front_url": "https://images.test/nutella-front.jpg",
                "nutrition_grades": "e",
                "categories": "Spreads, Sweet spreads",
                "quantity": "400 g",
                "nutriments": {
                    "energy-kcal_100g": 539,
                    "proteins_100g": 6.3,
                    "carbohydrates_100g": 57.5,
                    "fat_100g": 30.9,
                    "sugars_100g": 56.3,
                    "sodium_100g": 0.0428,
                },
            },
        }
    )
    search_payload: object = field(default_factory=lambda: {"products": []})
    product_error: Exception | None = None
    search_error: Exception | None = None
    search_delay_seconds: float = 0
    product_calls: list[str] = field(default_factory=list)
    search_calls: list[tuple[str, int, int]] = field(default_factory=list)

    async def get_product(self, barcode: str) -> object:
        self.product_calls.append(barcode)
        if self.product_error is not None:
            raise self.product_error
        return self.product_payload

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 10
    ) -> object:
        self.search_calls.append((query, page, page_size))
        if self.search_delay_seconds:
            await asyncio.sleep(self.search_delay_seconds)
        if self.search_error is not None:
            raise self.search_error
        return self.search_payload


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: object = field(default_factory=lambda: {"foods": []})
    search_error: Exception | None = None
    search_delay_seconds: float = 0
    search_calls: list[tuple[str, int, int]] = field(default_factory=list)

    async def search_foods(
        self, query: str, page: int = 1, page_size: int = 15
    ) -> object:
        self.search_calls.append((query, page, page_size))
        if self.search_delay_seconds:
            await asyncio.sleep(self.search_delay_seconds)
        if self.search_error is not None:
            raise self.search_error
        return self.search_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key="fdc-key")


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def product_resolver(off_client: FakeOpenFoodFactsClient) -> ProductResolver:
    return ProductResolver(client=off_client, cache=InMemoryCache())


@pytest.fixture
def search_aggregator(
    off_client: FakeOpenFoodFactsClient, fdc_client: FakeFdcClient
) -> SearchAggregator:
    return SearchAggregator(branded_client=off_client, generic_client=fdc_client)


@pytest.fixture
def container(
    settings: Settings,
    product_resolver: ProductResolver,
    search_aggregator: SearchAggregator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_resolver=product_resolver,
        search_aggregator=search_aggregator,
        close_resources=close_resources,
    )


@pytest.fixture
def status_error() -> Callable[[int], httpx.HTTPStatusError]:
    return http_status_error
