"""Multi-provider food search."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from food_resolver.adapters.fdc_client import FdcClient
from food_resolver.adapters.off_client import OpenFoodFactsClient
from food_resolver.domain.products import FoodProduct
from food_resolver.services.parsers import parse_branded_search, parse_generic_foods
from food_resolver.services.ranking import normalize_query, rank_products

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of one provider call: products on success, the error otherwise."""

    provider: str
    products: list[FoodProduct] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchAggregator:
    """Fan a text query out to generic and branded providers and merge results.

    The generic provider is optional; without it only branded results are
    returned. A failing provider contributes no results and never fails the
    search.
    """

    branded_client: OpenFoodFactsClient
    generic_client: FdcClient | None = None
    generic_page_size: int = 15
    branded_page_size: int = 10

    async def search(self, query: str, page: int = 1) -> list[FoodProduct]:
        """Search both providers and return deduplicated, ranked products."""
        search_term = normalize_query(query)
        if not search_term:
            return []

        generic, branded = await asyncio.gather(
            self._search_generic(query, page),
            self._search_branded(query, page),
        )
        combined = _products_or_empty(generic) + _products_or_empty(branded)
        results = rank_products(deduplicate_by_name(combined), search_term)
        _logger.info(
            "Food search: query=%s page=%s generic=%s branded=%s results=%s",
            search_term,
            page,
            len(generic.products),
            len(branded.products),
            len(results),
        )
        return results

    async def _search_generic(self, query: str, page: int) -> ProviderResult:
        client = self.generic_client
        if client is None:
            return ProviderResult(provider="fdc")

        async def call() -> list[FoodProduct]:
            payload = await client.search_foods(
                query, page=page, page_size=self.generic_page_size
            )
            return parse_generic_foods(payload)

        return await _run_provider("fdc", call)

    async def _search_branded(self, query: str, page: int) -> ProviderResult:
        async def call() -> list[FoodProduct]:
            payload = await self.branded_client.search_products(
                query, page=page, page_size=self.branded_page_size
            )
            return parse_branded_search(payload)

        return await _run_provider("off", call)


def deduplicate_by_name(products: list[FoodProduct]) -> list[FoodProduct]:
    """Keep the first product for each lowercased name."""
    seen: set[str] = set()
    unique: list[FoodProduct] = []
    for product in products:
        key = product.name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(product)
    return unique


async def _run_provider(
    provider: str, call: Callable[[], Awaitable[list[FoodProduct]]]
) -> ProviderResult:
    try:
        return ProviderResult(provider=provider, products=await call())
    except Exception as exc:
        return ProviderResult(provider=provider, error=exc)


def _products_or_empty(result: ProviderResult) -> list[FoodProduct]:
    """Drop a failed provider's contribution, logging the error."""
    if result.ok:
        return result.products
    _logger.warning(
        "Search provider %s failed, skipping its results: %r",
        result.provider,
        result.error,
    )
    return []
