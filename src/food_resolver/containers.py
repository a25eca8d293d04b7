"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_resolver.adapters.fdc_client import HttpxFdcClient
from food_resolver.adapters.off_client import HttpxOpenFoodFactsClient
from food_resolver.config import Settings
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.products import ProductResolver
from food_resolver.services.search import SearchAggregator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_resolver: ProductResolver
    search_aggregator: SearchAggregator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.user_agent,
        lookup_timeout_seconds=resolved_settings.lookup_timeout_seconds,
        search_timeout_seconds=resolved_settings.search_timeout_seconds,
    )
    fdc_client: HttpxFdcClient | None = None
    if resolved_settings.has_fdc_credentials:
        fdc_client = HttpxFdcClient.create(
            api_key=str(resolved_settings.fdc_api_key),
            base_url=resolved_settings.fdc_base_url,
            timeout_seconds=resolved_settings.search_timeout_seconds,
        )

    product_resolver = ProductResolver(
        client=off_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.product_cache_ttl_seconds,
    )
    search_aggregator = SearchAggregator(
        branded_client=off_client,
        generic_client=fdc_client,
        generic_page_size=resolved_settings.generic_page_size,
        branded_page_size=resolved_settings.branded_page_size,
    )

    async def close_resources() -> None:
        await off_client.close()
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_resolver=product_resolver,
        search_aggregator=search_aggregator,
        close_resources=close_resources,
    )
