"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def get_product(self, barcode: str) -> object:
        """Fetch a product by barcode and return raw API data."""

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 10
    ) -> object:
        """Search branded products by query and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client.

    Non-2xx responses, and product lookups answered with anything but 200,
    raise ``httpx.HTTPStatusError``. Bodies that are not JSON raise
    ``ValueError``. Callers decide how to map them.
    """

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    lookup_timeout_seconds: float = 15
    search_timeout_seconds: float = 10

    @classmethod
    def create(
        cls,
        base_url: str,
        user_agent: str,
        lookup_timeout_seconds: float = 15,
        search_timeout_seconds: float = 10,
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            lookup_timeout_seconds=lookup_timeout_seconds,
            search_timeout_seconds=search_timeout_seconds,
        )

    async def get_product(self, barcode: str) -> object:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/product/{quote(barcode, safe='')}.json"
        response = await self.http_client.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.lookup_timeout_seconds,
        )
        response.raise_for_status()
        if response.status_code != 200:
            raise httpx.HTTPStatusError(
                f"Unexpected status {response.status_code} for product lookup",
                request=response.request,
                response=response,
            )
        return response.json()

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 10
    ) -> object:
        """Search products by free text."""
        url = f"{self.base_url}/search"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": query,
                "page": page,
                "page_size": page_size,
                "json": 1,
            },
            headers={"User-Agent": self.user_agent},
            timeout=self.search_timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
