"""Tests for barcode resolution."""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from food_resolver.adapters.off_client import HttpxOpenFoodFactsClient
from food_resolver.domain.errors import (
    ApiError,
    DecodingError,
    InvalidBarcodeError,
    NetworkError,
    ProductNotFoundError,
)
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.products import ProductResolver
from tests.conftest import FakeOpenFoodFactsClient


def _http_resolver(response: httpx.Response) -> ProductResolver:
    transport = httpx.MockTransport(lambda request: response)
    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test/api/v2",
        user_agent="food-resolver-tests",
        http_client=httpx.AsyncClient(transport=transport),
    )
    return ProductResolver(client=client, cache=InMemoryCache())


def test_lookup_parses_product(product_resolver, off_client) -> None:
    product = asyncio.run(product_resolver.lookup("3017620422003"))

    assert off_client.product_calls == ["3017620422003"]
    assert product.barcode == "3017620422003"
    assert product.name == "Nutella"
    assert product.brand == "Ferrero"
    assert product.display_name == "Ferrero - Nutella"
    assert (product.serving_size, product.serving_unit) == (15.0, "g")
    assert product.formatted_serving_size == "15g"
    assert product.calories == 81
    assert product.category == "Spreads"
    assert product.quantity == "400 g"


def test_lookup_is_memoized(product_resolver, off_client) -> None:
    first = asyncio.run(product_resolver.lookup("3017620422003"))
    second = asyncio.run(product_resolver.lookup("3017620422003"))

    assert len(off_client.product_calls) == 1
    assert second is first


def test_cache_key_is_case_sensitive(product_resolver, off_client) -> None:
    asyncio.run(product_resolver.lookup("abc"))
    asyncio.run(product_resolver.lookup("ABC"))

    assert off_client.product_calls == ["abc", "ABC"]


def test_expired_entry_is_fetched_again() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    clock_state = {"now": now}
    client = FakeOpenFoodFactsClient()
    resolver = ProductResolver(
        client=client,
        cache=InMemoryCache(clock=lambda: clock_state["now"]),
        ttl_seconds=3600,
    )

    asyncio.run(resolver.lookup("123"))
    clock_state["now"] = now + timedelta(seconds=3599)
    asyncio.run(resolver.lookup("123"))
    assert len(client.product_calls) == 1

    clock_state["now"] = now + timedelta(seconds=3600)
    asyncio.run(resolver.lookup("123"))
    assert len(client.product_calls) == 2


def test_clear_cache_forces_refetch(product_resolver, off_client) -> None:
    asyncio.run(product_resolver.lookup("123"))
    product_resolver.clear_cache()
    asyncio.run(product_resolver.lookup("123"))

    assert len(off_client.product_calls) == 2


@pytest.mark.parametrize("barcode", ["", "   "])
def test_blank_barcode_is_rejected(product_resolver, off_client, barcode) -> None:
    with pytest.raises(InvalidBarcodeError):
        asyncio.run(product_resolver.lookup(barcode))

    assert off_client.product_calls == []


def test_not_found_status_maps_to_product_not_found(
    product_resolver, off_client
) -> None:
    off_client.product_payload = {"status": 0, "status_verbose": "product not found"}

    with pytest.raises(ProductNotFoundError):
        asyncio.run(product_resolver.lookup("000"))


def test_http_404_maps_to_product_not_found(
    product_resolver, off_client, status_error
) -> None:
    off_client.product_error = status_error(404)

    with pytest.raises(ProductNotFoundError):
        asyncio.run(product_resolver.lookup("000"))


def test_other_status_maps_to_api_error(
    product_resolver, off_client, status_error
) -> None:
    off_client.product_error = status_error(503)

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(product_resolver.lookup("000"))

    assert exc_info.value.status_code == 503
    assert str(exc_info.value) == "Server error (status 503)"


def test_transport_failure_maps_to_network_error(product_resolver, off_client) -> None:
    off_client.product_error = httpx.ReadTimeout("timed out")

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(product_resolver.lookup("000"))

    assert isinstance(exc_info.value.cause, httpx.ReadTimeout)
    assert exc_info.value.recovery_suggestion == "Check your internet connection"


def test_invalid_json_maps_to_decoding_error(product_resolver, off_client) -> None:
    off_client.product_error = ValueError("Expecting value")

    with pytest.raises(DecodingError):
        asyncio.run(product_resolver.lookup("000"))


def test_failed_lookup_is_not_cached(product_resolver, off_client) -> None:
    off_client.product_payload = {"status": 0}
    with pytest.raises(ProductNotFoundError):
        asyncio.run(product_resolver.lookup("123"))

    off_client.product_payload = {"status": 1, "product": {"product_name": "Late"}}
    product = asyncio.run(product_resolver.lookup("123"))

    assert product.name == "Late"
    assert len(off_client.product_calls) == 2


def test_redirect_loop_maps_to_network_error(product_resolver, off_client) -> None:
    off_client.product_error = httpx.TooManyRedirects("Exceeded maximum redirects")

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(product_resolver.lookup("000"))

    assert isinstance(exc_info.value.cause, httpx.TooManyRedirects)


def test_corrupt_content_encoding_maps_to_decoding_error() -> None:
    resolver = _http_resolver(
        httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"notgzip"),
        )
    )

    with pytest.raises(DecodingError) as exc_info:
        asyncio.run(resolver.lookup("000"))

    assert isinstance(exc_info.value.cause, httpx.DecodingError)


def test_overflowing_number_in_body_maps_to_decoding_error() -> None:
    body = (
        b'{"status": 1, "product": {"product_name": "X",'
        b' "nutriments": {"energy-kcal_100g": 1e400}}}'
    )
    resolver = _http_resolver(
        httpx.Response(
            200, content=body, headers={"Content-Type": "application/json"}
        )
    )

    with pytest.raises(DecodingError):
        asyncio.run(resolver.lookup("000"))


def test_non_200_success_status_maps_to_api_error() -> None:
    resolver = _http_resolver(
        httpx.Response(203, json={"status": 1, "product": {"product_name": "X"}})
    )

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(resolver.lookup("000"))

    assert exc_info.value.status_code == 203
    assert len(resolver.cache) == 0
