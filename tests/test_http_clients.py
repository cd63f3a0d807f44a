"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from nutrient_scanner.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


def _client(handler) -> HttpxOpenFoodFactsClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        user_agent="NutrientScannerTests/1.0",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_fetch_product_returns_product_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "status": 1,
                "code": "3017620422003",
                "product": {"product_name": "Hazelnut Spread"},
            },
        )

    client = _client(handler)
    product = asyncio.run(client.fetch_product("3017620422003"))

    assert product == {"product_name": "Hazelnut Spread"}
    assert seen[0].url.path == "/api/v2/product/3017620422003.json"
    assert seen[0].headers["User-Agent"] == "NutrientScannerTests/1.0"


def test_fetch_product_treats_status_zero_as_missing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"status": 0, "status_verbose": "product not found"}
        )

    client = _client(handler)

    assert asyncio.run(client.fetch_product("12345678")) is None


def test_fetch_product_treats_404_as_missing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status": 0})

    client = _client(handler)

    assert asyncio.run(client.fetch_product("12345678")) is None


@pytest.mark.parametrize("body", [[], "product", 3])
def test_fetch_product_treats_non_object_body_as_missing(body: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    client = _client(handler)

    assert asyncio.run(client.fetch_product("12345678")) is None


def test_fetch_product_raises_on_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_product("12345678"))


def test_create_strips_trailing_slash() -> None:
    client = HttpxOpenFoodFactsClient.create(
        base_url="https://off.test/", user_agent="ua"
    )

    assert client.base_url == "https://off.test"
    asyncio.run(client.close())
