"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from nutrition_insights.adapters.fdc_client import HttpxFdcClient


def test_fdc_client_search_posts_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"foods": [{"fdcId": 1}]})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(
        api_key="fdc-key", base_url="https://fdc.test/v1", http_client=async_client
    )

    result = asyncio.run(client.search_foods("greek yogurt", page_size=3))

    assert result == {"foods": [{"fdcId": 1}]}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/foods/search"
    assert request.url.params["api_key"] == "fdc-key"
    payload = json.loads(request.content.decode())
    assert payload == {
        "query": "greek yogurt",
        "pageSize": 3,
        "dataType": ["Foundation", "SR Legacy", "Branded"],
    }


def test_fdc_client_get_food_requests_full_format() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/food/171705"
        assert request.url.params["format"] == "full"
        return httpx.Response(200, json={"fdcId": 171705})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(
        api_key="fdc-key", base_url="https://fdc.test/v1", http_client=async_client
    )

    assert asyncio.run(client.get_food(171705)) == {"fdcId": 171705}


def test_fdc_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "rate limited"})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(
        api_key="fdc-key", base_url="https://fdc.test/v1", http_client=async_client
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_food(1))


def test_fdc_client_close() -> None:
    client = HttpxFdcClient.create(api_key="fdc-key", base_url="https://fdc.test/v1")

    asyncio.run(client.close())

    assert client.http_client.is_closed
