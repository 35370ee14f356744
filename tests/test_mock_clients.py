"""Tests for the built-in mock catalog clients."""

import asyncio

import httpx
import pytest

from food_catalog.adapters.mock_clients import MockFdcClient, MockOffClient


def test_mock_fdc_search_matches_and_paginates() -> None:
    client = MockFdcClient()

    everything = asyncio.run(client.search_foods("", page_size=2, page_number=1))
    second_page = asyncio.run(client.search_foods("", page_size=2, page_number=2))
    milk = asyncio.run(client.search_foods("MILK"))

    assert everything["totalHits"] == 3
    assert everything["totalPages"] == 2
    assert len(everything["foods"]) == 2
    assert len(second_page["foods"]) == 1
    assert [hit["fdcId"] for hit in milk["foods"]] == [2340760]
    assert "nutrientId" in milk["foods"][0]["foodNutrients"][0]


def test_mock_fdc_search_matches_barcode() -> None:
    client = MockFdcClient()

    result = asyncio.run(client.search_foods("051500255162"))

    assert [hit["fdcId"] for hit in result["foods"]] == [2257046]


def test_mock_fdc_get_food_raises_not_found() -> None:
    client = MockFdcClient()

    food = asyncio.run(client.get_food(171688))
    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        asyncio.run(client.get_food(1))

    assert food["description"] == "Apples, raw, with skin"
    assert exc_info.value.response.status_code == 404


def test_mock_off_get_product() -> None:
    client = MockOffClient()

    found = asyncio.run(client.get_product("3017620422003"))
    missing = asyncio.run(client.get_product("000"))

    assert found["status"] == 1
    assert found["product"]["code"] == "3017620422003"
    assert missing == {"status": 0, "code": "000"}
