# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from result import Err, Ok

from listing_crawler.avtonet import config
from listing_crawler.avtonet.urls import (
    PAGE_PARAM,
    SEARCH_PARAMS,
    build_page_url,
    build_search_url,
    extract_listing_id,
    get_listing_id,
)
from listing_crawler.config import SearchFilters
from listing_crawler.error import InvalidURL


def query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


def test_search_url_without_filters():
    url = build_search_url(SearchFilters())

    assert url.startswith(f"{config.SEARCH_URL}?")
    params = query(url)
    assert set(params) == set(SEARCH_PARAMS)
    assert all(value == [""] for value in params.values())


def test_search_url_with_filters():
    url = build_search_url(
        SearchFilters(brand="Volkswagen", model="Golf", price_to=20000, year_from=2015, fuel_type="diesel")
    )

    params = query(url)
    assert params["Zession"] == ["Volkswagen"]
    assert params["Mession"] == ["Golf"]
    assert params["CEession"] == ["20000"]
    assert params["Lession"] == ["2015"]
    assert params["Gession"] == ["diesel"]


def test_page_url():
    url = build_search_url(SearchFilters(brand="Audi"))

    second = build_page_url(url, 2)
    assert query(second)[PAGE_PARAM] == ["2"]
    assert query(second)["Zession"] == ["Audi"]

    # ? Page number is replaced and not appended
    assert query(build_page_url(second, 5))[PAGE_PARAM] == ["5"]

    with pytest.raises(InvalidURL):
        build_page_url(url, 0)


@pytest.mark.parametrize(
    "url, listing_id",
    [
        ("https://www.avto.net/Ads/details.asp?id=20001234", "20001234"),
        ("https://www.avto.net/Ads/details.asp?display=Golf&id=20001234", "20001234"),
        ("https://www.avto.net/Ads/details.asp?ID=30000001&display=Astra", "30000001"),
        ("https://www.avto.net/Ads/details.asp?oglasid=5", ""),
        ("https://www.avto.net/Ads/details.asp?display=Punto", ""),
        (None, ""),
    ],
)
def test_listing_id(url: str | None, listing_id: str):
    assert extract_listing_id(url) == listing_id


def test_listing_id_result():
    assert get_listing_id("https://www.avto.net/Ads/details.asp?id=42") == Ok("42")
    assert isinstance(get_listing_id("https://www.avto.net/Ads/results.asp"), Err)
