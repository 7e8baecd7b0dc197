# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import re

from functools import cache
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from result import Err, Ok

from listing_crawler import error
from listing_crawler.avtonet import config
from listing_crawler.helpers import compile_regex


if TYPE_CHECKING:
    from typing import Final

    from result import Result

    from listing_crawler.config import SearchFilters


# ? results.asp expects all of its "session" parameters to be present even when they are empty
SEARCH_PARAMS: Final[tuple[str, ...]] = (
    "zession",
    "Lession",
    "TypeView",
    "Eession",
    "Kession",
    "Fession",
    "Ression",
    "Aession",
    "Tession",
    "Zession",
    "Session",
    "Ession",
    "Pession",
    "Gession",
    "Ession2",
    "oession",
    "iession",
    "jession",
    "dession",
    "hession",
    "aession",
)

# ? SearchFilters field -> results.asp parameter
FILTER_PARAMS: Final[dict[str, str]] = {
    "brand": "Zession",
    "model": "Mession",
    "price_from": "Cession",
    "price_to": "CEession",
    "year_from": "Lession",
    "year_to": "LEession",
    "fuel_type": "Gession",
    "body_type": "Kession",
    "max_mileage": "Ression",
    "location": "Ession",
}

PAGE_PARAM: Final[str] = "stession"


def build_search_url(filters: SearchFilters, base_url: str = config.SEARCH_URL) -> str:
    """
    Start URL of the crawl, i.e., first page of the search results matching the filters
    """
    params: dict[str, str] = dict.fromkeys(SEARCH_PARAMS, "")
    for name, value in filters.active().items():
        params[FILTER_PARAMS[name]] = str(value)

    return f"{base_url}?{urlencode(params)}"


@cache
def build_page_url(url: str, pageno: int) -> str:
    """
    Same search with the page number set (i.e., the URL of the next page)
    """
    if pageno < 1:
        raise error.InvalidURL(f"Page number must be at least 1 (got {pageno})", url=url)

    parts = urlsplit(url)
    params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != PAGE_PARAM]
    params.append((PAGE_PARAM, str(pageno)))
    return urlunsplit(parts._replace(query=urlencode(params)))


def get_listing_id(url: str) -> Result[str, str]:
    regex = compile_regex(r"[?&]id=(\d+)", re.IGNORECASE)
    return (
        Ok(str(match.group(1)))
        if (match := regex.search(url))
        else Err(f"Listing ID is not found in URL ({url})")
    )


def extract_listing_id(url: str | None) -> str:
    """
    Listing identity of the detail URL ("" if the URL doesn't have the "id" parameter)
    """
    if not url:
        return ""
    return get_listing_id(url).unwrap_or("")
