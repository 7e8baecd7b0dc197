# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio

from listing_crawler.document import parse_document
from listing_crawler.frontier import Frontier, find_next_page, fingerprint
from listing_crawler.resolver import Link, LinkText
from listing_crawler.state import CrawlState


PAGE_URL = "https://www.avto.net/Ads/results.asp"
NEXT_PAGE = (Link("a.next"), LinkText("ul.pagination a.page-link", ("Naprej",)))


def test_fingerprint():
    assert fingerprint("HTTPS://www.Avto.net/Ads/details.asp?id=1//") == (
        "https://www.avto.net/ads/details.asp?id=1"
    )
    assert fingerprint(" https://www.avto.net/ ") == fingerprint("https://www.avto.net")


def test_fingerprint_keeps_no_state():
    assert not hasattr(fingerprint, "cache_info")


async def test_admit_once():
    state = CrawlState()
    frontier = Frontier(state)

    first = await frontier.admit(
        ["https://www.avto.net/Ads/details.asp?id=1", "", "https://www.avto.net/Ads/details.asp?id=2"]
    )
    assert first == [
        "https://www.avto.net/Ads/details.asp?id=1",
        "https://www.avto.net/Ads/details.asp?id=2",
    ]

    second = await frontier.admit(
        ["https://www.avto.net/ads/details.asp?id=1/", "https://www.avto.net/Ads/details.asp?id=3"]
    )
    assert second == ["https://www.avto.net/Ads/details.asp?id=3"]
    assert len(state.fingerprints) == 3


async def test_concurrent_admit():
    frontier = Frontier(CrawlState())
    urls = [f"https://www.avto.net/Ads/details.asp?id={i}" for i in range(50)]

    results = await asyncio.gather(
        frontier.admit(urls[:30]), frontier.admit(urls[20:]), frontier.admit(urls)
    )

    admitted = [url for result in results for url in result]
    assert sorted(admitted) == sorted(urls)


async def test_next_page(search_html: str):
    document = await parse_document(search_html, PAGE_URL)

    assert await find_next_page(document, NEXT_PAGE) == (
        "https://www.avto.net/Ads/results.asp?stession=2"
    )


async def test_last_page():
    document = await parse_document(
        '<html><body><ul class="pagination"><li><a class="page-link" href="#">1</a></li></ul></body></html>',
        PAGE_URL,
    )
    assert await find_next_page(document, NEXT_PAGE) is None


async def test_next_page_pointing_to_itself():
    document = await parse_document(
        '<html><body><a class="next" href="/Ads/results.asp/">Naprej</a></body></html>',
        PAGE_URL,
    )
    assert await find_next_page(document, NEXT_PAGE) is None
