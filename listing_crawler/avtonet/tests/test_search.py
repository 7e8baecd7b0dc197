# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from listing_crawler.avtonet.extraction import (
    NEXT_PAGE,
    extract_listing_urls,
    extract_search_summaries,
    extract_total_listings,
)
from listing_crawler.data import SearchSummary
from listing_crawler.document import parse_document
from listing_crawler.frontier import find_next_page


SEARCH_URL = "https://www.avto.net/Ads/results.asp?znamka=&model="
SCRAPED_AT = "2024-05-01T10:00:00+00:00"


async def test_wide_layout(wide_search_html: str):
    document = await parse_document(wide_search_html, SEARCH_URL)

    summaries = await extract_search_summaries(document, 1, SCRAPED_AT)

    # ? Banner between the listings is skipped
    assert summaries == [
        SearchSummary(
            title="Volkswagen Golf 1.6 TDI Highline",
            url="https://www.avto.net/Ads/details.asp?id=20001234&display=Volkswagen%20Golf",
            listing_id="20001234",
            price="15.990 €",
            thumbnail="https://images.avto.net/photo/20001234/small/1.jpg",
            year="2018",
            mileage="120000 km",
            fuel_type="diesel motor",
            transmission="ročni menjalnik",
            engine="1598 ccm, 85 kW / 116 KM",
            search_page=1,
            scraped_at=SCRAPED_AT,
        ),
        SearchSummary(
            title="Renault Clio 1.2 16V",
            url="https://www.avto.net/Ads/details.asp?id=20005678&display=Renault%20Clio",
            listing_id="20005678",
            price="4.200 €",
            thumbnail="https://images.avto.net/photo/20005678/small/1.jpg",
            year="2012",
            fuel_type="bencinski motor",
            search_page=1,
            scraped_at=SCRAPED_AT,
        ),
    ]

    assert await extract_total_listings(document) == 1234
    assert await find_next_page(document, NEXT_PAGE) == (
        "https://www.avto.net/Ads/results.asp?znamka=&model=&stession=2"
    )


async def test_compact_layout(compact_search_html: str):
    document = await parse_document(compact_search_html, SEARCH_URL)

    summaries = await extract_search_summaries(document, 2, SCRAPED_AT)
    assert len(summaries) == 2

    first = summaries[0]
    assert first.title == "Škoda Octavia Combi 2.0 TDI"
    assert first.listing_id == "20009999"
    assert first.price == "8.900 €"
    assert first.thumbnail == "https://images.avto.net/photo/20009999/small/1.jpg"
    assert first.year == "2015"
    assert first.mileage == "210000 km"
    assert first.transmission == "avtomatski menjalnik"
    assert first.fuel_type is None
    assert first.search_page == 2

    assert summaries[1].thumbnail is None
    assert summaries[1].year is None

    assert await extract_listing_urls(document) == ["https://www.avto.net/Ads/details.asp?id=20009999"]
    assert await extract_total_listings(document) is None
    # ? Disabled pagination button is skipped
    assert await find_next_page(document, NEXT_PAGE) == (
        "https://www.avto.net/Ads/results.asp?znamka=&model=&stession=3"
    )


async def test_legacy_layout(legacy_search_html: str):
    document = await parse_document(legacy_search_html, SEARCH_URL)

    summaries = await extract_search_summaries(document, 1, SCRAPED_AT)
    assert [summary.title for summary in summaries] == ["Opel Astra 1.4", "Fiat Punto"]

    astra, punto = summaries
    assert astra.url == "https://www.avto.net/Ads/details.asp?ID=30000001"
    assert astra.listing_id == "30000001"
    assert astra.price == "2.500 €"
    assert astra.thumbnail == "https://www.avto.net/photo/30000001/small/1.jpg"
    assert astra.year == "2009"
    assert astra.fuel_type == "bencinski motor"

    # ? Detail URL without "id" gives an empty identity
    assert punto.url == "https://www.avto.net/Ads/details.asp?display=brez-stevilke"
    assert punto.listing_id == ""

    assert await extract_total_listings(document) == 42
    assert await find_next_page(document, NEXT_PAGE) == (
        "https://www.avto.net/Ads/results.asp?znamka=&stession=3"
    )


async def test_empty_page(empty_search_html: str):
    document = await parse_document(empty_search_html, SEARCH_URL)

    assert await extract_search_summaries(document, 1) == []
    assert await extract_listing_urls(document) == []
    assert await extract_total_listings(document) is None
    assert await find_next_page(document, NEXT_PAGE) is None
