# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import json
import os

from typing import TYPE_CHECKING

from listing_crawler.avtonet import config
from listing_crawler.avtonet.app import export, get_seeds
from listing_crawler.avtonet.urls import build_search_url
from listing_crawler.config import CrawlLimits, SearchFilters, get_site_config
from listing_crawler.crawling import DetailPageTask, SearchResultsTask
from listing_crawler.data import DetailRecord, Price, SearchSummary
from listing_crawler.export import Dataset
from listing_crawler.settings import Settings


if TYPE_CHECKING:
    from pathlib import Path


def settings(urls: list[str] | None = None, filters: SearchFilters | None = None) -> Settings:
    return Settings(
        DATE="20240501",
        TEST_MODE=False,
        FILTERS=filters or SearchFilters(),
        LIMITS=CrawlLimits(),
        OUTPUT_DIR="output",
        URLS=urls or [],
    )


def test_site_config():
    assert get_site_config("avtonet") is config
    assert config.SITENAME == "avtonet"
    assert config.MIN_DELAY <= config.MAX_DELAY


def test_search_seed():
    filters = SearchFilters(brand="Volkswagen", year_from=2015)

    assert get_seeds(settings(filters=filters)) == [
        SearchResultsTask(build_search_url(filters), config.START_PAGE)
    ]


def test_detail_seeds():
    urls = [
        "https://www.avto.net/Ads/details.asp?id=1",
        "https://www.avto.net/Ads/details.asp?id=2",
    ]

    assert get_seeds(settings(urls=urls)) == [DetailPageTask(url) for url in urls]


async def test_export(tmp_path: Path):
    dataset = Dataset(str(tmp_path / "dataset.jsonl"))
    await dataset.push(
        SearchSummary(
            title="Renault Clio",
            url="https://www.avto.net/Ads/details.asp?id=7",
            listing_id="7",
            price="4.200 €",
        )
    )
    await dataset.push(
        DetailRecord(
            url="https://www.avto.net/Ads/details.asp?id=7",
            listing_id="7",
            title="Renault Clio 1.2 16V",
            price=Price(current="4.000 €", original="4.200 €"),
        )
    )
    await dataset.push(DetailRecord(url="https://www.avto.net/Ads/details.asp?id=8", listing_id="8"))

    json_file, csv_file = await export(dataset, str(tmp_path / "output"))

    assert os.path.exists(csv_file)
    with open(json_file, encoding="utf-8") as f:
        rows = json.load(f)

    assert [row["listing_id"] for row in rows] == ["7", "8"]
    assert rows[0]["title"] == "Renault Clio 1.2 16V"
    assert rows[0]["price"] == "4.000 €"
    assert rows[0]["original_price"] == "4.200 €"
    assert rows[0]["search_page"] == 1
    assert "search_page" not in rows[1]
