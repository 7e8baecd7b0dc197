# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio
import random

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dunia.playwright import AsyncPlaywrightBrowser
from playwright.async_api import async_playwright

from listing_crawler import log
from listing_crawler.avtonet import config
from listing_crawler.avtonet.extraction import (
    NEXT_PAGE,
    extract_detail_record,
    extract_listing_urls,
    extract_search_summaries,
    extract_total_listings,
)
from listing_crawler.avtonet.urls import build_page_url, build_search_url, extract_listing_id
from listing_crawler.browser import get_browser_config, load_page_content
from listing_crawler.crawling import Crawler, DetailPageTask, SearchResultsTask
from listing_crawler.document import parse_document
from listing_crawler.export import Dataset, save_listings
from listing_crawler.frontier import find_next_page
from listing_crawler.html import DetailPageHTML, SearchPageHTML
from listing_crawler.merge import flatten, merge_listings, split_records
from listing_crawler.path import dataset_file


if TYPE_CHECKING:
    from dunia.playwright import PlaywrightBrowser

    from listing_crawler.config import CrawlLimits
    from listing_crawler.crawling import Task
    from listing_crawler.data import DetailRecord, SearchSummary
    from listing_crawler.document import Document
    from listing_crawler.html import PageHTML
    from listing_crawler.settings import Settings


@dataclass(slots=True, frozen=True, kw_only=True)
class AvtonetSite:
    browser: PlaywrightBrowser
    limits: CrawlLimits
    date: str
    save_html: bool = False

    async def wait(self) -> None:
        # ? Random pause before every navigation as the site rate limits the clients
        seconds = random.uniform(self.limits.min_delay, self.limits.max_delay)
        log.detail.delay(seconds)
        await asyncio.sleep(seconds)

    def snapshot(self, task: Task) -> PageHTML:
        match task:
            case SearchResultsTask(_, pageno):
                return SearchPageHTML(pageno=pageno, date=self.date, sitename=config.SITENAME)
            case DetailPageTask(url):
                return DetailPageHTML(
                    listing_id=extract_listing_id(url), date=self.date, sitename=config.SITENAME
                )

    async def fetch(self, task: Task) -> Document:
        await self.wait()

        ready_query = (
            config.SEARCH_PAGE_READY_QUERY
            if isinstance(task, SearchResultsTask)
            else config.DETAIL_PAGE_READY_QUERY
        )
        page = await load_page_content(
            self.browser,
            task.url,
            ready_query=ready_query,
            timeout=self.limits.timeout,
            retries=self.limits.retries,
        )

        if self.save_html:
            await self.snapshot(task).save(page.content)

        return await parse_document(page.content, page.url)

    async def extract_search_summaries(
        self, document: Document, pageno: int
    ) -> list[SearchSummary]:
        return await extract_search_summaries(document, pageno)

    async def extract_listing_urls(self, document: Document) -> list[str]:
        return await extract_listing_urls(document)

    async def extract_total_listings(self, document: Document) -> int | None:
        return await extract_total_listings(document)

    async def find_next_page(self, document: Document) -> str | None:
        return await find_next_page(document, NEXT_PAGE)

    async def extract_detail_record(self, document: Document, url: str) -> DetailRecord:
        return await extract_detail_record(document, url)


def get_seeds(settings: Settings) -> list[Task]:
    """
    First search results page built from the filters, or the detail pages if specific URLs are given
    """
    if settings.URLS:
        return [DetailPageTask(url) for url in settings.URLS]

    start_url = build_search_url(settings.FILTERS)
    if config.START_PAGE > 1:
        start_url = build_page_url(start_url, config.START_PAGE)

    log.detail.start_url(start_url)
    if filters := settings.FILTERS.active():
        log.detail.active_filters(filters)

    return [SearchResultsTask(start_url, config.START_PAGE)]


async def run(settings: Settings):
    limits = settings.LIMITS
    log.detail.crawl_limits(
        limits.max_pages, limits.max_details, limits.max_requests, limits.concurrency
    )

    dataset = Dataset(
        dataset_file(
            output_dir=settings.OUTPUT_DIR, sitename=config.SITENAME, date=settings.DATE
        )
    )
    # ? Every run starts with an empty dataset, the crawl state isn't persisted either
    await dataset.reset()

    browser_config = get_browser_config(
        headless=config.HEADLESS,
        default_navigation_timeout=config.DEFAULT_NAVIGATION_TIMEOUT,
        default_timeout=config.DEFAULT_TIMEOUT,
    )
    async with async_playwright() as playwright:
        browser = await AsyncPlaywrightBrowser(
            browser_config=browser_config, playwright=playwright
        ).create()
        site = AvtonetSite(
            browser=browser,
            limits=limits,
            date=settings.DATE,
            save_html=config.SAVE_HTML,
        )
        crawler = Crawler(site=site, sink=dataset, limits=limits)
        try:
            await crawler.crawl(get_seeds(settings))
        finally:
            # ? Whatever has been crawled is always merged and saved, even if the crawl was interrupted
            await export(dataset, settings.OUTPUT_DIR)


async def export(dataset: Dataset, output_dir: str) -> tuple[str, str]:
    summaries, details = split_records(await dataset.load())
    listings = merge_listings(summaries, details)
    return await save_listings([flatten(listing) for listing in listings], output_dir)
