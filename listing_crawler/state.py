# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio

from dataclasses import dataclass, field
from time import monotonic


@dataclass(slots=True, frozen=True)
class CrawlSummary:
    pages_processed: int
    listings_found: int
    listings_enqueued: int
    details_scraped: int
    # ? Admitted listing (detail page) URLs, search results pages are not counted
    unique_urls: int
    errors: int
    elapsed_seconds: float


@dataclass(slots=True, kw_only=True)
class CrawlState:
    """
    Counters and the admitted URL fingerprints of one crawl run

    It is owned by the crawler and shared with the frontier; every mutation must happen while holding the lock as the pages are processed concurrently. It is never persisted, so the next run starts from scratch.
    """

    pages_processed: int = 0
    listings_found: int = 0
    listings_enqueued: int = 0
    details_scraped: int = 0
    errors: int = 0
    scheduled_pages: int = 0
    scheduled_details: int = 0
    unique_listings: int = 0
    fingerprints: set[str] = field(default_factory=set)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    started_at: float = field(default_factory=monotonic, repr=False)

    @property
    def scheduled(self) -> int:
        return self.scheduled_pages + self.scheduled_details

    async def record_page(self, listing_count: int) -> None:
        async with self.lock:
            self.pages_processed += 1
            self.listings_found += listing_count

    async def record_admitted(self, count: int) -> None:
        async with self.lock:
            self.unique_listings += count

    async def record_enqueued(self, count: int) -> None:
        async with self.lock:
            self.listings_enqueued += count

    async def record_detail(self) -> None:
        async with self.lock:
            self.details_scraped += 1

    async def record_error(self) -> None:
        async with self.lock:
            self.errors += 1

    def summary(self) -> CrawlSummary:
        return CrawlSummary(
            pages_processed=self.pages_processed,
            listings_found=self.listings_found,
            listings_enqueued=self.listings_enqueued,
            details_scraped=self.details_scraped,
            unique_urls=self.unique_listings,
            errors=self.errors,
            elapsed_seconds=monotonic() - self.started_at,
        )
