# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

"""
Crawl orchestrator

Pages are processed in rounds: every task of the current round is processed (in batches of the configured concurrency) and the follow-up tasks they produce form the next round, until nothing is left or the limits stop the scheduling. A page that can't be loaded is counted as an error and abandoned, the crawl itself always continues.
"""

from __future__ import annotations

import asyncio

from dataclasses import dataclass, field
from functools import singledispatch
from typing import TYPE_CHECKING, Protocol

from listing_crawler import error, log
from listing_crawler.frontier import Frontier
from listing_crawler.helpers import chunks, unique
from listing_crawler.state import CrawlState


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from listing_crawler.config import CrawlLimits
    from listing_crawler.data import DetailRecord, SearchSummary
    from listing_crawler.document import Document
    from listing_crawler.state import CrawlSummary


# ? Failures of a single page, anything else is a bug and stops the crawl
PAGE_ERRORS = (
    error.TimeoutException,
    error.NavigationFailed,
    error.HTMLParsingError,
    error.PlaywrightError,
)


@dataclass(slots=True, frozen=True)
class SearchResultsTask:
    url: str
    pageno: int = 1


@dataclass(slots=True, frozen=True)
class DetailPageTask:
    url: str


type Task = SearchResultsTask | DetailPageTask


class Site(Protocol):
    async def fetch(self, task: Task) -> Document: ...

    async def extract_search_summaries(
        self, document: Document, pageno: int
    ) -> list[SearchSummary]: ...

    async def extract_listing_urls(self, document: Document) -> list[str]: ...

    async def extract_total_listings(self, document: Document) -> int | None: ...

    async def find_next_page(self, document: Document) -> str | None: ...

    async def extract_detail_record(
        self, document: Document, url: str
    ) -> DetailRecord: ...


class Sink(Protocol):
    async def push(self, record: SearchSummary | DetailRecord) -> None: ...


@dataclass(slots=True, kw_only=True)
class Crawler:
    site: Site
    sink: Sink
    limits: CrawlLimits
    state: CrawlState = field(default_factory=CrawlState)
    frontier: Frontier = field(init=False)
    reported_limits: set[str] = field(default_factory=set, repr=False)

    def __post_init__(self):
        self.frontier = Frontier(self.state)

    def reached_limit(self, task: Task) -> tuple[str, int] | None:
        if self.limits.max_requests and self.state.scheduled >= self.limits.max_requests:
            return "max_requests", self.limits.max_requests

        match task:
            case SearchResultsTask() if (
                self.limits.max_pages
                and self.state.scheduled_pages >= self.limits.max_pages
            ):
                return "max_pages", self.limits.max_pages
            case DetailPageTask() if (
                self.limits.max_details
                and self.state.scheduled_details >= self.limits.max_details
            ):
                return "max_details", self.limits.max_details
            case _:
                return None

    async def schedule[T: (SearchResultsTask, DetailPageTask)](
        self, tasks: Iterable[T]
    ) -> list[T]:
        """
        Tasks that are allowed by the limits, in the same order

        Every limit only stops the scheduling of the new tasks, so the tasks that are already scheduled are always processed
        """
        scheduled: list[T] = []
        async with self.state.lock:
            for task in tasks:
                if limit := self.reached_limit(task):
                    if limit[0] not in self.reported_limits:
                        self.reported_limits.add(limit[0])
                        log.action.limit_reached(*limit)
                    continue

                match task:
                    case SearchResultsTask():
                        self.state.scheduled_pages += 1
                    case DetailPageTask():
                        self.state.scheduled_details += 1

                scheduled.append(task)

        return scheduled

    async def handle(self, task: Task) -> list[Task]:
        try:
            document = await self.site.fetch(task)
        except PAGE_ERRORS as err:
            log.action.page_abandoned(task.url, str(err))
            await self.state.record_error()
            return []

        return await process(task, self, document)

    async def crawl(self, seeds: Sequence[Task]) -> CrawlSummary:
        """
        Crawl from the seed tasks (i.e., first search results page) until there is nothing left to schedule
        """
        pending: list[Task] = []
        for task in seeds:
            if await self.frontier.admit([task.url]):
                if isinstance(task, DetailPageTask):
                    await self.state.record_admitted(1)
                pending.extend(await self.schedule([task]))

        while pending:
            tasks, pending = pending, []
            for batch in chunks(tasks, self.limits.concurrency):
                results = await asyncio.gather(*(self.handle(task) for task in batch))
                for follow_ups in results:
                    pending.extend(follow_ups)

        summary = self.state.summary()
        log.detail.crawl_summary(summary)
        return summary


@singledispatch
async def process(task: Task, crawler: Crawler, document: Document) -> list[Task]:
    raise NotImplementedError(f"Unsupported task: {type(task).__name__}")


@process.register(SearchResultsTask)
async def _(task: SearchResultsTask, crawler: Crawler, document: Document) -> list[Task]:
    site, state = crawler.site, crawler.state
    log.detail.page_url(task.url)

    if not state.pages_processed and (total := await site.extract_total_listings(document)):
        log.detail.total_listings(total)

    summaries = await site.extract_search_summaries(document, task.pageno)
    for summary in summaries:
        await crawler.sink.push(summary)

    # ? Link scan also covers the cards whose summary couldn't be extracted
    urls = unique(
        [summary.url for summary in summaries if summary.url]
        + await site.extract_listing_urls(document)
    )
    await state.record_page(len(urls))

    new_urls = await crawler.frontier.admit(urls)
    await state.record_admitted(len(new_urls))
    log.detail.total_listings_on_page(len(urls), len(new_urls), task.pageno)

    follow_ups: list[Task] = list(
        await crawler.schedule(DetailPageTask(url) for url in new_urls)
    )
    await state.record_enqueued(len(follow_ups))

    if next_url := await site.find_next_page(document):
        if await crawler.frontier.admit([next_url]):
            log.action.next_page_found(next_url, task.pageno + 1)
            follow_ups.extend(
                await crawler.schedule([SearchResultsTask(next_url, task.pageno + 1)])
            )
    else:
        log.action.last_page_reached(task.url, task.pageno)

    log.action.search_page_crawled(task.pageno)
    return follow_ups


@process.register(DetailPageTask)
async def _(task: DetailPageTask, crawler: Crawler, document: Document) -> list[Task]:
    record = await crawler.site.extract_detail_record(document, task.url)
    await crawler.sink.push(record)
    await crawler.state.record_detail()

    log.action.listing_crawled(record.title, record.price.current, task.url)
    return []
