# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import os
import sys

from typing import TYPE_CHECKING

from loguru import logger


if TYPE_CHECKING:
    from typing import Final

    from listing_crawler.state import CrawlSummary

__all__ = ["action", "detail", "escape", "info", "debug", "warning", "error", "success", "logger"]

logger.remove()

LOGGER_FORMAT_STR: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line} [Process ID {extra[id]}]</cyan> - <level>{message}</level>"
)

logger.add(
    sys.stderr,
    format=LOGGER_FORMAT_STR,
    level="INFO",
    colorize=True,
    enqueue=True,
)

PROCESS_ID: Final[int] = os.getpid()

logger = logger.bind(id=PROCESS_ID).opt(colors=True)

logger.level("ACTION", no=38, color="<yellow><dim>")

info = logger.info
debug = logger.debug
warning = logger.warning
error = logger.error
success = logger.success


def escape(text: str) -> str:
    """
    Escape the "<" so that loguru doesn't treat the text (i.e., titles, URLs) as color markup
    """
    return text.replace("<", r"\<")


# ? Some common logging patterns so that we don't have to write boilerplate logging code in site modules
class Detail:
    @staticmethod
    def start_url(url: str):
        logger.info(f"Start URL: <blue>{escape(url)}</>")

    @staticmethod
    def active_filters(filters: dict[str, str | int]):
        logger.info(f"Active filters: <yellow>{escape(str(filters))}</>")

    @staticmethod
    def crawl_limits(
        max_pages: int,
        max_details: int,
        max_requests: int,
        concurrency: int,
    ):
        logger.info(
            f"Limits: <yellow>max_pages={max_pages or 'unlimited'}</>, <yellow>max_details={max_details or 'unlimited'}</>, <yellow>max_requests={max_requests}</>, <yellow>concurrency={concurrency}</>"
        )

    @staticmethod
    def page_url(page_url: str):
        logger.info(f"Page URL: <blue>{escape(page_url)}</>")

    @staticmethod
    def total_listings(total_listings: int):
        logger.info(f"Total listings matching the search: <yellow>{total_listings}</>")

    @staticmethod
    def total_listings_on_page(number_of_listings: int, new_listings: int, page_no: int):
        logger.info(
            f"Total listings: <magenta>{number_of_listings}</> <green>({new_listings} new)</> <CYAN><white>(Page # {page_no})</></>",
        )

    @staticmethod
    def delay(seconds: float):
        logger.debug(f"Waiting {seconds:0.1f} seconds before next request ...")

    @staticmethod
    def merged(total_summaries: int, total_details: int, total_combined: int):
        logger.info(
            f"Merged <magenta>{total_summaries}</> search listings with <magenta>{total_details}</> detail records into <yellow>{total_combined}</> listings"
        )

    @staticmethod
    def crawl_summary(summary: CrawlSummary):
        logger.info("=== Crawl Complete ===")
        logger.info(f"Pages processed: <yellow>{summary.pages_processed}</>")
        logger.info(f"Listings found: <yellow>{summary.listings_found}</>")
        logger.info(f"Unique listing URLs: <yellow>{summary.unique_urls}</>")
        logger.info(f"Listings enqueued: <yellow>{summary.listings_enqueued}</>")
        logger.info(f"Details scraped: <yellow>{summary.details_scraped}</>")
        logger.info(f"Errors: <red>{summary.errors}</>")
        logger.info(f"Time: <yellow>{summary.elapsed_seconds:0.1f}s</>")


class Action:
    @staticmethod
    def search_page_crawled(page_no: int):
        logger.log("ACTION", f"<CYAN><white>Search page # {page_no} has been crawled</></>")

    @staticmethod
    def listing_crawled(title: str | None, price: str | None, url: str):
        logger.log(
            "ACTION",
            f"<magenta>{escape(title or 'unknown')}</><light-yellow> | {escape(price or 'no price')}</><blue> | {escape(url)}</> has been crawled",
        )

    @staticmethod
    def next_page_found(url: str, page_no: int):
        logger.log(
            "ACTION",
            f"Next page found <light-yellow>(Page # {page_no})</><blue> | {escape(url)}</>",
        )

    @staticmethod
    def last_page_reached(page_url: str, page_no: int):
        logger.log(
            "ACTION",
            f"As there is no next page after page # {page_no}, therefore stopping the pagination <blue>| {escape(page_url)}</>",
        )

    @staticmethod
    def limit_reached(limit: str, value: int):
        logger.log(
            "ACTION",
            f"<yellow>{limit}</> limit (<yellow>{value}</>) has been reached, therefore not scheduling new pages",
        )

    @staticmethod
    def page_abandoned(url: str, reason: str):
        logger.log(
            "ACTION",
            f"<red>Page has been abandoned</><blue> | {escape(url)}</> <red>({escape(reason)})</>",
        )


action = Action()
detail = Detail()
