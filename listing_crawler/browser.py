# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import backoff

from dunia.browser import BrowserConfig
from dunia.error import TimeoutException as VisitTimeout
from dunia.extraction import visit_link

from listing_crawler import error
from listing_crawler.log import debug, escape


if TYPE_CHECKING:
    from typing import Final

    from dunia.playwright import PlaywrightBrowser, PlaywrightPage


LOCALE: Final[str] = "sl-SI"
VIEWPORT_WIDTH: Final[int] = 1920
VIEWPORT_HEIGHT: Final[int] = 1080


@dataclass(slots=True, frozen=True)
class PageContent:
    url: str
    content: str


def get_browser_config(
    *, headless: bool, default_navigation_timeout: int, default_timeout: int
) -> BrowserConfig:
    """
    Fresh browser profile (no cache directory) with Slovenian locale, as every crawl run starts from scratch
    """
    return BrowserConfig(
        user_data_dir="",
        headless=headless,
        default_navigation_timeout=default_navigation_timeout,
        default_timeout=default_timeout,
        locale=LOCALE,
        viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT},
    )


async def visit(page: PlaywrightPage, url: str) -> None:
    """
    Navigate to the URL (dunia retries the navigation with exponential backoff)

    Raises NavigationFailed when every try has failed
    """
    try:
        await visit_link(page, url, wait_until="domcontentloaded")
    except VisitTimeout as err:
        raise error.NavigationFailed(
            f"Navigation has failed: {err.message}", url=url
        ) from err


async def wait_for_page(page: PlaywrightPage, query: str, timeout: float) -> None:
    """
    Wait until the page shows the expected content

    Raises TimeoutException if nothing matching the query has appeared within the timeout (seconds)
    """
    try:
        await page.wait_for_selector(query, timeout=timeout * 1000, state="attached")
    except error.PlaywrightTimeoutError as err:
        raise error.TimeoutException(
            f"Timed out waiting for {query!r} after {timeout:0.0f} seconds", url=page.url
        ) from err


async def load_page_content(
    browser: PlaywrightBrowser,
    url: str,
    *,
    ready_query: str,
    timeout: float,
    retries: int,
) -> PageContent:
    """
    Rendered HTML of the page (and the URL after redirects) once its expected content is present

    The page is loaded again (in a new tab) for at most "retries" times if its content doesn't appear in time
    """

    @backoff.on_exception(
        backoff.expo,
        error.TimeoutException,
        max_tries=max(retries, 0) + 1,
        on_backoff=error.backoff_hdlr,  # type: ignore
    )
    async def load() -> PageContent:
        page = await browser.new_page()
        try:
            await visit(page, url)
            await wait_for_page(page, ready_query, timeout)
            debug(escape(f"Page is loaded: {page.url}"))
            return PageContent(url=page.url, content=await page.content())
        finally:
            await page.close()

    return await load()
