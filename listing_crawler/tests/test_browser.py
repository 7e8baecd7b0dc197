# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from dunia.browser import BrowserConfig
from dunia.error import TimeoutException as VisitTimeout

from listing_crawler import browser, error
from listing_crawler.browser import get_browser_config, load_page_content


PAGE_URL = "https://www.avto.net/Ads/details.asp?id=1"
HTML = "<html><body><h3>Volkswagen Golf</h3></body></html>"


@dataclass(slots=True)
class FakePage:
    ready: bool
    url: str = ""
    closed: bool = False

    async def wait_for_selector(self, query: str, timeout: float, state: str):
        if not self.ready:
            raise error.PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    async def content(self) -> str:
        return HTML

    async def close(self):
        self.closed = True


@dataclass(slots=True)
class FakeBrowser:
    ready_after: int = 0
    pages: list[FakePage] = field(default_factory=list)

    async def new_page(self) -> FakePage:
        page = FakePage(ready=len(self.pages) >= self.ready_after)
        self.pages.append(page)
        return page


async def fake_visit_link(page: FakePage, url: str, *, wait_until: str):
    page.url = url


async def failing_visit_link(page: FakePage, url: str, *, wait_until: str):
    raise VisitTimeout("net::ERR_CONNECTION_RESET")


def test_browser_config():
    config = get_browser_config(
        headless=False, default_navigation_timeout=60000, default_timeout=20000
    )

    assert isinstance(config, BrowserConfig)
    assert config.headless is False
    assert config.default_navigation_timeout == 60000
    assert config.default_timeout == 20000
    assert config.locale == "sl-SI"
    assert config.viewport == {"width": 1920, "height": 1080}
    # ? No cache directory, so the browser always starts with a fresh profile
    assert config.user_data_dir == ""


async def test_load_page_content(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(browser, "visit_link", fake_visit_link)
    fake = FakeBrowser()

    page = await load_page_content(fake, PAGE_URL, ready_query="h3", timeout=1, retries=0)  # type: ignore

    assert page == browser.PageContent(url=PAGE_URL, content=HTML)
    assert [p.closed for p in fake.pages] == [True]


async def test_page_is_loaded_again_until_ready(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(browser, "visit_link", fake_visit_link)
    fake = FakeBrowser(ready_after=1)

    page = await load_page_content(fake, PAGE_URL, ready_query="h3", timeout=1, retries=1)  # type: ignore

    assert page.content == HTML
    assert len(fake.pages) == 2
    assert all(p.closed for p in fake.pages)


async def test_page_never_ready(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(browser, "visit_link", fake_visit_link)
    fake = FakeBrowser(ready_after=5)

    with pytest.raises(error.TimeoutException):
        await load_page_content(fake, PAGE_URL, ready_query="h3", timeout=1, retries=0)  # type: ignore

    assert len(fake.pages) == 1


async def test_navigation_failed(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(browser, "visit_link", failing_visit_link)
    fake = FakeBrowser()

    with pytest.raises(error.NavigationFailed):
        await load_page_content(fake, PAGE_URL, ready_query="h3", timeout=1, retries=3)  # type: ignore

    # ? Navigation retries belong to dunia, failed navigation isn't loaded again
    assert len(fake.pages) == 1
    assert fake.pages[0].closed
