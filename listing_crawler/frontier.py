# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urljoin

from listing_crawler.helpers import compile_regex
from listing_crawler.resolver import resolve_field


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from listing_crawler.document import Document
    from listing_crawler.resolver import Strategy
    from listing_crawler.state import CrawlState


def fingerprint(url: str) -> str:
    """
    Normalized form of the URL used for comparing whether two URLs are the same page (lowercase, without trailing slashes)
    """
    return compile_regex(r"/+$").sub("", url.strip()).lower()


@dataclass(slots=True, frozen=True)
class Frontier:
    state: CrawlState

    async def admit(self, urls: Iterable[str]) -> list[str]:
        """
        Return only the URLs that have not been admitted before (in the same order) and remember them

        This is the only place where fingerprints are added, therefore every URL is admitted at most once per crawl run, even when it is called concurrently with overlapping URLs
        """
        admitted: list[str] = []
        async with self.state.lock:
            for url in urls:
                if not url:
                    continue
                if (fp := fingerprint(url)) in self.state.fingerprints:
                    continue
                self.state.fingerprints.add(fp)
                admitted.append(url)
        return admitted


async def find_next_page(document: Document, strategies: Sequence[Strategy]) -> str | None:
    """
    URL of the next search results page or None if it is the last page
    """
    if not (href := await resolve_field(document, strategies)):
        return None

    url = urljoin(document.url, href)
    if fingerprint(url) == fingerprint(document.url):
        # ? Some layouts keep the "next" button enabled on the last page, pointing to the same page
        return None

    return url
