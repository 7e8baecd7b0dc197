# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio
import os

from dataclasses import dataclass
from typing import ClassVar, cast

from aiofile import AIOFile

from listing_crawler.path import html_directory


@dataclass(slots=True, kw_only=True)
class PageHTML:
    kind: ClassVar[str] = ""

    date: str
    sitename: str

    @property
    def directory(self) -> str:
        return os.path.join(
            html_directory(sitename=self.sitename, date=self.date), self.kind
        )

    @property
    def file(self) -> str:
        raise NotImplementedError

    async def save(self, content: str, encoding: str = "utf-8-sig") -> None:
        await asyncio.to_thread(
            os.makedirs,
            self.directory,
            exist_ok=True,
        )
        async with AIOFile(
            self.file,
            "w",
            encoding=encoding,
        ) as afp:
            await afp.write(content)

    async def load(self, encoding: str = "utf-8-sig") -> str:
        async with AIOFile(
            self.file,
            "r",
            encoding=encoding,
        ) as afp:
            html = cast("str", await afp.read())

        return html

    async def exists(self) -> bool:
        return await asyncio.to_thread(os.path.exists, self.file)


@dataclass(slots=True, kw_only=True)
class SearchPageHTML(PageHTML):
    kind: ClassVar[str] = "search"

    pageno: int

    @property
    def file(self) -> str:
        return os.path.join(self.directory, f"search-{self.pageno}.html")


@dataclass(slots=True, kw_only=True)
class DetailPageHTML(PageHTML):
    kind: ClassVar[str] = "detail"

    listing_id: str

    def __post_init__(self):
        self.listing_id = self.listing_id.replace("/", "_").replace(":", "_") or "unknown"

    @property
    def file(self) -> str:
        return os.path.join(self.directory, f"detail-{self.listing_id}.html")
