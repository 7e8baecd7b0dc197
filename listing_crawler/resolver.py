# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

"""
Ordered extraction strategies per field

The site has (at least) three layout variants for the same data, so every field is described as a list of strategies which are tried strictly in order and the first non-empty result wins. A strategy that doesn't match or raises is a "field miss" and the next one is tried; if all of them miss, the field is absent (None). Nothing here raises outward.
"""

from __future__ import annotations

import inspect

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from listing_crawler.document import Document, Element
from listing_crawler.error import MarkerNotFound, QueryNotFound
from listing_crawler.log import debug, escape


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    type Page = Document | Element
    type Reader = Callable[[list[Element]], Any | Awaitable[Any]]
    type Routine = Callable[[Page], Any | Awaitable[Any]]


@dataclass(slots=True, frozen=True)
class Text:
    """Trimmed text of the first element matching the query"""

    query: str


@dataclass(slots=True, frozen=True)
class Attribute:
    """First non-empty attribute (in the given order) of the first element matching the query"""

    query: str
    names: tuple[str, ...] = ("src",)


@dataclass(slots=True, frozen=True)
class Link:
    """Usable href (not empty, "#" or javascript:) of the first link matching the query"""

    query: str


@dataclass(slots=True, frozen=True)
class LinkText:
    """href of the first link matching the query whose text contains one of the texts (case-insensitive)"""

    query: str
    texts: tuple[str, ...]
    exact: bool = False


@dataclass(slots=True, frozen=True)
class Marker:
    """Structural marker comment containing the token, its following sibling elements are handed to the reader"""

    token: str
    reader: Reader


@dataclass(slots=True, frozen=True)
class Inspect:
    """Any read-only routine over the page"""

    routine: Routine


type Strategy = Text | Attribute | Link | LinkText | Marker | Inspect


def is_empty(value: Any) -> bool:
    match value:
        case None:
            return True
        case str():
            return not value.strip()
        case list() | tuple() | dict() | set() | frozenset():
            return not value
        case _:
            return False


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def usable_href(link: Element) -> str | None:
    href = (await link.get_attribute("href") or "").strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None
    return href


async def apply_strategy(page: Page, strategy: Strategy) -> Any:
    match strategy:
        case Text(query):
            return await page.text_content(query)

        case Attribute(query, names):
            if not (element := await page.query_selector(query)):
                raise QueryNotFound("Element not found", query)
            for name in names:
                if (value := await element.get_attribute(name)) and value.strip():
                    return value.strip()
            return None

        case Link(query):
            for link in await page.query_selector_all(query):
                if href := await usable_href(link):
                    return urljoin(page.url, href) if isinstance(page, Document) else href
            return None

        case LinkText(query, texts, exact):
            wanted = tuple(text.lower() for text in texts)
            for link in await page.query_selector_all(query):
                text = (await link.text_content() or "").lower()
                if not any((text == w) if exact else (w in text) for w in wanted):
                    continue
                if href := await usable_href(link):
                    return urljoin(page.url, href) if isinstance(page, Document) else href
            return None

        case Marker(token, reader):
            if not isinstance(page, Document):
                raise MarkerNotFound("Marker comments can only be searched in Document", token)
            if not (comments := await page.comments(token)):
                raise MarkerNotFound("Marker comment not found", token)
            for comment in comments:
                value = await _maybe_await(reader(comment.following_elements()))
                if not is_empty(value):
                    return value
            return None

        case Inspect(routine):
            if isinstance(page, Document):
                return await page.evaluate(routine)
            return await _maybe_await(routine(page))


async def resolve_field(page: Page, strategies: Sequence[Strategy]) -> Any | None:
    """
    Try the strategies in order and return the first non-empty result (strings are trimmed)

    Returns None if every strategy misses
    """
    for strategy in strategies:
        try:
            value = await apply_strategy(page, strategy)
        except Exception as err:
            debug(escape(f"Strategy {type(strategy).__name__} missed: {err!r}"))
            continue

        if is_empty(value):
            continue

        return value.strip() if isinstance(value, str) else value

    return None


async def resolve_all(page: Page, strategies: Sequence[Strategy]) -> list[Any]:
    """
    List counterpart of resolve_field(), returns the first non-empty list (or an empty list)
    """
    match await resolve_field(page, strategies):
        case list() | tuple() as values:
            return list(values)
        case None:
            return []
        case value:
            return [value]
