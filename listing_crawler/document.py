# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

"""
Read-only page handle over the rendered HTML of a page

Parsing and the CSS queries are done by dunia's lxml engine, this module only adds what the extraction code needs on top of it: the structural marker comments, the ancestor/sibling walks and the browser-like rendering of the text (innerText). Everything is evaluated against an immutable lxml snapshot of the page, so nothing here can mutate the live page.
"""

from __future__ import annotations

import inspect

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from dunia.extraction import parse_document as parse_html
from dunia.lxml import LXMLDocument, LXMLElement
from lxml import etree

from listing_crawler.error import HTMLParsingError


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

    from lxml.html import HtmlElement


# ? Elements whose boundaries are rendered as line breaks by the browser
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "br",
        "dd",
        "div",
        "dl",
        "dt",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "nav",
        "ol",
        "p",
        "section",
        "table",
        "tbody",
        "td",
        "th",
        "thead",
        "tr",
        "ul",
    }
)


def is_element(node: etree._Element) -> bool:
    # ? Comments and processing instructions have a function (not str) as their tag
    return isinstance(node.tag, str)


def render_text(node: HtmlElement) -> str:
    """
    Text of the node where block level boundaries (and <br>) become line breaks, similar to innerText
    """
    parts: list[str] = []

    def walk(el: etree._Element, root: bool = False):
        if is_element(el):
            block = el.tag in BLOCK_TAGS
            if block:
                parts.append("\n")
            if el.text:
                parts.append(el.text)
            for child in el:
                walk(child)
            if block:
                parts.append("\n")

        if not root and el.tail:
            parts.append(el.tail)

    walk(node, root=True)

    lines = (line.strip() for line in "".join(parts).splitlines())
    return "\n".join(line for line in lines if line)


@dataclass(slots=True, frozen=True)
class Element:
    node: HtmlElement

    @property
    def handle(self) -> LXMLElement:
        return LXMLElement(self.node)

    @property
    def tag(self) -> str:
        return str(self.node.tag).lower()

    async def query_selector(self, query: str) -> Element | None:
        """
        First element matching the query (the element itself included), an invalid query doesn't match anything
        """
        if element := await self.handle.query_selector(query):
            return Element(element.handle)
        return None

    async def query_selector_all(self, query: str) -> list[Element]:
        return [Element(element.handle) for element in await self.handle.query_selector_all(query)]

    async def text_content(self, query: str | None = None) -> str | None:
        """
        Trimmed text content of this element (or of the first element matching the query)

        Returns None if the query doesn't match anything
        """
        if query is None:
            return (await self.handle.text_content() or "").strip()

        if element := await self.query_selector(query):
            return await element.text_content()

        return None

    async def inner_text(self, query: str | None = None) -> str | None:
        if query is None:
            return render_text(self.node)

        if element := await self.query_selector(query):
            return await element.inner_text()

        return None

    async def get_attribute(self, query_or_name: str, name: str | None = None) -> str | None:
        """
        Element.get_attribute("href") or Element.get_attribute("a", "href") for the first match of the query
        """
        if name is None:
            return await self.handle.get_attribute(query_or_name)

        if element := await self.query_selector(query_or_name):
            return await element.get_attribute(name)

        return None

    async def closest(self, query: str) -> Element | None:
        """
        Nearest ancestor (including this element) which matches the query
        """
        root = LXMLElement(self.node.getroottree().getroot())
        matches = {element.handle for element in await root.query_selector_all(query)}
        node: HtmlElement | None = self.node
        while node is not None:
            if node in matches:
                return Element(node)
            node = node.getparent()
        return None

    async def parent(self) -> Element | None:
        if (node := self.node.getparent()) is not None:
            return Element(node)
        return None

    async def previous_siblings(self) -> list[Element]:
        """
        Previous sibling elements, nearest first
        """
        return [
            Element(node)
            for node in self.node.itersiblings(preceding=True)
            if is_element(node)
        ]


@dataclass(slots=True, frozen=True)
class Comment:
    """
    HTML comment used by the site as a stable anchor before a data block (i.e., <!-- PRICE -->)
    """

    node: etree._Comment

    @property
    def text(self) -> str:
        return (self.node.text or "").strip()

    def following_elements(self) -> list[Element]:
        """
        Sibling elements after the comment up to the next comment

        If the comment is the last node of its parent, then parent's following sibling elements are used instead
        """
        elements: list[Element] = []
        for node in self.node.itersiblings():
            if isinstance(node, etree._Comment):
                break
            if is_element(node):
                elements.append(Element(node))

        if not elements and (parent := self.node.getparent()) is not None:
            for node in parent.itersiblings():
                if isinstance(node, etree._Comment):
                    break
                if is_element(node):
                    elements.append(Element(node))

        return elements


@dataclass(slots=True, frozen=True)
class Document(Element):
    url: str = ""

    def iter_comments(self) -> Iterator[Comment]:
        for node in self.node.iter(etree.Comment):
            yield Comment(node)

    async def comments(self, token: str) -> list[Comment]:
        """
        Structural marker comments containing the token (case-sensitive, as the site writes them in uppercase)
        """
        return [comment for comment in self.iter_comments() if token in comment.text]

    async def evaluate[T](
        self, routine: Callable[[Document], T | Awaitable[T]]
    ) -> T:
        """
        Run the read-only inspection routine against the document tree
        """
        result = routine(self)
        if inspect.isawaitable(result):
            return await result
        return result


async def parse_document(content: str, url: str = "") -> Document:
    """
    Parse the HTML content of the page into Document using dunia's lxml engine

    Raises HTMLParsingError if the content is empty or it can't be parsed
    """
    if not content or not content.strip():
        raise HTMLParsingError("Document is empty", url=url or None)

    try:
        document = await parse_html(content, engine="lxml")
    except ValueError as err:
        # ? lxml refuses str content that carries its own encoding declaration
        raise HTMLParsingError(
            f"Document is not parsed correctly: {err}", url=url or None
        ) from err

    if not document:
        raise HTMLParsingError("Document is not parsed correctly", url=url or None)

    return Document(cast(LXMLDocument, document).handle, url)
