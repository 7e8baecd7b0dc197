# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import pytest

from dunia.lxml import LXMLElement

from listing_crawler.document import parse_document
from listing_crawler.error import HTMLParsingError


PAGE_URL = "https://www.avto.net/Ads/results.asp"


async def test_empty_document():
    with pytest.raises(HTMLParsingError):
        await parse_document("   ", PAGE_URL)


async def test_queries(search_html: str):
    document = await parse_document(search_html, PAGE_URL)

    assert document.url == PAGE_URL
    assert len(await document.query_selector_all("a.listing")) == 3
    assert await document.text_content("a.listing") == "Prvi"
    assert await document.get_attribute("a.listing", "href") == "/Ads/details.asp?id=1"
    assert await document.query_selector("a.missing") is None
    assert await document.text_content("a.missing") is None


async def test_invalid_query(search_html: str):
    document = await parse_document(search_html, PAGE_URL)

    assert await document.query_selector("a[href=") is None
    assert await document.text_content("a[href=") is None


async def test_inner_text():
    document = await parse_document(
        "<html><body><table><tr><td>Notranjost:<br>Usnjeni volan<br> Radio </td></tr></table></body></html>"
    )
    assert await document.inner_text("td") == "Notranjost:\nUsnjeni volan\nRadio"


async def test_marker_comments(marker_html: str):
    document = await parse_document(marker_html, PAGE_URL)

    comments = await document.comments("PRICE")
    assert len(comments) == 1

    # ? Only the elements up to the next comment belong to the marker
    elements = comments[0].following_elements()
    assert [await element.text_content() for element in elements] == [
        "15.990 €",
        "13.990 €",
    ]
    assert await document.comments("NAZIV") == []


async def test_navigation():
    document = await parse_document(
        """
        <html><body>
          <div class="card-body"><p>Prvi</p><p>Drugi</p><p><i class="fa-user"></i></p></div>
        </body></html>
        """
    )
    icon = await document.query_selector(".fa-user")
    assert icon is not None

    card = await icon.closest(".card-body")
    assert card is not None and card.tag == "div"

    paragraph = await icon.parent()
    assert paragraph is not None
    assert [await p.text_content() for p in await paragraph.previous_siblings()] == [
        "Drugi",
        "Prvi",
    ]


async def test_evaluate(search_html: str):
    document = await parse_document(search_html, PAGE_URL)

    async def count_links(doc):
        return len(await doc.query_selector_all("a"))

    assert await document.evaluate(count_links) == 5
    assert await document.evaluate(lambda doc: doc.url) == PAGE_URL


async def test_document_tree(search_html: str):
    document = await parse_document(search_html, PAGE_URL)

    # ? Parsed by dunia's lxml engine into the whole <html> tree
    assert document.tag == "html"
    assert isinstance(document.handle, LXMLElement)
    assert document.handle.handle is document.node


async def test_query_matches_the_element_itself():
    document = await parse_document("<html><body><table><tr><td>A</td></tr></table></body></html>")

    table = await document.query_selector("table")
    assert table is not None
    assert await table.query_selector("table") == table
    assert await table.closest("table") == table
