# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

"""
Search summaries and detail records of avto.net pages

Each field is described by an ordered strategy table (see listing_crawler.resolver), where the wide card layout comes first, then the compact card layout and lastly the legacy table layout. Field level failures are only logged at DEBUG level, so the functions here always return a (possibly partial) record.
"""

from __future__ import annotations

import asyncio

from typing import TYPE_CHECKING
from urllib.parse import urljoin

from result import Err, Ok, as_async_result

from listing_crawler import error
from listing_crawler.avtonet import config
from listing_crawler.avtonet.labels import lookup_label, lookup_search_label
from listing_crawler.avtonet.urls import extract_listing_id
from listing_crawler.data import DetailRecord, Price, SearchSummary, Seller, timestamp
from listing_crawler.helpers import compile_regex, normalize_whitespace, parse_int, unique
from listing_crawler.log import debug, escape
from listing_crawler.resolver import (
    Attribute,
    Inspect,
    Link,
    LinkText,
    Marker,
    Text,
    resolve_all,
    resolve_field,
)


if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Final

    from listing_crawler.data import SellerType
    from listing_crawler.document import Document, Element
    from listing_crawler.resolver import Strategy


PRICE_REGEX: Final[str] = r"[\d.]+\s*€"
PHONE_REGEX: Final[str] = r"[\d][\d\s/\-]{5,}"
TOTAL_LISTINGS_REGEX: Final[str] = r"([\d.]+)\s*oglasov"
IMAGE_SIZE_REGEX: Final[str] = r"/(?:small|thumb)/"
YEAR_REGEX: Final[str] = r"^\d{4}$"

# ? Minimum length of the text before the spec table to be considered as description
DESCRIPTION_MIN_LENGTH: Final[int] = 30
BASIC_INFO_HEADER: Final[str] = "Osnovni podatki"


# ? Search results page
# ? =================


CARD_QUERIES: Final[tuple[str, ...]] = (".GO-Results-Row", ".ResultsAd")

CARD_TITLE: Final[Sequence[Strategy]] = (
    Text(".GO-Results-Naziv"),
    Text('a[href*="details.asp"] span'),
    Text('a[href*="details.asp"]'),
)

CARD_LINK: Final[Sequence[Strategy]] = (
    Link('a[href*="details.asp"]'),
    Link("a.stretched-link"),
)

CARD_PRICE: Final[Sequence[Strategy]] = (
    Text(".GO-Results-Top-Price-TXT-Regular"),
    Text(".GO-Results-Price-TXT-Regular"),
    Text(".GO-Results-Top-Price"),
    Text(".GO-Results-Price"),
    Text(".ResultsAdPrice"),
)

CARD_THUMBNAIL: Final[Sequence[Strategy]] = (
    Attribute(".GO-Results-Top-Photo img", ("src", "data-src")),
    Attribute(".GO-Results-Photo img", ("src", "data-src")),
    Attribute("img", ("src", "data-src")),
)

CARD_SPEC_ROWS: Final[Sequence[Strategy]] = (
    Inspect(lambda card: card.query_selector_all(".GO-Results-Top-Data-Top:not(.d-none) table tr")),
    Inspect(lambda card: card.query_selector_all(".GO-Results-Data table tr")),
    Inspect(lambda card: card.query_selector_all("table tr")),
)

NEXT_PAGE: Final[Sequence[Strategy]] = (
    Link("li.GO-Rounded-R:not(.disabled) a"),
    LinkText("ul.pagination a.page-link", ("Naprej", "Naslednja")),
    LinkText("a", ("Naprej", "Naslednja"), exact=True),
    Link("a.Stranx:last-of-type"),
    Link('a[title*="nasledn"]'),
    LinkText("a", ("»",), exact=True),
)


@as_async_result(error.ListingsNotFound)
async def get_listing_cards(document: Document) -> list[Element]:
    for query in CARD_QUERIES:
        if cards := await document.query_selector_all(query):
            return cards

    raise error.ListingsNotFound("Listing cards are not found", url=document.url)


async def extract_card_specs(card: Element) -> dict[str, str]:
    """
    Partial specs from the label/value table of the card (unknown labels are ignored)
    """
    specs: dict[str, str] = {}
    for row in await resolve_all(card, CARD_SPEC_ROWS):
        if not (cells := await row.query_selector_all("th, td")):
            continue

        label = await cells[0].text_content() or ""
        if len(cells) > 1:
            value = await cells[-1].text_content() or ""
        elif compile_regex(YEAR_REGEX).match(label.strip()):
            # ? Registration year shown without any label
            value = label
        else:
            continue

        if not (field := lookup_search_label(label)) or field in specs:
            continue
        if value := normalize_whitespace(value):
            specs[field] = value

    return specs


@as_async_result(error.ListingLinkNotFound)
async def extract_search_summary(
    card: Element, page_url: str, pageno: int, scraped_at: str
) -> SearchSummary:
    title, href, price, thumbnail = await asyncio.gather(
        resolve_field(card, CARD_TITLE),
        resolve_field(card, CARD_LINK),
        resolve_field(card, CARD_PRICE),
        resolve_field(card, CARD_THUMBNAIL),
    )

    # ? Cards without link and title are advertisement banners between the listings
    if not href and not title:
        raise error.ListingLinkNotFound("Listing card has neither link nor title", url=page_url)

    url = urljoin(page_url, href) if href else None
    specs = await extract_card_specs(card)

    return SearchSummary(
        title=normalize_whitespace(title) if title else None,
        url=url,
        listing_id=extract_listing_id(url),
        price=normalize_whitespace(price) if price else None,
        thumbnail=urljoin(page_url, thumbnail) if thumbnail else None,
        year=specs.get("year"),
        mileage=specs.get("mileage"),
        fuel_type=specs.get("fuel_type"),
        transmission=specs.get("transmission"),
        engine=specs.get("engine"),
        search_page=pageno,
        scraped_at=scraped_at,
    )


async def extract_search_summaries(
    document: Document, pageno: int, scraped_at: str | None = None
) -> list[SearchSummary]:
    """
    One summary per listing card on the search results page

    An empty page gives an empty list, and a card that can't be extracted is skipped
    """
    scraped_at = scraped_at or timestamp()

    match await get_listing_cards(document):
        case Ok(cards):
            pass
        case Err(err):
            debug(escape(str(err)))
            return []

    summaries: list[SearchSummary] = []
    for card in cards:
        match await extract_search_summary(card, document.url, pageno, scraped_at):
            case Ok(summary):
                summaries.append(summary)
            case Err(err):
                debug(escape(f"Listing card is skipped: {err}"))

    return summaries


async def extract_listing_urls(document: Document) -> list[str]:
    """
    Absolute URLs of every detail page linked from the page (in page order, without duplicates)
    """
    urls: list[str] = []
    for link in await document.query_selector_all('a[href*="details.asp"]'):
        if href := (await link.get_attribute("href") or "").strip():
            urls.append(urljoin(document.url, href))

    return unique(urls)


@as_async_result(error.TotalListingsTextNotFound, ValueError)
async def get_total_listings(document: Document) -> int:
    text = await document.text_content() or ""
    if not (match := compile_regex(TOTAL_LISTINGS_REGEX).search(text)):
        raise error.TotalListingsTextNotFound(
            "Total listings text is not found", url=document.url
        )
    return parse_int(match.group(1))


async def extract_total_listings(document: Document) -> int | None:
    """
    Number of listings matching the search (i.e., "1.234 oglasov")
    """
    return (await get_total_listings(document)).ok()


# ? Detail page
# ? ===========


def is_price(text: str) -> bool:
    return bool(compile_regex(PRICE_REGEX).search(text))


async def price_texts(elements: Sequence[Element]) -> list[str]:
    texts: list[str] = []
    for element in elements:
        candidates = await element.query_selector_all("span") or [element]
        for candidate in candidates:
            if (text := normalize_whitespace(await candidate.text_content() or "")) and is_price(text):
                texts.append(text)

    return unique(texts)


async def card_price_texts(document: Document) -> list[str]:
    spans = await document.query_selector_all(".card-body .h2 span, .card-body .h1 span")
    return await price_texts(spans)


async def bold_price_texts(document: Document) -> list[str]:
    texts: list[str] = []
    for span in await document.query_selector_all(".font-weight-bold span, span.font-weight-bold"):
        if (text := normalize_whitespace(await span.text_content() or "")) and "€" in text:
            texts.append(text)

    return unique(texts)


async def read_description_notes(document: Document) -> str | None:
    if not (notes := await document.query_selector("#StareOpombe")):
        return None

    items = [text for li in await notes.query_selector_all("li") if (text := await li.text_content())]
    if items:
        return "\n".join(items)

    return await notes.inner_text()


async def read_description_before_table(document: Document) -> str | None:
    if not (table := await document.query_selector("table.table-sm")):
        return None

    for sibling in await table.previous_siblings():
        text = normalize_whitespace(await sibling.text_content() or "")
        if len(text) > DESCRIPTION_MIN_LENGTH and not text.startswith(BASIC_INFO_HEADER):
            return text

    return None


async def read_spec_rows(rows: Sequence[Element]) -> dict[str, str]:
    """
    Canonical specs from the label/value rows where the first occurrence of a field wins
    """
    specs: dict[str, str] = {}
    for row in rows:
        th = await row.query_selector("th")
        cells = await row.query_selector_all("td")
        if th is not None:
            label = await th.text_content() or ""
        elif len(cells) >= 2:
            label = await cells[0].text_content() or ""
        else:
            continue

        if not cells:
            continue

        value = normalize_whitespace(await cells[-1].text_content() or "")
        if not value or not (field := lookup_label(label)) or field in specs:
            continue

        specs[field] = value

    return specs


async def is_equipment_table(table: Element, labels: Sequence[str]) -> bool:
    if not (header := await table.query_selector("tr")):
        return False
    text = (await header.text_content() or "").casefold()
    return any(label.casefold() in text for label in labels)


async def read_marker_spec_tables(elements: list[Element]) -> dict[str, str]:
    """
    Specs from every table of the data block (i.e., basic data, then consumption and emissions)
    """
    rows: list[Element] = []
    for element in elements:
        # ? Query matches the element itself too, so a bare <table> after the marker is included
        for table in await element.query_selector_all("table"):
            if await is_equipment_table(table, config.EQUIPMENT_LABELS):
                continue
            rows.extend(await table.query_selector_all("tr"))

    return await read_spec_rows(rows)


async def read_all_spec_tables(document: Document) -> dict[str, str]:
    rows: list[Element] = []
    for table in await document.query_selector_all("table.table-sm"):
        # ? Equipment tables use the categories (i.e., "Notranjost:") as labels
        if await is_equipment_table(table, config.EQUIPMENT_LABELS):
            continue
        rows.extend(await table.query_selector_all("tr"))

    return await read_spec_rows(rows)


async def read_seller_name_after_marker(elements: list[Element]) -> str | None:
    for element in elements:
        li = element if element.tag == "li" else await element.query_selector("li")
        if li is None:
            continue
        if lines := (await li.inner_text() or "").splitlines():
            return lines[0].strip()

    return None


async def read_seller_name_near_icon(document: Document) -> str | None:
    if not (icon := await document.query_selector(".fa-user")):
        return None

    if container := await icon.closest(".card-body") or await icon.parent():
        return await container.text_content("a, .font-weight-bold")

    return None


async def read_phone_link(document: Document) -> str | None:
    if not (href := await document.get_attribute('a[href^="tel:"]', "href")):
        return None
    return href.removeprefix("tel:").strip()


async def read_phone_near_icon(document: Document) -> str | None:
    if not (icon := await document.query_selector(".fa-phone-square, .fa-phone")):
        return None

    container = await icon.closest("li, .list-group-item") or await icon.parent()
    text = await container.text_content() if container else ""
    if match := compile_regex(PHONE_REGEX).search(text or ""):
        return compile_regex(r"[\s/\-]+$").sub("", match.group(0)).strip()

    return None


async def read_location_near_icon(document: Document) -> str | None:
    if not (icon := await document.query_selector(".fa-map-marker")):
        return None

    if parent := await icon.parent():
        return normalize_whitespace(await parent.text_content() or "")

    return None


TITLE: Final[Sequence[Strategy]] = (Text("h3"), Text("h1"))

PRICE: Final[Sequence[Strategy]] = (
    Marker("PRICE", price_texts),
    Inspect(card_price_texts),
    Inspect(bold_price_texts),
)

DESCRIPTION: Final[Sequence[Strategy]] = (
    Inspect(read_description_notes),
    Inspect(read_description_before_table),
)

SPECS: Final[Sequence[Strategy]] = (
    Marker("DATA", read_marker_spec_tables),
    Inspect(read_all_spec_tables),
)

SELLER_NAME: Final[Sequence[Strategy]] = (
    Marker("NAZIV", read_seller_name_after_marker),
    Inspect(read_seller_name_near_icon),
)

SELLER_PHONE: Final[Sequence[Strategy]] = (
    Inspect(read_phone_link),
    Inspect(read_phone_near_icon),
)

SELLER_LOCATION: Final[Sequence[Strategy]] = (Inspect(read_location_near_icon),)


def price_from_texts(texts: Sequence[str]) -> Price:
    """
    First distinct price is the regular (original) price and the second one is the current (financed) price

    When there is only one price, it is the current price
    """
    match unique(texts):
        case []:
            return Price()
        case [current]:
            return Price(current=current)
        case [original, current, *_]:
            return Price(current=current, original=original)


def normalize_image_url(url: str) -> str:
    """
    Full resolution variant of the image URL ("/small/" and "/thumb/" become "/big/")
    """
    return compile_regex(IMAGE_SIZE_REGEX).sub("/big/", url)


@as_async_result(error.TitleNotFound)
async def extract_title(document: Document) -> str:
    if not (title := await resolve_field(document, TITLE)):
        raise error.TitleNotFound("Title is not found", url=document.url)
    return normalize_whitespace(title)


@as_async_result(error.PriceNotFound)
async def extract_price(document: Document) -> Price:
    if not (texts := await resolve_all(document, PRICE)):
        raise error.PriceNotFound("Price is not found", url=document.url)
    return price_from_texts(texts)


@as_async_result(error.DescriptionNotFound)
async def extract_description(document: Document) -> str:
    if not (description := await resolve_field(document, DESCRIPTION)):
        raise error.DescriptionNotFound("Description is not found", url=document.url)
    return description


@as_async_result(error.TableNotFound)
async def extract_specs(document: Document) -> dict[str, str]:
    if not (specs := await resolve_field(document, SPECS)):
        raise error.TableNotFound("Spec table is not found", url=document.url)
    return specs


@as_async_result(error.EquipmentNotFound)
async def extract_equipment(
    document: Document, labels: Sequence[str] = config.EQUIPMENT_LABELS
) -> tuple[str, ...]:
    lines: list[str] = []
    for table in await document.query_selector_all("table.table-sm"):
        if not await is_equipment_table(table, labels):
            continue
        for cell in await table.query_selector_all("td"):
            lines.extend(
                line
                for text in (await cell.inner_text() or "").splitlines()
                if len(line := text.strip()) >= 3 and not line.endswith(":")
            )

    if not lines:
        raise error.EquipmentNotFound("Equipment table is not found", url=document.url)

    return tuple(unique(lines))


@as_async_result(error.ImagesNotFound)
async def extract_images(document: Document) -> tuple[str, ...]:
    urls: list[str] = []

    for img in await document.query_selector_all(
        '.GO-OglasPhoto img, .GO-OglasThumb img, img[src*="images.avto.net"], img#BigPhoto, #BigPhoto img'
    ):
        for name in ("src", "data-src", "data-full"):
            if (src := (await img.get_attribute(name) or "").strip()) and not src.startswith("data:"):
                urls.append(src)
                break

    for link in await document.query_selector_all(
        '.GO-OglasZoom a[href*="images.avto.net"], a.GO-OglasZoomBlack[href*="images.avto.net"]'
    ):
        if href := (await link.get_attribute("href") or "").strip():
            urls.append(href)

    if not urls:
        raise error.ImagesNotFound("Images are not found", url=document.url)

    return tuple(unique(normalize_image_url(urljoin(document.url, url)) for url in urls))


@as_async_result(error.SellerNotFound)
async def extract_seller(document: Document, viewing_location: str | None = None) -> Seller:
    name, phone, location = await asyncio.gather(
        resolve_field(document, SELLER_NAME),
        resolve_field(document, SELLER_PHONE),
        resolve_field(document, SELLER_LOCATION),
    )
    seller_type: SellerType = (
        "dealer" if await document.query_selector(".flaticon-109-car-dealer") else "private"
    )
    location = location or viewing_location

    if not (name or phone or location):
        raise error.SellerNotFound("Seller information is not found", url=document.url)

    return Seller(
        name=normalize_whitespace(name) if name else None,
        type=seller_type,
        location=location,
        phone=phone,
    )


async def extract_detail_record(
    document: Document, url: str | None = None, scraped_at: str | None = None
) -> DetailRecord:
    """
    Full listing data of the detail page

    Every field is extracted independently, so a missing field doesn't affect the rest of the record
    """
    url = url or document.url

    (R1, R2, R3, R4, R5, R6) = await asyncio.gather(
        extract_title(document),
        extract_price(document),
        extract_description(document),
        extract_specs(document),
        extract_equipment(document),
        extract_images(document),
    )

    match R1:
        case Ok(title):
            pass
        case Err(err):
            debug(escape(str(err)))
            title = None

    match R2:
        case Ok(price):
            pass
        case Err(err):
            debug(escape(str(err)))
            price = Price()

    match R3:
        case Ok(description):
            pass
        case Err(err):
            debug(escape(str(err)))
            description = None

    match R4:
        case Ok(specs):
            pass
        case Err(err):
            debug(escape(str(err)))
            specs = {}

    match R5:
        case Ok(equipment):
            pass
        case Err(err):
            debug(escape(str(err)))
            equipment = ()

    match R6:
        case Ok(images):
            pass
        case Err(err):
            debug(escape(str(err)))
            images = ()

    match await extract_seller(document, specs.get("viewing_location")):
        case Ok(seller):
            pass
        case Err(err):
            debug(escape(str(err)))
            seller = Seller(
                type="dealer"
                if await document.query_selector(".flaticon-109-car-dealer")
                else "private"
            )

    return DetailRecord(
        url=url,
        listing_id=extract_listing_id(url),
        title=title,
        price=price,
        description=description,
        specs=specs,
        equipment=equipment,
        images=images,
        seller=seller,
        scraped_at=scraped_at or timestamp(),
    )
