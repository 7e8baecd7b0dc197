# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final, Literal


SEARCH_LISTING_LABEL: Final[str] = "search-listing"
DETAIL_LABEL: Final[str] = "detail"

type SellerType = Literal["dealer", "private"]


def timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


@dataclass(slots=True, frozen=True, kw_only=True)
class SearchSummary:
    title: str | None = field(
        default=None, metadata={"help": "Title of the listing card on the search page"}
    )
    url: str | None = field(
        default=None, metadata={"help": "Absolute URL of the listing's detail page"}
    )
    listing_id: str = field(
        default="",
        metadata={
            "help": 'Value of the "id" query parameter of the detail URL (empty if not present)'
        },
    )
    price: str | None = field(
        default=None, metadata={"help": "Price text as shown on the search page"}
    )
    thumbnail: str | None = field(
        default=None, metadata={"help": "URL of the listing card's photo"}
    )
    year: str | None = field(default=None, metadata={"help": "First registration year"})
    mileage: str | None = field(default=None, metadata={"help": "Mileage text"})
    fuel_type: str | None = field(default=None, metadata={"help": "Fuel type"})
    transmission: str | None = field(default=None, metadata={"help": "Transmission"})
    engine: str | None = field(default=None, metadata={"help": "Engine text"})
    search_page: int = field(
        default=1, metadata={"help": "Search results page number the listing was found on"}
    )
    scraped_at: str | None = field(default=None, repr=False)


@dataclass(slots=True, frozen=True, kw_only=True)
class Price:
    current: str | None = field(
        default=None,
        metadata={
            "help": "Price the listing is being sold for (the financed price when the page has two prices)"
        },
    )
    original: str | None = field(
        default=None,
        metadata={"help": "Regular price, only present when the page has two prices"},
    )


@dataclass(slots=True, frozen=True, kw_only=True)
class Seller:
    name: str | None = None
    type: SellerType = "private"
    location: str | None = None
    phone: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class DetailRecord:
    url: str | None = field(default=None, metadata={"help": "URL of the detail page"})
    listing_id: str = field(
        default="",
        metadata={
            "help": 'Value of the "id" query parameter of the detail URL (empty if not present)'
        },
    )
    title: str | None = None
    price: Price = field(default_factory=Price)
    description: str | None = None
    specs: dict[str, str] = field(
        default_factory=dict,
        metadata={
            "help": "Technical specs where Slovenian labels have been mapped to canonical field names"
        },
    )
    equipment: tuple[str, ...] = field(
        default=(), metadata={"help": "Equipment and extras in page order"}
    )
    images: tuple[str, ...] = field(
        default=(), metadata={"help": "Full resolution image URLs"}
    )
    seller: Seller = field(default_factory=Seller)
    scraped_at: str | None = field(default=None, repr=False)


@dataclass(slots=True, frozen=True)
class CombinedListing:
    """
    Search summary enriched with the detail record of the same listing

    Either side can be missing: a summary without detail means the detail page was never scraped, and a detail without summary is an orphan (i.e., direct visit or the summary extraction has failed)
    """

    summary: SearchSummary | None = None
    detail: DetailRecord | None = None

    def __post_init__(self):
        if self.summary is None and self.detail is None:
            raise ValueError("CombinedListing needs at least a summary or a detail record")

    @property
    def listing_id(self) -> str:
        if self.detail and self.detail.listing_id:
            return self.detail.listing_id
        if self.summary:
            return self.summary.listing_id
        return ""

    @property
    def detail_scraped(self) -> bool:
        return self.detail is not None

    @property
    def orphan(self) -> bool:
        return self.summary is None
