# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from typing import TYPE_CHECKING

from listing_crawler.data import CombinedListing, DetailRecord, SearchSummary
from listing_crawler.export import to_series
from listing_crawler.helpers import timeit
from listing_crawler.log import detail as log_detail


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from listing_crawler.export import Series


def split_records(
    records: Iterable[SearchSummary | DetailRecord],
) -> tuple[list[SearchSummary], list[DetailRecord]]:
    summaries: list[SearchSummary] = []
    details: list[DetailRecord] = []
    for record in records:
        match record:
            case SearchSummary():
                summaries.append(record)
            case DetailRecord():
                details.append(record)
    return summaries, details


@timeit
def merge_listings(
    summaries: Sequence[SearchSummary], details: Sequence[DetailRecord]
) -> list[CombinedListing]:
    """
    Join the search summaries with the detail records of the same listing identity

    The order of the summaries is preserved, then the details that have not been matched (orphans) are appended in the order they were crawled

    Empty identities are never matched: a summary without identity is kept as it is (flagged as detail not scraped) and a detail without identity is an orphan
    """
    # ? Same listing can be crawled more than once (i.e., when it appears on two pages while the site is being updated), first one wins
    lookup: dict[str, DetailRecord] = {}
    for record in details:
        if record.listing_id and record.listing_id not in lookup:
            lookup[record.listing_id] = record

    seen: set[str] = set()
    combined: list[CombinedListing] = []
    for summary in summaries:
        if summary.listing_id:
            if summary.listing_id in seen:
                continue
            seen.add(summary.listing_id)

        matched = lookup.pop(summary.listing_id, None) if summary.listing_id else None
        combined.append(CombinedListing(summary=summary, detail=matched))

    # ? Details that have not been consumed by any summary, in the order they were crawled
    combined.extend(
        CombinedListing(detail=record)
        for record in details
        if not record.listing_id or lookup.get(record.listing_id) is record
    )

    log_detail.merged(len(summaries), len(details), len(combined))
    return combined


def flatten(listing: CombinedListing) -> Series:
    """
    One output row of the listing: summary fields overlaid by detail fields

    Search page number and thumbnail always come from the summary as the detail page doesn't have them
    """
    row: Series = {}
    if listing.summary:
        row.update(to_series(listing.summary))
    if listing.detail:
        row.update(to_series(listing.detail))
    row.pop("label", None)

    if listing.summary:
        row["search_page"] = listing.summary.search_page
        if listing.summary.thumbnail:
            row["thumbnail"] = listing.summary.thumbnail

    if listing_id := listing.listing_id:
        row["listing_id"] = listing_id

    row["detail_scraped"] = listing.detail_scraped
    return row
