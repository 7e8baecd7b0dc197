# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio
import json
import os

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import TYPE_CHECKING, Any, cast

import pandas as pd

from aiofile import AIOFile

from listing_crawler.data import (
    DETAIL_LABEL,
    SEARCH_LISTING_LABEL,
    DetailRecord,
    Price,
    SearchSummary,
    Seller,
)
from listing_crawler.log import logger
from listing_crawler.path import listings_csv_file, listings_json_file


if TYPE_CHECKING:
    from collections.abc import Sequence

    type Series = dict[str, Any]


# ? Columns of the detail record series which are not specs
DETAIL_COLUMNS = frozenset(
    {
        "label",
        "url",
        "listing_id",
        "title",
        "price",
        "original_price",
        "description",
        "equipment",
        "images",
        "seller_name",
        "seller_type",
        "seller_location",
        "seller_phone",
        "scraped_at",
    }
)

SUMMARY_COLUMNS = frozenset(f.name for f in fields(SearchSummary))

# ? Separator of the list values (equipment, images) in .CSV file
CSV_LIST_SEPARATOR = " | "


def data_column_mapping(record: object, names: Sequence[str]) -> list[tuple[str, Any]]:
    # ? Absent values are not written, so that they never overwrite present values when the series are merged
    return [
        (name, data)
        for name in names
        if (data := getattr(record, name)) is not None
    ]


def to_series(record: SearchSummary | DetailRecord) -> Series:
    """
    Flat key-value form of the record, as it is saved in the dataset
    """
    match record:
        case SearchSummary():
            series: Series = {"label": SEARCH_LISTING_LABEL}
            series.update(
                data_column_mapping(record, [f.name for f in fields(SearchSummary)])
            )
            return series

        case DetailRecord():
            series = {"label": DETAIL_LABEL}
            series.update(
                data_column_mapping(
                    record, ["url", "listing_id", "title", "description", "scraped_at"]
                )
            )
            series.update(
                data_column_mapping(
                    record.price, ["current", "original"]
                )
            )
            if "current" in series:
                series["price"] = series.pop("current")
            if "original" in series:
                series["original_price"] = series.pop("original")

            for name, data in data_column_mapping(
                record.seller, ["name", "type", "location", "phone"]
            ):
                series[f"seller_{name}"] = data

            series["equipment"] = list(record.equipment)
            series["images"] = list(record.images)

            # ? Specs never overwrite the record's own columns
            series.update(
                {k: v for k, v in record.specs.items() if k not in DETAIL_COLUMNS}
            )
            return series

        case _:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")


def from_series(series: Series) -> SearchSummary | DetailRecord:
    """
    Typed record back from its dataset series
    """
    match series.get("label"):
        case "search-listing":
            return SearchSummary(
                **{k: v for k, v in series.items() if k in SUMMARY_COLUMNS}
            )

        case "detail":
            return DetailRecord(
                url=series.get("url"),
                listing_id=series.get("listing_id", ""),
                title=series.get("title"),
                price=Price(
                    current=series.get("price"), original=series.get("original_price")
                ),
                description=series.get("description"),
                specs={
                    k: str(v) for k, v in series.items() if k not in DETAIL_COLUMNS
                },
                equipment=tuple(series.get("equipment", ())),
                images=tuple(series.get("images", ())),
                seller=Seller(
                    name=series.get("seller_name"),
                    type=series.get("seller_type", "private"),
                    location=series.get("seller_location"),
                    phone=series.get("seller_phone"),
                ),
                scraped_at=series.get("scraped_at"),
            )

        case label:
            raise ValueError(f"Unknown record label in dataset: {label!r}")


@dataclass(slots=True)
class Dataset:
    """
    Append-only sink of the crawled records, one JSON line per record
    """

    filename: str
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def push(self, record: SearchSummary | DetailRecord) -> None:
        line = json.dumps(to_series(record), ensure_ascii=False) + "\n"

        # ? Append mode writing can't be done concurrently
        async with self.lock:
            await asyncio.to_thread(
                os.makedirs, os.path.dirname(self.filename) or ".", exist_ok=True
            )
            offset = await self.size()
            async with AIOFile(self.filename, "a", encoding="utf-8") as afp:
                await afp.write(line, offset=offset)
                await afp.fsync()

    async def size(self) -> int:
        if not await self.exists():
            return 0
        return await asyncio.to_thread(os.path.getsize, self.filename)

    async def exists(self) -> bool:
        return await asyncio.to_thread(os.path.exists, self.filename)

    async def load(self) -> list[SearchSummary | DetailRecord]:
        if not await self.exists():
            return []

        async with AIOFile(self.filename, "r", encoding="utf-8") as afp:
            content = cast("str", await afp.read())

        return [from_series(json.loads(line)) for line in content.splitlines() if line.strip()]

    async def reset(self) -> None:
        async with self.lock:
            if await self.exists():
                await asyncio.to_thread(os.remove, self.filename)


def output_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%dT%H-%M-%S")


def to_csv_value(value: Any) -> Any:
    if isinstance(value, list | tuple):
        return CSV_LIST_SEPARATOR.join(str(v) for v in value)
    return value


async def save_listings(
    rows: Sequence[Series], output_dir: str, timestamp: str | None = None
) -> tuple[str, str]:
    """
    Save the merged listings as .JSON and .CSV (utf-8-sig, so that Excel shows the Slovenian characters correctly)
    """
    timestamp = timestamp or output_timestamp()
    json_file = listings_json_file(output_dir=output_dir, timestamp=timestamp)
    csv_file = listings_csv_file(output_dir=output_dir, timestamp=timestamp)

    await asyncio.to_thread(os.makedirs, output_dir, exist_ok=True)

    async with AIOFile(json_file, "w", encoding="utf-8") as afp:
        await afp.write(json.dumps(list(rows), ensure_ascii=False, indent=2))

    df = pd.DataFrame([{k: to_csv_value(v) for k, v in row.items()} for row in rows])
    await asyncio.to_thread(
        df.to_csv,  # type: ignore
        csv_file,
        encoding="utf-8-sig",
        index=False,
    )

    logger.info(
        f"Combined output: <yellow>{len(rows)}</> listings -> <blue>{json_file}</>, <blue>{csv_file}</>"
    )
    return json_file, csv_file
