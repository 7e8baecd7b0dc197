# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import os

from dataclasses import asdict, dataclass
from functools import cache
from importlib import import_module
from typing import Protocol, cast


# ? Site configuration
class Config(Protocol):
    HEADLESS: bool
    DEFAULT_NAVIGATION_TIMEOUT: int
    DEFAULT_TIMEOUT: int
    MAX_PAGES: int
    MAX_DETAILS: int
    MAX_REQUESTS: int
    MAX_CONCURRENCY: int
    MAX_RETRIES: int
    MIN_DELAY: float
    MAX_DELAY: float
    START_PAGE: int
    SAVE_HTML: bool
    OUTPUT_DIR: str
    SITENAME: str


@dataclass(slots=True, frozen=True, kw_only=True)
class SearchFilters:
    """
    Search filters chosen by the user, they are only used for building the start URL
    """

    brand: str | None = None
    model: str | None = None
    price_from: int | None = None
    price_to: int | None = None
    year_from: int | None = None
    year_to: int | None = None
    fuel_type: str | None = None
    body_type: str | None = None
    max_mileage: int | None = None
    location: str | None = None

    def active(self) -> dict[str, str | int]:
        return {k: v for k, v in asdict(self).items() if v}


@dataclass(slots=True, frozen=True, kw_only=True)
class CrawlLimits:
    max_pages: int = 0  # ? 0 means unlimited
    max_details: int = 0  # ? 0 means unlimited
    max_requests: int = 1000
    concurrency: int = 1
    timeout: float = 30.0  # ? Seconds to wait for the expected content of the page
    retries: int = 3
    min_delay: float = 2.0
    max_delay: float = 5.0

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1 (got {self.concurrency})")
        if self.min_delay > self.max_delay:
            raise ValueError(
                f"Minimum delay ({self.min_delay}) can't be greater than maximum delay ({self.max_delay})"
            )

    @classmethod
    def from_config(cls, config: Config) -> CrawlLimits:
        return cls(
            max_pages=config.MAX_PAGES,
            max_details=config.MAX_DETAILS,
            max_requests=config.MAX_REQUESTS,
            concurrency=config.MAX_CONCURRENCY,
            timeout=config.DEFAULT_TIMEOUT / 1000,
            retries=config.MAX_RETRIES,
            min_delay=config.MIN_DELAY,
            max_delay=config.MAX_DELAY,
        )


def env_str(name: str) -> str | None:
    if (value := os.getenv(name)) is None or not value.strip():
        return None
    return value.strip()


def env_int(name: str, default: int | None = None) -> int | None:
    if (value := env_str(name)) is None:
        return default
    try:
        return int(value)
    except ValueError as err:
        raise ValueError(
            f"Environment variable {name} must be an integer (got {value!r})"
        ) from err


def env_bool(name: str, default: bool) -> bool:
    if (value := env_str(name)) is None:
        return default
    return value.lower() not in ("0", "false", "no", "off")


@cache
def get_site_config(sitename: str) -> Config:
    return cast("Config", import_module(f"listing_crawler.{sitename}.config"))
