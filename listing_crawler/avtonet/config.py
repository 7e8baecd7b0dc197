# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from typing import Final

from listing_crawler.config import env_bool, env_int, env_str


BASE_URL: Final[str] = "https://www.avto.net"
SEARCH_URL: Final[str] = "https://www.avto.net/Ads/results.asp"

# ? Search filters (only used for building the start URL)
BRAND: Final[str | None] = env_str("AVTO_BRAND")
MODEL: Final[str | None] = env_str("AVTO_MODEL")
PRICE_FROM: Final[int | None] = env_int("AVTO_PRICE_FROM")
PRICE_TO: Final[int | None] = env_int("AVTO_PRICE_TO")
YEAR_FROM: Final[int | None] = env_int("AVTO_YEAR_FROM")
YEAR_TO: Final[int | None] = env_int("AVTO_YEAR_TO")
FUEL_TYPE: Final[str | None] = env_str("AVTO_FUEL_TYPE")
BODY_TYPE: Final[str | None] = env_str("AVTO_BODY_TYPE")
MAX_MILEAGE: Final[int | None] = env_int("AVTO_MAX_MILEAGE")
LOCATION: Final[str | None] = env_str("AVTO_LOCATION")

HEADLESS: Final[bool] = env_bool("HEADLESS", True)
DEFAULT_NAVIGATION_TIMEOUT: Final[int] = (env_int("NAV_TIMEOUT_SECS") or 60) * 1000
DEFAULT_TIMEOUT: Final[int] = 30000

# ? The site rate limits aggressively, so only one page is processed at a time by default
MAX_CONCURRENCY: Final[int] = env_int("MAX_CONCURRENCY") or 1
MAX_PAGES: Final[int] = env_int("MAX_PAGES", 0) or 0
MAX_DETAILS: Final[int] = env_int("MAX_DETAILS", 0) or 0
MAX_REQUESTS: Final[int] = env_int("MAX_REQUESTS") or 1000
MAX_RETRIES: Final[int] = env_int("MAX_RETRIES", 3) or 0
MIN_DELAY: Final[float] = (env_int("MIN_DELAY_MS") or 2000) / 1000
MAX_DELAY: Final[float] = (env_int("MAX_DELAY_MS") or 5000) / 1000

# ? Elements that must appear before the page is considered as loaded
SEARCH_PAGE_READY_QUERY: Final[str] = 'a[href*="details.asp"], .ResultsAd, .GO-Results-498'
DETAIL_PAGE_READY_QUERY: Final[str] = "table.table-sm, .container h3"

# ? Header words of the spec tables that contain the equipment list
EQUIPMENT_LABELS: Final[tuple[str, ...]] = ("oprema",)

START_PAGE: Final[int] = 1

SAVE_HTML: Final[bool] = env_bool("SAVE_HTML", False)
OUTPUT_DIR: Final[str] = env_str("OUTPUT_DIR") or "output"

SITENAME: Final[str] = "avtonet"
