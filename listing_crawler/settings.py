# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from dataclasses import dataclass

from listing_crawler.config import CrawlLimits, SearchFilters


# ? Program settings
@dataclass(slots=True, frozen=True)
class Settings:
    DATE: str
    TEST_MODE: bool
    FILTERS: SearchFilters
    LIMITS: CrawlLimits
    OUTPUT_DIR: str
    URLS: list[str]
