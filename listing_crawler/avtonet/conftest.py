# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import inspect
import os

import pytest


SNAPSHOTS_DIR = os.path.join(os.path.dirname(__file__), "tests", "snapshots")


def pytest_collection_modifyitems(items: list[pytest.Function]):
    for item in items:
        if inspect.iscoroutinefunction(item.obj) and not item.get_closest_marker("asyncio"):
            item.add_marker("asyncio")


def read_snapshot(name: str) -> str:
    with open(os.path.join(SNAPSHOTS_DIR, name), encoding="utf-8") as f:
        return f.read()


@pytest.fixture
def wide_search_html() -> str:
    return read_snapshot("search_wide.html")


@pytest.fixture
def compact_search_html() -> str:
    return read_snapshot("search_compact.html")


@pytest.fixture
def legacy_search_html() -> str:
    return read_snapshot("search_legacy.html")


@pytest.fixture
def empty_search_html() -> str:
    return read_snapshot("search_empty.html")


@pytest.fixture
def detail_html() -> str:
    return read_snapshot("detail_two_prices.html")


@pytest.fixture
def single_price_detail_html() -> str:
    return read_snapshot("detail_single_price.html")


@pytest.fixture
def bare_detail_html() -> str:
    return read_snapshot("detail_no_price.html")


@pytest.fixture
def emissions_detail_html() -> str:
    return read_snapshot("detail_emissions.html")
