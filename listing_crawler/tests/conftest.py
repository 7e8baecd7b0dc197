# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import inspect

import pytest


def pytest_collection_modifyitems(items: list[pytest.Function]):
    for item in items:
        if inspect.iscoroutinefunction(item.obj) and not item.get_closest_marker("asyncio"):
            item.add_marker("asyncio")


@pytest.fixture
def search_html() -> str:
    return """
    <html><body>
      <p>Najdenih 3 oglasov</p>
      <div class="row">
        <a class="listing" href="/Ads/details.asp?id=1">Prvi</a>
        <a class="listing" href="details.asp?id=2">Drugi</a>
        <a class="listing" href="/Ads/details.asp?id=1">Prvi (ponovljen)</a>
      </div>
      <ul class="pagination">
        <li><a class="page-link" href="#">1</a></li>
        <li><a class="page-link" href="results.asp?stession=2">Naprej</a></li>
      </ul>
    </body></html>
    """


@pytest.fixture
def marker_html() -> str:
    return """
    <html><body>
      <div>
        <!-- PRICE -->
        <p><span>15.990 €</span></p>
        <p><span>13.990 €</span></p>
        <!-- END -->
        <p><span>1 €</span></p>
      </div>
    </body></html>
    """
