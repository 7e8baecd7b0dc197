# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import pytest

from listing_crawler.avtonet.labels import clean_label, lookup_label, lookup_search_label


def test_clean_label():
    assert clean_label("  Gorivo:  ") == "Gorivo"
    assert clean_label("Kraj\n  ogleda :") == "Kraj ogleda"
    assert clean_label("") == ""


@pytest.mark.parametrize(
    "label, field",
    [
        ("Prevoženi km:", "mileage"),
        ("Prva registracija", "first_registration"),
        ("Leto proizvodnje:", "year"),
        ("VIN / številka šasije:", "vin"),
        ("Barva zunanjosti", "color_exterior"),
        ("emisijski razred", "emission_class"),
        ("Neznano polje", None),
        ("   ", None),
    ],
)
def test_detail_labels(label: str, field: str | None):
    assert lookup_label(label) == field


@pytest.mark.parametrize(
    "label, field",
    [
        ("1.registracija", "year"),
        ("2015", "year"),
        ("Prevoženih km", "mileage"),
        ("Gorivo:", "fuel_type"),
        ("Menjalnik", "transmission"),
        ("Motor", "engine"),
        ("Barva", None),
        ("20151", None),
    ],
)
def test_search_labels(label: str, field: str | None):
    assert lookup_search_label(label) == field
