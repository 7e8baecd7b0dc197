# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from listing_crawler.helpers import compile_regex, normalize_whitespace


if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Final


# ? Slovenian labels of the detail page's spec tables -> canonical field names
# ? New label variants should be added here, the lookup also matches substrings
DETAIL_LABELS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "Starost": "condition",
        "Leto proizvodnje": "year",
        "Prva registracija": "first_registration",
        "Prevoženi km": "mileage",
        "Tehnični pregled velja do": "technical_inspection",
        "Gorivo": "fuel_type",
        "Motor": "engine",
        "Menjalnik": "transmission",
        "Oblika": "body_type",
        "Št.vrat": "doors",
        "Barva": "color_exterior",
        "Notranjost": "color_interior",
        "VIN / številka šasije": "vin",
        "Kraj ogleda": "viewing_location",
        "Kombinirana vožnja": "fuel_consumption",
        "Emisijski razred": "emission_class",
        "Emisija CO2": "co2_emissions",
        "Znamka": "make",
        "Model": "model",
    }
)

# ? Labels of the small spec table inside the search result card
SEARCH_LABELS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "registracija": "year",
        "Prevoženih": "mileage",
        "Gorivo": "fuel_type",
        "Menjalnik": "transmission",
        "Motor": "engine",
    }
)

SEARCH_FIELDS: Final[tuple[str, ...]] = tuple(dict.fromkeys(SEARCH_LABELS.values()))


def clean_label(label: str) -> str:
    """
    Label text without the surrounding whitespace and the trailing colon (i.e., "Gorivo:" -> "Gorivo")
    """
    return compile_regex(r":\s*$").sub("", normalize_whitespace(label)).strip()


def lookup_label(label: str, table: Mapping[str, str] = DETAIL_LABELS) -> str | None:
    """
    Canonical field name of the label

    Exact match is tried first, then the first table entry where either the label contains the key or the key contains the label (case-insensitive)

    Returns None for the unknown labels
    """
    if not (label := clean_label(label)):
        return None

    if field := table.get(label):
        return field

    lowered = label.casefold()
    for key, field in table.items():
        key = key.casefold()
        if key in lowered or lowered in key:
            return field

    return None


def lookup_search_label(label: str) -> str | None:
    """
    Canonical field name of the label of the search result card's spec table

    Some card layouts show the first registration year without any label, so a bare 4-digit token is treated as year
    """
    if compile_regex(r"^\d{4}$").match(clean_label(label)):
        return "year"

    return lookup_label(label, SEARCH_LABELS)
