# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import os

from os.path import join


def dataset_file(*, output_dir: str, sitename: str, date: str) -> str:
    """
    Append-only .JSONL file where every crawled record of the run is saved
    """
    return join(output_dir, sitename, date, f"dataset_{sitename}_{date}.jsonl")


def listings_json_file(*, output_dir: str, timestamp: str) -> str:
    """
    Final merged output in .JSON format
    """
    return join(output_dir, f"listings-{timestamp}.json")


def listings_csv_file(*, output_dir: str, timestamp: str) -> str:
    """
    Final merged output in .CSV format
    """
    return join(output_dir, f"listings-{timestamp}.csv")


def html_directory(*, sitename: str, date: str) -> str:
    """
    Directory of the saved HTML snapshots of the site
    """
    return join(os.path.dirname(__file__), sitename, "html", date)
