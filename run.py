from __future__ import annotations

import os

from argparse import ArgumentParser
from datetime import datetime
from importlib import import_module
from pathlib import Path
from typing import TYPE_CHECKING

from colorama import Fore, init

from listing_crawler.bot import run_bot
from listing_crawler.config import CrawlLimits, SearchFilters, get_site_config
from listing_crawler.log import error, escape, success
from listing_crawler.settings import Settings


if TYPE_CHECKING:
    from typing import Any

if __name__ == "__main__":
    parser = ArgumentParser()

    parser.add_argument(
        "--site",
        help="Site that needs crawling",
        type=str,
        default="avtonet",
    )
    parser.add_argument(
        "--date",
        help="Date for output files",
        type=str,
    )
    parser.add_argument(
        "--headless",
        help="Headless mode",
        action="store_true",
    )
    parser.add_argument(
        "--headful",
        help="Headful mode",
        action="store_true",
    )
    parser.add_argument(
        "--brand",
        help="Brand (make) of the vehicle",
        type=str,
    )
    parser.add_argument(
        "--model",
        help="Model of the vehicle",
        type=str,
    )
    parser.add_argument(
        "--price_from",
        help="Minimum price",
        type=int,
    )
    parser.add_argument(
        "--price_to",
        help="Maximum price",
        type=int,
    )
    parser.add_argument(
        "--year_from",
        help="Minimum first registration year",
        type=int,
    )
    parser.add_argument(
        "--year_to",
        help="Maximum first registration year",
        type=int,
    )
    parser.add_argument(
        "--fuel_type",
        help="Fuel type",
        type=str,
    )
    parser.add_argument(
        "--body_type",
        help="Body type",
        type=str,
    )
    parser.add_argument(
        "--max_mileage",
        help="Maximum mileage (km)",
        type=int,
    )
    parser.add_argument(
        "--location",
        help="Location (region) of the listing",
        type=str,
    )
    parser.add_argument(
        "--max_pages",
        help="Maximum number of search results pages (0 means unlimited)",
        type=int,
    )
    parser.add_argument(
        "--max_details",
        help="Maximum number of detail pages (0 means unlimited)",
        type=int,
    )
    parser.add_argument(
        "--max_requests",
        help="Maximum number of pages in total",
        type=int,
    )
    parser.add_argument(
        "--concurrency",
        help="Number of pages that are processed at the same time",
        type=int,
    )
    parser.add_argument(
        "--retries",
        help="Number of navigation retries",
        type=int,
    )
    parser.add_argument(
        "--start_page",
        help="Search results page to start from",
        type=int,
    )
    parser.add_argument(
        "--save_html",
        help="Save the HTML of every crawled page",
        action="store_true",
    )
    parser.add_argument(
        "--output_dir",
        help="Directory of the output files",
        type=str,
    )
    parser.add_argument(
        "--test_mode",
        help="Test mode",
        action="store_true",
    )
    parser.add_argument(
        "--urls",
        help="Crawl only the specific detail page URLs (.txt file)",
        type=str,
    )
    args = parser.parse_args()

    urls = []
    if args.urls:
        urls = Path(args.urls).read_text()
        urls = [
            url.strip().replace('"', "").replace("'", "")
            for url in urls.split()
            if url and "http" in url
        ]
        urls = list(dict.fromkeys(urls))

    init(autoreset=True)

    # ? We are going to dynamically import modules to make the framework scale better with new site additions
    try:
        app: Any = import_module(f"listing_crawler.{args.site}.app")
        config: Any = get_site_config(args.site)
    except ModuleNotFoundError as e:
        from listing_crawler.error import SiteNotFound

        folders = (
            f
            for f in os.listdir("listing_crawler")
            if os.path.isdir(os.path.join("listing_crawler", f))
            and not f.startswith(".")
            and not f.startswith("__")
        )
        sites = [
            folder
            for folder in folders
            if os.path.exists(os.path.join("listing_crawler", folder, "app.py"))
            and os.path.exists(os.path.join("listing_crawler", folder, "config.py"))
        ]

        raise SiteNotFound(
            f"""{"".join(['"', str(args.site), '"'])} has not been implemented\n\n"""
            f"{Fore.BLUE}Supported Sites\n===============\n"
            f"""{f"{Fore.WHITE}, ".join(f'{Fore.LIGHTYELLOW_EX}{str(x).lower()}' for x in sites)}"""
        ) from e

    bot = getattr(app, "run")

    if args.headless and args.headful:
        raise ValueError(
            f"{Fore.YELLOW}--headless {Fore.RED}and {Fore.YELLOW}--headful {Fore.RED}can't exist at the same time. Please choose either of these."
        )

    # * Default values in config.py (and environment variables) will be overwritten by these command line arguments
    if args.headless:
        config.HEADLESS = True

    if args.headful:
        config.HEADLESS = False

    if args.max_pages is not None:
        config.MAX_PAGES = args.max_pages

    if args.max_details is not None:
        config.MAX_DETAILS = args.max_details

    if args.max_requests is not None:
        config.MAX_REQUESTS = args.max_requests

    if args.concurrency:
        config.MAX_CONCURRENCY = args.concurrency

    if args.retries is not None:
        config.MAX_RETRIES = args.retries

    if args.start_page:
        config.START_PAGE = args.start_page

    if args.save_html:
        config.SAVE_HTML = True

    if args.output_dir:
        config.OUTPUT_DIR = args.output_dir

    date = args.date or datetime.now().strftime("%Y%m%d")

    filters = SearchFilters(
        brand=args.brand or config.BRAND,
        model=args.model or config.MODEL,
        price_from=args.price_from or config.PRICE_FROM,
        price_to=args.price_to or config.PRICE_TO,
        year_from=args.year_from or config.YEAR_FROM,
        year_to=args.year_to or config.YEAR_TO,
        fuel_type=args.fuel_type or config.FUEL_TYPE,
        body_type=args.body_type or config.BODY_TYPE,
        max_mileage=args.max_mileage or config.MAX_MILEAGE,
        location=args.location or config.LOCATION,
    )

    try:
        run_bot(
            bot,
            config,
            Settings(
                date,
                args.test_mode or False,
                filters,
                CrawlLimits.from_config(config),
                config.OUTPUT_DIR,
                urls,
            ),
        )

    except Exception as err:
        error(escape(str(err)))
        raise err from err

    success("Program has been run successfully")
