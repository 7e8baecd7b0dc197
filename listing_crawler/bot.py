# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import asyncio
import os
import sys

from typing import TYPE_CHECKING, Protocol

from listing_crawler.helpers import timeit
from listing_crawler.log import LOGGER_FORMAT_STR, info, logger


if TYPE_CHECKING:
    from listing_crawler.config import Config
    from listing_crawler.settings import Settings


class Bot(Protocol):
    async def __call__(self, settings: Settings) -> None: ...


def enable_test_mode(config: Config, settings: Settings) -> str:
    """
    Log everything (DEBUG level) to stderr and to the log file of the run
    """
    logfile = os.path.join(
        settings.OUTPUT_DIR, config.SITENAME, settings.DATE, f"{config.SITENAME}.log"
    )
    logger.remove()
    logger.add(sys.stderr, format=LOGGER_FORMAT_STR, level="DEBUG", colorize=True, enqueue=True)
    logger.add(logfile, format=LOGGER_FORMAT_STR, level="DEBUG", encoding="utf-8", enqueue=True)
    return logfile


@timeit
def run_bot(bot: Bot, config: Config, settings: Settings) -> None:
    if settings.TEST_MODE:
        logfile = enable_test_mode(config, settings)
        info(f"Test mode is enabled, logs are also saved in <blue>{logfile}</>")

    info(f"Crawling <light-yellow>{config.SITENAME}</> ({settings.DATE}) ...")
    asyncio.run(bot(settings))
