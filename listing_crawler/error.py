# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

from random import choice
from typing import TYPE_CHECKING

from colorama import Fore, init
from playwright.async_api import Error, TimeoutError

from listing_crawler.log import warning


if TYPE_CHECKING:
    from typing import Any, Final


init()


class BasicError(Exception):
    __slots__ = ("message", "url")
    __match_args__: Final = ("message", "url")

    def __init__(self, message: Exception | str, url: str | None = None) -> None:
        self.message = message
        self.url = url

        super().__init__(
            (
                Fore.RED
                + str(self.message)
                + Fore.RESET
                + Fore.CYAN
                + f" || {self.url} ||"
            )
            if self.url
            else (Fore.RED + str(self.message) + Fore.RESET)
        )


class DetailedError(Exception):
    __slots__ = ("message",)
    __match_args__: Final = ("message",)

    def __init__(self, message: Exception | str, **kwargs: Any | None) -> None:
        self.message = message

        if kwargs:
            error_msg = "".join(
                (
                    Fore.RED,
                    str(self.message),
                    Fore.RESET,
                    "".join(
                        f' {getattr(Fore, choice([s for s in Fore.__dict__.keys() if s not in ["RESET", "RED", "BLACK", "WHITE"]]))}|| {k} = {v}'
                        for k, v in kwargs.items()
                    ),
                    " ||",
                    Fore.RESET,
                )
            )

        else:
            error_msg = "".join(Fore.RED + str(self.message) + Fore.RESET)
        super().__init__(error_msg)


class QueryNotFound(DetailedError):
    __slots__ = (
        "description",
        "query",
    )

    def __init__(self, description: Exception | str, query: str) -> None:
        self.description = description
        self.query = query
        super().__init__(description, query=query)


class MarkerNotFound(DetailedError):
    __slots__ = ("token",)

    def __init__(self, description: Exception | str, token: str) -> None:
        self.token = token
        super().__init__(description, token=token)


class SiteNotFound(BasicError):
    pass


class TimeoutException(BasicError):
    pass


class NavigationFailed(BasicError):
    pass


class HTMLParsingError(BasicError):
    pass


class InvalidURL(BasicError):
    pass


class ListingsNotFound(BasicError):
    pass


class ListingLinkNotFound(BasicError):
    pass


class TotalListingsTextNotFound(BasicError):
    pass


class TitleNotFound(BasicError):
    pass


class PriceNotFound(BasicError):
    pass


class DescriptionNotFound(BasicError):
    pass


class TableNotFound(BasicError):
    pass


class EquipmentNotFound(BasicError):
    pass


class ImagesNotFound(BasicError):
    pass


class SellerNotFound(BasicError):
    pass


PlaywrightTimeoutError = TimeoutError
PlaywrightError = Error


def backoff_hdlr(details: dict[str, Any]):
    from listing_crawler.helpers import compile_regex

    text = "Backing off {wait:0.1f} seconds after {tries} tries calling function {target} with args {args} and kwargs {kwargs}".format(
        **details
    )

    # ? Fix the loguru's mismatch of <> tag for ANSI color directive
    if source := compile_regex(r"\<\w*\>").findall(text):
        text = text.replace(source[0], source[0].replace("<", r"\<"))

    warning(text)
