# Author: Danyal Zia Khan
# Email: danyal6870@gmail.com
# Copyright (c) 2020-2024 Danyal Zia Khan
# All rights reserved.

from __future__ import annotations

import re

from functools import cache, wraps
from time import time
from typing import TYPE_CHECKING

from listing_crawler.log import info


if TYPE_CHECKING:
    from collections.abc import Callable, Generator, Hashable, Iterable, Sequence


@cache
def parse_int(text: str) -> int:
    """
    Strips the non-numeric characters in a text and convert to int

    Will throw error if string has no digit
    """
    try:
        return int("".join(compile_regex(r"(\d)").findall(text)))
    except ValueError as e:
        raise ValueError(
            f"Text don't have any digit: '{text}', so it cannot be converted to int"
        ) from e


def timeit[
    ReturnType, **ParamsType
](fn: Callable[ParamsType, ReturnType]) -> Callable[ParamsType, ReturnType]:
    """
    Decorator that will tell how much time a function has took

    It doesn't work with async functions
    """

    @wraps(fn)
    def wrapper(*args: ParamsType.args, **kwargs: ParamsType.kwargs) -> ReturnType:
        start_time = time()
        result = fn(*args, **kwargs)
        end_time = time()
        info(f"{str(fn.__name__).upper()} took {(end_time - start_time):0.3f} seconds")
        return result

    return wrapper


# ? Divide the list/sequence into evenly chunks
# ? If the last chunk is not the same length as previous chunks, then it simply returns the remaining elements in the sequence
# ? https://stackoverflow.com/questions/312443/how-do-you-split-a-list-into-evenly-sized-chunks
def chunks[T](lst: Sequence[T], n: int) -> Generator[Sequence[T], None, None]:
    """Yield successive n-sized chunks from lst."""
    for i in range(0, len(lst), n):
        yield lst[i : i + n]


@cache
def compile_regex(r: str, flags: int = 0):
    return re.compile(r, flags)


def unique[T: Hashable](items: Iterable[T]) -> list[T]:
    """
    Remove the duplicates while preserving the order of first occurrence
    """
    return list(dict.fromkeys(items))


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())
