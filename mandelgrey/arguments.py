"""Parsing of the textual dimension and coordinate arguments."""

from __future__ import annotations

from argparse import ArgumentTypeError
from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def parse_pair(text: str, separator: str, convert: Callable[[str], T] = int) -> Optional[tuple[T, T]]:
    """Parse ``"<left><separator><right>"`` into a converted pair, or ``None``.

    Only the first occurrence of ``separator`` splits the text, so any extra
    separator ends up in the right-hand side and makes it fail to convert.
    """

    left, found, right = text.partition(separator)
    if not found:
        return None
    try:
        return convert(left), convert(right)
    except ValueError:
        return None


def parse_complex(text: str) -> Optional[complex]:
    """Parse ``"<re>,<im>"`` into a complex number, or ``None``."""

    pair = parse_pair(text, ",", float)
    if pair is None:
        return None
    return complex(pair[0], pair[1])


def dimensions(text: str) -> tuple[int, int]:
    """argparse type for ``WIDTHxHEIGHT``."""

    pair = parse_pair(text.strip(), "x", int)
    if pair is None:
        raise ArgumentTypeError(f"invalid dimensions '{text.strip()}', expected WIDTHxHEIGHT such as 4000x3000")
    if pair[0] <= 0 or pair[1] <= 0:
        raise ArgumentTypeError(f"dimensions must be positive, got {pair[0]}x{pair[1]}")
    return pair


def coordinate(text: str) -> complex:
    """argparse type for ``RE,IM``."""

    point = parse_complex(text.strip())
    if point is None:
        raise ArgumentTypeError(f"invalid coordinate '{text.strip()}', expected RE,IM such as -1.20,0.35")
    return point
