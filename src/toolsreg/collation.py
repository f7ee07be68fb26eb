"""Locale-aware name collation.

Approximates the root-locale collation used by browsers for ``localeCompare``:
names compare first ignoring accents and case, then by accents, and finally
by case with lowercase ordered before uppercase. At the first level
whitespace sorts before punctuation and symbols, which sort before digits,
which sort before letters.

Only a small table of letters without a Unicode decomposition is folded to a
base letter; scripts beyond Latin compare by code point within their group.
"""

from __future__ import annotations

import unicodedata
from typing import Tuple

PrimaryKey = Tuple[Tuple[int, str], ...]
CollationKey = Tuple[PrimaryKey, str, str]

_BASE_LETTERS = str.maketrans(
    {
        "ø": "o",
        "ł": "l",
        "æ": "ae",
        "œ": "oe",
        "đ": "d",
        "ð": "d",
        "ħ": "h",
        "ı": "i",
        "þ": "th",
    }
)

_WHITESPACE, _SYMBOL, _DIGIT, _LETTER = range(4)


def _group(char: str) -> int:
    if char.isspace():
        return _WHITESPACE
    if char.isdigit():
        return _DIGIT
    if char.isalpha():
        return _LETTER
    return _SYMBOL


def _primary(text: str) -> PrimaryKey:
    decomposed = unicodedata.normalize("NFKD", text.casefold().translate(_BASE_LETTERS))
    return tuple((_group(char), char) for char in decomposed if not unicodedata.combining(char))


def collation_key(text: str) -> CollationKey:
    decomposed = unicodedata.normalize("NFKD", text)
    return _primary(text), decomposed.casefold(), text.swapcase()


def locale_compare(left: str, right: str) -> int:
    """Return a negative, zero or positive value like ``String.localeCompare``."""
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0
