# ingreedy/parsers/number_vocab.py
"""
Number Vocabulary

Single source of truth for spelled-out cardinal words and precomposed
unicode fraction glyphs. Used by ingredient_grammar.py (terminal regexes)
and extractor.py (value lookup).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional
import re


# ── Number words ─────────────────────────────────────

NUMBER_WORD_VALUES: Mapping[str, float] = MappingProxyType({
    # Articles count as one ("a cup of flour")
    "a": 1.0,
    "an": 1.0,
    "zero": 0.0,
    "one": 1.0,
    "two": 2.0,
    "three": 3.0,
    "four": 4.0,
    "five": 5.0,
    "six": 6.0,
    "seven": 7.0,
    "eight": 8.0,
    "nine": 9.0,
    "ten": 10.0,
    "eleven": 11.0,
    "twelve": 12.0,
    "thirteen": 13.0,
    "fourteen": 14.0,
    "fifteen": 15.0,
    "sixteen": 16.0,
    "seventeen": 17.0,
    "eighteen": 18.0,
    "nineteen": 19.0,
    # Tens
    "twenty": 20.0,
    "thirty": 30.0,
    "forty": 40.0,
    "fifty": 50.0,
    "sixty": 60.0,
    "seventy": 70.0,
    "eighty": 80.0,
    "ninety": 90.0,
})

# Longest-first so "seventeen" wins over "seven" and "an" over "a".
# A word must not run into further letters or digits ("apple", "A1" are not "a").
NUMBER_WORD_RE = re.compile(
    r"(?:" + "|".join(
        re.escape(w) for w in sorted(NUMBER_WORD_VALUES, key=len, reverse=True)
    ) + r")(?![^\W_])",
    re.IGNORECASE,
)


# ── Unicode vulgar fractions ─────────────────────────

UNICODE_FRACTION_VALUES: Mapping[str, float] = MappingProxyType({
    "¼": 1 / 4,
    "½": 1 / 2,
    "¾": 3 / 4,
    "⅐": 1 / 7,
    "⅑": 1 / 9,
    "⅒": 1 / 10,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
})

UNICODE_FRACTION_RE = re.compile(
    "[" + "".join(sorted(UNICODE_FRACTION_VALUES)) + "]"
)


def number_word_value(word: str) -> Optional[float]:
    """Return the magnitude of a spelled-out number, or None if unknown.

    Examples:
        "two"    -> 2.0
        " An "   -> 1.0
        "dozen"  -> None
    """
    return NUMBER_WORD_VALUES.get(word.strip().lower())


def unicode_fraction_value(glyph: str) -> Optional[float]:
    """Return the value of a single fraction glyph, or None if unknown."""
    return UNICODE_FRACTION_VALUES.get(glyph)
