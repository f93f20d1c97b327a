# ingreedy/parsers/unit_vocab.py
"""
Shared Unit Vocabulary

Single source of truth for unit spellings, their canonical names and the
unit system each one belongs to. Used by ingredient_grammar.py (one terminal
regex per system) and extractor.py (classification of matched unit text).

Three independent sub-tables:
  - English:   cup, fluid_ounce, gallon, ounce, pint, pound, quart,
               tablespoon, teaspoon, calorie
  - Metric:    gram, kilogram, milligram, liter, milliliter, centiliter,
               deciliter, joule, kilojoule
  - Imprecise: dash, drop, handful, pinch, smidgen, splash, sprinkle

Spellings are matched case-insensitively ("kJ", "ML", "Oz").
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
import re

from ingreedy.ingredient_types import UnitSystem


@dataclass(frozen=True)
class UnitSpec:
    """Canonical unit name plus the system it was classified under."""
    name: str
    system: UnitSystem


# ── Spelling tables: canonical name -> accepted surface spellings ──

_ENGLISH_SPELLINGS: Dict[str, Tuple[str, ...]] = {
    "cup": ("cups", "cup", "c.", "c"),
    "fluid_ounce": (
        "fluid ounces", "fluid ounce", "fl. oz.", "fl. oz", "fl oz.", "fl oz",
        "fl.oz.", "fl.oz", "floz",
    ),
    "gallon": ("gallons", "gallon", "gal.", "gal"),
    "ounce": ("ounces", "ounce", "oz.", "oz"),
    "pint": ("pints", "pint", "pt.", "pt"),
    "pound": ("pounds", "pound", "lbs.", "lbs", "lb.", "lb"),
    "quart": ("quarts", "quart", "qts", "qt.", "qt"),
    "tablespoon": (
        "tablespoons", "tablespoon", "tbsp.", "tbsp", "tbs.", "tbs", "tbl.", "tbl",
    ),
    "teaspoon": ("teaspoons", "teaspoon", "tsp.", "tsp", "tsps"),
    # Food energy is labelled in kilocalories but written "calories"
    "calorie": ("calories", "calorie", "kcal", "cal"),
}

_METRIC_SPELLINGS: Dict[str, Tuple[str, ...]] = {
    "gram": ("grams", "gram", "grammes", "gramme", "gr", "g"),
    "kilogram": ("kilograms", "kilogram", "kilos", "kilo", "kg"),
    "milligram": ("milligrams", "milligram", "mg"),
    "liter": ("liters", "liter", "litres", "litre", "l"),
    "milliliter": ("milliliters", "milliliter", "millilitres", "millilitre", "ml"),
    "centiliter": ("centiliters", "centiliter", "centilitres", "centilitre", "cl"),
    "deciliter": ("deciliters", "deciliter", "decilitres", "decilitre", "dl"),
    "joule": ("joules", "joule"),
    "kilojoule": ("kilojoules", "kilojoule", "kj"),
}

_IMPRECISE_SPELLINGS: Dict[str, Tuple[str, ...]] = {
    "dash": ("dashes", "dash"),
    "drop": ("drops", "drop"),
    "handful": ("handfuls", "handful"),
    "pinch": ("pinches", "pinch"),
    "smidgen": ("smidgens", "smidgen"),
    "splash": ("splashes", "splash"),
    "sprinkle": ("sprinkles", "sprinkle"),
}

_SPELLINGS_BY_SYSTEM: Dict[UnitSystem, Dict[str, Tuple[str, ...]]] = {
    UnitSystem.ENGLISH: _ENGLISH_SPELLINGS,
    UnitSystem.METRIC: _METRIC_SPELLINGS,
    UnitSystem.IMPRECISE: _IMPRECISE_SPELLINGS,
}


def _build_lookup(system: UnitSystem) -> Mapping[str, UnitSpec]:
    lookup: Dict[str, UnitSpec] = {}
    for name, spellings in _SPELLINGS_BY_SYSTEM[system].items():
        for spelling in spellings:
            lookup[spelling.lower()] = UnitSpec(name=name, system=system)
    return MappingProxyType(lookup)


# Per-system lookup: lowercase spelling -> UnitSpec
UNIT_LOOKUP: Mapping[UnitSystem, Mapping[str, UnitSpec]] = MappingProxyType({
    system: _build_lookup(system) for system in UnitSystem
})


def _build_unit_re(system: UnitSystem) -> "re.Pattern[str]":
    # Longest-first for greedy correctness ("fl oz" before "floz", "kg" before "g");
    # a unit never runs into further letters ("g" must not eat "garlic").
    spellings = sorted(UNIT_LOOKUP[system], key=len, reverse=True)
    return re.compile(
        r"(?:" + "|".join(re.escape(s) for s in spellings) + r")(?![a-zA-Z])",
        re.IGNORECASE,
    )


ENGLISH_UNIT_RE = _build_unit_re(UnitSystem.ENGLISH)
METRIC_UNIT_RE = _build_unit_re(UnitSystem.METRIC)
IMPRECISE_UNIT_RE = _build_unit_re(UnitSystem.IMPRECISE)


def lookup_unit(spelling: str, system: Optional[UnitSystem] = None) -> Optional[UnitSpec]:
    """Classify a unit spelling.

    When ``system`` is given only that sub-table is consulted, which is how
    the extractor resolves a token the grammar already matched under a
    specific system. Returns None for unknown spellings.

    Examples:
        "oz"                      -> UnitSpec("ounce", English)
        "KG"                      -> UnitSpec("kilogram", Metric)
        "pinches", Imprecise      -> UnitSpec("pinch", Imprecise)
        "oz", Metric              -> None
    """
    key = spelling.strip().lower()
    if system is not None:
        return UNIT_LOOKUP[system].get(key)
    for table in UNIT_LOOKUP.values():
        if key in table:
            return table[key]
    return None


def unit_system_of(name: str) -> Optional[UnitSystem]:
    """Return the system a canonical unit name belongs to."""
    for system, spellings in _SPELLINGS_BY_SYSTEM.items():
        if name in spellings:
            return system
    return None


def canonical_units(system: UnitSystem) -> List[str]:
    """Canonical unit names of one system, in table order."""
    return list(_SPELLINGS_BY_SYSTEM[system])


def all_unit_spellings() -> List[Tuple[str, UnitSpec]]:
    """Every accepted (spelling, UnitSpec) pair across all systems."""
    return [
        (spelling, spec)
        for table in UNIT_LOOKUP.values()
        for spelling, spec in table.items()
    ]
