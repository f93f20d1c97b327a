# ingreedy/ingredient.py
"""
Ingredient parsing entry point.

Usage:
    from ingreedy.ingredient import parse_ingredient

    record = parse_ingredient("2 (28 ounce) cans crushed tomatoes")
    # record.quantities    -> [Quantity(amount=56.0, unit="ounce", unit_system=English)]
    # record.ingredient_name -> "cans crushed tomatoes"

One call turns one line into one IngredientRecord or raises one
IngreedyError subclass. No I/O, no shared mutable state: safe to call from
several threads at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional
import logging

from ingreedy.config import SETTINGS, Settings
from ingreedy.errors import IngreedyError
from ingreedy.extractor import extract_record
from ingreedy.ingredient_types import IngredientRecord
from ingreedy.parsers.ingredient_grammar import parse_tree

log = logging.getLogger(__name__)


def parse_ingredient(line: str, *, settings: Optional[Settings] = None) -> IngredientRecord:
    """Parse one ingredient line into quantities and an ingredient name.

    Raises:
        IngredientSyntaxError: the line does not fit the grammar (or is too long).
        WrongRuleError / InnerRuleMissingError: grammar and extractor disagree.
        NumericParseError: a numeral is not a finite number.
    """
    cfg = settings or SETTINGS
    try:
        tree = parse_tree(
            line,
            max_input_length=cfg.max_input_length,
            max_nesting_depth=cfg.max_nesting_depth,
        )
        record = extract_record(tree)
    except IngreedyError as e:
        log.info("Failed to parse ingredient line %r (%s): %s", line, e.kind, e)
        raise

    log.debug(
        "Parsed %r -> %d quantities, ingredient=%r",
        line, len(record.quantities), record.ingredient_name,
    )
    return record


@dataclass
class ParseOutcome:
    """Result of one line in a batch: a record or the error that stopped it."""
    line: str
    record: Optional[IngredientRecord] = None
    error: Optional[IngreedyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_ingredients(
    lines: Iterable[str], *, settings: Optional[Settings] = None
) -> List[ParseOutcome]:
    """Parse many lines independently; one bad line does not stop the rest."""
    outcomes: List[ParseOutcome] = []
    for line in lines:
        try:
            outcomes.append(ParseOutcome(line, record=parse_ingredient(line, settings=settings)))
        except IngreedyError as e:
            outcomes.append(ParseOutcome(line, error=e))
    return outcomes
