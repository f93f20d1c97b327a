"""
Semantic extraction: folds an ingredient_line parse tree into an IngredientRecord.

Disambiguation rules applied here:
  - A bare leading count multiplies into the next fragment and is dropped
    ("two five ounce can" -> 10 ounce, "3 28 ounce cans" -> 84 ounce).
    Once a fragment with a unit is kept, later fragments are kept as-is
    ("2lb 4oz" -> 2 pound, 4 ounce).
  - A conversion restatement ("(3 teaspoons)", "/1 pint 7fl oz") sits under
    its own node and never overwrites the primary amount/unit.
  - "N (X unit)" scales the parenthesized quantity by N; its unit passes through.
  - An imprecise unit with no numeral ("pinch salt") counts as one.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple
import math

from ingreedy.errors import InnerRuleMissingError, NumericParseError, WrongRuleError
from ingreedy.ingredient_types import IngredientRecord, Quantity, UnitSystem
from ingreedy.parsers.ingredient_grammar import ParseNode, Rule
from ingreedy.parsers.number_vocab import number_word_value, unicode_fraction_value
from ingreedy.parsers.unit_vocab import lookup_unit

_UNIT_SYSTEM_BY_RULE = {
    Rule.ENGLISH_UNIT: UnitSystem.ENGLISH,
    Rule.METRIC_UNIT: UnitSystem.METRIC,
    Rule.IMPRECISE_UNIT: UnitSystem.IMPRECISE,
}


# ── Tree helpers ─────────────────────────────────────

def _inner(node: ParseNode) -> ParseNode:
    """First child of a rule that always has one."""
    child = node.first_child()
    if child is None:
        raise InnerRuleMissingError(node.rule.value)
    return child


def _scaled(quantity: Quantity, factor: float) -> Quantity:
    amount = quantity.amount * factor
    if not math.isfinite(amount):
        raise NumericParseError(f"{factor!r} x {quantity.amount!r}", "product is not a finite number")
    quantity.amount = amount
    return quantity


def _to_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise NumericParseError(text, str(e)) from e
    if not math.isfinite(value):
        raise NumericParseError(text)
    return value


# ── Numbers ──────────────────────────────────────────

def _parse_multicharacter_fraction(text: str) -> float:
    numerator, denominator = (_to_float(part) for part in text.split("/", 1))
    try:
        value = numerator / denominator
    except ZeroDivisionError as e:
        raise NumericParseError(text, "zero denominator") from e
    if not math.isfinite(value):
        raise NumericParseError(text)
    return value


def _parse_fraction(node: ParseNode) -> float:
    if node.rule is Rule.MULTICHARACTER_FRACTION:
        return _parse_multicharacter_fraction(node.text)
    if node.rule is Rule.UNICODE_FRACTION:
        value = unicode_fraction_value(node.text)
        if value is None:
            raise NumericParseError(node.text, "unknown fraction glyph")
        return value
    raise WrongRuleError(node.rule.value, "fraction")


def _parse_mixed_number(node: ParseNode) -> float:
    total = 0.0
    for part in node.children:
        if part.rule is Rule.INTEGER:
            total += _to_float(part.text)
        elif part.rule is Rule.FRACTION:
            total += _parse_fraction(_inner(part))
        elif part.rule is Rule.SEPARATOR:
            continue
        else:
            raise WrongRuleError(part.rule.value, "mixed_number")
    return total


def parse_amount(literal: ParseNode) -> float:
    """Value of the node directly under an ``amount`` node."""
    if literal.rule in (Rule.FLOAT, Rule.INTEGER):
        return _to_float(literal.text)
    if literal.rule is Rule.FRACTION:
        return _parse_fraction(_inner(literal))
    if literal.rule is Rule.MIXED_NUMBER:
        return _parse_mixed_number(literal)
    if literal.rule is Rule.NUMBER_WORD:
        value = number_word_value(literal.text)
        if value is None:
            raise NumericParseError(literal.text, "unknown number word")
        return value
    raise WrongRuleError(literal.rule.value, "amount")


# ── Units ────────────────────────────────────────────

def classify_unit(node: ParseNode) -> Tuple[str, UnitSystem]:
    """Canonical name and system of an english/metric/imprecise unit node."""
    system = _UNIT_SYSTEM_BY_RULE.get(node.rule)
    if system is None:
        raise WrongRuleError(node.rule.value, "unit_type")
    spec = lookup_unit(node.text, system)
    if spec is None:
        raise WrongRuleError(node.text, node.rule.value)
    return spec.name, system


# ── Quantities ───────────────────────────────────────

def parse_quantity(node: ParseNode) -> Quantity:
    """Quantity for the node directly under a ``quantity`` node."""
    if node.rule in (Rule.AMOUNT_WITH_CONVERSION, Rule.AMOUNT_WITH_ATTACHED_UNITS):
        amount: Optional[float] = None
        unit: Optional[Tuple[str, UnitSystem]] = None
        for child in node.children:
            # first pair wins; conversion children are informational
            if child.rule is Rule.AMOUNT and amount is None:
                amount = parse_amount(_inner(child))
            elif child.rule is Rule.UNIT and unit is None:
                unit = classify_unit(_inner(child))
        if amount is None:
            raise InnerRuleMissingError(Rule.AMOUNT.value)
        if unit is None:
            raise InnerRuleMissingError(Rule.UNIT.value)
        return Quantity(amount=amount, unit=unit[0], unit_system=unit[1])

    if node.rule is Rule.AMOUNT_WITH_MULTIPLIER:
        multiplier = 1.0
        quantity: Optional[Quantity] = None
        for child in node.children:
            if child.rule is Rule.AMOUNT:
                multiplier = parse_amount(_inner(child))
            elif child.rule is Rule.PARENTHESIZED_QUANTITY:
                inner = child.find(Rule.QUANTITY)
                if inner is None:
                    raise InnerRuleMissingError(child.rule.value)
                quantity = parse_quantity(_inner(inner))
        if quantity is None:
            raise InnerRuleMissingError(Rule.PARENTHESIZED_QUANTITY.value)
        return _scaled(quantity, multiplier)

    if node.rule is Rule.AMOUNT_IMPRECISE:
        name, system = classify_unit(_inner(node))
        return Quantity(amount=1.0, unit=name, unit_system=system)

    raise WrongRuleError(node.rule.value, "quantity")


def _fragment_quantity(fragment: ParseNode) -> Quantity:
    if fragment.rule is not Rule.QUANTITY_FRAGMENT:
        raise WrongRuleError(fragment.rule.value, "multipart_quantity")
    inner = _inner(fragment)
    if inner.rule is Rule.AMOUNT:
        return Quantity(amount=parse_amount(_inner(inner)))
    if inner.rule is Rule.QUANTITY:
        return parse_quantity(_inner(inner))
    raise WrongRuleError(inner.rule.value, "quantity_fragment")


def fold_fragments(fragments: Iterable[Quantity]) -> List[Quantity]:
    """Apply the leading-count merge rule over fragments in textual order.

    At most one unit-less quantity is pending at a time: the leading count.
    The next fragment absorbs it by multiplication.
    """
    kept: List[Quantity] = []
    pending: Optional[Quantity] = None
    for quantity in fragments:
        if pending is not None:
            quantity = _scaled(quantity, pending.amount)
            pending = None
        if not kept and not quantity.has_unit:
            pending = quantity
        else:
            kept.append(quantity)
    if pending is not None:
        kept.append(pending)
    return kept


# ── Ingredient name ──────────────────────────────────

def _ingredient_name(text: str) -> str:
    if text.startswith("of "):
        return text[3:]
    return text


def extract_record(root: ParseNode) -> IngredientRecord:
    """Fold an ``ingredient_line`` tree into an IngredientRecord.

    Raises WrongRuleError, InnerRuleMissingError or NumericParseError; no
    partial record is ever returned.
    """
    if root.rule is not Rule.INGREDIENT_LINE:
        raise WrongRuleError(root.rule.value, "ingredient_line")

    record = IngredientRecord()
    for node in root.children:
        if node.rule is Rule.MULTIPART_QUANTITY:
            record.quantities = fold_fragments(
                _fragment_quantity(fragment) for fragment in node.children
            )
        elif node.rule is Rule.INGREDIENT:
            record.ingredient_name = _ingredient_name(node.text)
        else:
            raise WrongRuleError(node.rule.value, "ingredient_line")
    return record
