"""
Semantic extraction over hand-built and parsed trees.

Covers:
  Amounts:
  - float, integer, fraction, mixed number, number word, unicode glyph
  - zero denominator / non-finite -> NumericParseError

  Structural mismatches:
  - wrong root rule -> WrongRuleError
  - non-unit node classified as a unit -> WrongRuleError
  - wrapper rule without its child -> InnerRuleMissingError

  Quantities:
  - first amount/unit pair wins, conversion children ignored
  - multiplier scales the parenthesized quantity, unit passes through
  - imprecise unit alone counts as one

  fold_fragments:
  - leading count multiplies the next fragment
  - compound quantities with units stay separate
  - a lone count is kept

Run: python -m pytest tests/test_extractor.py -v
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ingreedy.errors import InnerRuleMissingError, NumericParseError, WrongRuleError
from ingreedy.extractor import (
    classify_unit,
    extract_record,
    fold_fragments,
    parse_amount,
    parse_quantity,
)
from ingreedy.ingredient_types import Quantity, UnitSystem
from ingreedy.parsers.ingredient_grammar import ParseNode, Rule, parse_tree


def _node(rule, text="", *children):
    return ParseNode(rule, 0, len(text), text, tuple(children))


def _amount(literal):
    return _node(Rule.AMOUNT, literal.text, literal)


def _int(text):
    return _amount(_node(Rule.INTEGER, text))


def _unit(rule, text):
    return _node(Rule.UNIT, text, _node(rule, text))


class TestParseAmount:

    def test_float(self):
        assert parse_amount(_node(Rule.FLOAT, ".25")) == pytest.approx(0.25)

    def test_integer(self):
        assert parse_amount(_node(Rule.INTEGER, "12345")) == 12345.0

    def test_fraction(self):
        frac = _node(Rule.FRACTION, "2/3", _node(Rule.MULTICHARACTER_FRACTION, "2/3"))
        assert parse_amount(frac) == pytest.approx(2 / 3)

    def test_unicode_fraction(self):
        frac = _node(Rule.FRACTION, "⅝", _node(Rule.UNICODE_FRACTION, "⅝"))
        assert parse_amount(frac) == pytest.approx(0.625)

    def test_mixed_number(self):
        mixed = _node(
            Rule.MIXED_NUMBER, "5 3/4",
            _node(Rule.INTEGER, "5"),
            _node(Rule.SEPARATOR, " "),
            _node(Rule.FRACTION, "3/4", _node(Rule.MULTICHARACTER_FRACTION, "3/4")),
        )
        assert parse_amount(mixed) == pytest.approx(5.75)

    @pytest.mark.parametrize("word,value", [("a", 1.0), ("An", 1.0), ("zero", 0.0),
                                            ("seventeen", 17.0), ("NINETY", 90.0)])
    def test_number_word(self, word, value):
        assert parse_amount(_node(Rule.NUMBER_WORD, word)) == value

    def test_unknown_number_word(self):
        with pytest.raises(NumericParseError):
            parse_amount(_node(Rule.NUMBER_WORD, "dozen"))

    def test_zero_denominator(self):
        frac = _node(Rule.FRACTION, "1/0", _node(Rule.MULTICHARACTER_FRACTION, "1/0"))
        with pytest.raises(NumericParseError) as exc:
            parse_amount(frac)
        assert exc.value.text == "1/0"

    def test_infinite_integer(self):
        with pytest.raises(NumericParseError):
            parse_amount(_node(Rule.INTEGER, "9" * 400))

    def test_wrong_literal_rule(self):
        with pytest.raises(WrongRuleError) as exc:
            parse_amount(_node(Rule.UNIT, "cup"))
        assert exc.value.found == "unit"
        assert exc.value.expected == "amount"

    def test_fraction_without_child(self):
        with pytest.raises(InnerRuleMissingError) as exc:
            parse_amount(_node(Rule.FRACTION, "1/2"))
        assert str(exc.value) == "No inner rule found for fraction"


class TestClassifyUnit:

    @pytest.mark.parametrize("rule,text,name,system", [
        (Rule.ENGLISH_UNIT, "Tbsp.", "tablespoon", UnitSystem.ENGLISH),
        (Rule.ENGLISH_UNIT, "fl oz", "fluid_ounce", UnitSystem.ENGLISH),
        (Rule.METRIC_UNIT, "ML", "milliliter", UnitSystem.METRIC),
        (Rule.METRIC_UNIT, "kilos", "kilogram", UnitSystem.METRIC),
        (Rule.IMPRECISE_UNIT, "pinches", "pinch", UnitSystem.IMPRECISE),
    ])
    def test_classify(self, rule, text, name, system):
        assert classify_unit(_node(rule, text)) == (name, system)

    def test_not_a_unit_rule(self):
        with pytest.raises(WrongRuleError) as exc:
            classify_unit(_node(Rule.AMOUNT, "2"))
        assert str(exc.value) == "Wrong rule 'amount' for unit_type"

    def test_spelling_from_other_system(self):
        with pytest.raises(WrongRuleError):
            classify_unit(_node(Rule.METRIC_UNIT, "oz"))


class TestParseQuantity:

    def test_attached(self):
        node = _node(Rule.AMOUNT_WITH_ATTACHED_UNITS, "2 cups",
                     _int("2"), _unit(Rule.ENGLISH_UNIT, "cups"))
        assert parse_quantity(node) == Quantity(2.0, "cup", UnitSystem.ENGLISH)

    def test_conversion_ignored(self):
        conversion = _node(Rule.CONVERSION, "240ml", _int("240"), _unit(Rule.METRIC_UNIT, "ml"))
        node = _node(Rule.AMOUNT_WITH_CONVERSION, "1 cup/240ml",
                     _int("1"), _unit(Rule.ENGLISH_UNIT, "cup"), conversion)
        assert parse_quantity(node) == Quantity(1.0, "cup", UnitSystem.ENGLISH)

    def test_first_pair_wins(self):
        node = _node(Rule.AMOUNT_WITH_ATTACHED_UNITS, "",
                     _int("3"), _unit(Rule.ENGLISH_UNIT, "cup"),
                     _int("9"), _unit(Rule.METRIC_UNIT, "g"))
        assert parse_quantity(node) == Quantity(3.0, "cup", UnitSystem.ENGLISH)

    def test_attached_missing_unit(self):
        node = _node(Rule.AMOUNT_WITH_ATTACHED_UNITS, "2", _int("2"))
        with pytest.raises(InnerRuleMissingError):
            parse_quantity(node)

    def test_multiplier(self):
        inner = _node(Rule.AMOUNT_WITH_ATTACHED_UNITS, "6-ounce",
                      _int("6"), _unit(Rule.ENGLISH_UNIT, "ounce"))
        paren = _node(Rule.PARENTHESIZED_QUANTITY, "(6-ounce)", _node(Rule.QUANTITY, "6-ounce", inner))
        node = _node(Rule.AMOUNT_WITH_MULTIPLIER, "12 (6-ounce)", _int("12"), paren)
        assert parse_quantity(node) == Quantity(72.0, "ounce", UnitSystem.ENGLISH)

    def test_multiplier_without_quantity(self):
        node = _node(Rule.AMOUNT_WITH_MULTIPLIER, "12", _int("12"))
        with pytest.raises(InnerRuleMissingError):
            parse_quantity(node)

    def test_imprecise(self):
        node = _node(Rule.AMOUNT_IMPRECISE, "dash", _node(Rule.IMPRECISE_UNIT, "dash"))
        assert parse_quantity(node) == Quantity(1.0, "dash", UnitSystem.IMPRECISE)

    def test_wrong_rule(self):
        with pytest.raises(WrongRuleError):
            parse_quantity(_int("2"))


class TestFoldFragments:

    def test_count_multiplies_next(self):
        got = fold_fragments([Quantity(2.0), Quantity(5.0, "ounce", UnitSystem.ENGLISH)])
        assert got == [Quantity(10.0, "ounce", UnitSystem.ENGLISH)]

    def test_compound_kept(self):
        pound = Quantity(2.0, "pound", UnitSystem.ENGLISH)
        ounce = Quantity(4.0, "ounce", UnitSystem.ENGLISH)
        assert fold_fragments([pound, ounce]) == [pound, ounce]

    def test_lone_count(self):
        assert fold_fragments([Quantity(3.0)]) == [Quantity(3.0)]

    def test_two_counts(self):
        assert fold_fragments([Quantity(2.0), Quantity(3.0)]) == [Quantity(6.0)]

    def test_count_after_unit_kept(self):
        pound = Quantity(2.0, "pound", UnitSystem.ENGLISH)
        assert fold_fragments([pound, Quantity(3.0)]) == [pound, Quantity(3.0)]

    def test_empty(self):
        assert fold_fragments([]) == []

    def test_overflowing_product(self):
        with pytest.raises(NumericParseError):
            fold_fragments([Quantity(1e200), Quantity(1e200, "ounce", UnitSystem.ENGLISH)])


class TestExtractRecord:

    def test_wrong_root(self):
        with pytest.raises(WrongRuleError) as exc:
            extract_record(_int("1"))
        assert exc.value.expected == "ingredient_line"

    def test_unexpected_child(self):
        root = _node(Rule.INGREDIENT_LINE, "1", _int("1"))
        with pytest.raises(WrongRuleError):
            extract_record(root)

    def test_parsed_tree(self):
        record = extract_record(parse_tree("two five ounce can crushed tomatoes"))
        assert record.quantities == [Quantity(10.0, "ounce", UnitSystem.ENGLISH)]
        assert record.ingredient_name == "can crushed tomatoes"

    def test_ingredient_only(self):
        record = extract_record(_node(Rule.INGREDIENT_LINE, "salt", _node(Rule.INGREDIENT, "salt")))
        assert record.quantities == []
        assert record.ingredient_name == "salt"

    def test_bad_fragment_rule(self):
        multipart = _node(Rule.MULTIPART_QUANTITY, "1", _int("1"))
        with pytest.raises(WrongRuleError):
            extract_record(_node(Rule.INGREDIENT_LINE, "1", multipart))
