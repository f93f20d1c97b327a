# ingreedy/parsers/ingredient_grammar.py
"""
Ingredient Line Grammar

Derives a raw recipe ingredient line into a labeled parse tree:

  ingredient_line
    multipart_quantity            "2lb 4oz", "two five ounce", "12 (6-ounce)"
      quantity_fragment*
        quantity | amount
    ingredient                    "potatoes", "can crushed tomatoes"

The grammar is a PEG: ordered choice (the first alternative that matches
wins), greedy repetition, and a failed sequence gives its input back. Named
rules (the Rule enum) become ParseNode entries; whitespace, punctuation and
separators between them are matched silently.

Design principles:
  - Terminals are plain regexes built from the shared vocabularies
    (number_vocab, unit_vocab), longest spelling first
  - Named-rule results are memoized per (rule, position), so a parse is
    linear in the input length
  - Failures report the furthest offset any terminal failed at, the rule
    stack active there and what was expected, so long lines still get a
    precise diagnostic
  - Non-destructive: returns a new tree, never mutates input

Grammar (informal):

  ingredient_line            ws? ( multipart_quantity name_break ingredient? ws? EOI
                                 | ingredient ws? EOI )
  multipart_quantity         quantity_fragment (("/" | ws) quantity_fragment)*
  quantity_fragment          quantity | amount
  quantity                   amount_with_conversion | amount_with_attached_units
                             | amount_with_multiplier | amount_imprecise
  amount_with_conversion     amount unit_sep? unit ("/" conversion | "(" conversion ")")
  conversion                 amount unit_sep? unit (ws amount unit_sep? unit)*
  amount_with_attached_units amount unit_sep? unit
  amount_with_multiplier     amount ws? parenthesized_quantity
  parenthesized_quantity     "(" quantity ")"
  amount_imprecise           imprecise_unit
  amount                     float | mixed_number | fraction | integer | number_word
  mixed_number               integer separator? fraction
  fraction                   multicharacter_fraction | unicode_fraction
  unit                       english_unit | metric_unit | imprecise_unit
  ingredient                 rest of the line, parentheses balanced

"-" is only a separator inside mixed_number ("1-1/2") and between an amount
and its unit ("16-ounce"); anywhere else ("t-bone") it is ingredient text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import re

from ingreedy.errors import IngredientSyntaxError
from ingreedy.parsers.number_vocab import NUMBER_WORD_RE, UNICODE_FRACTION_RE
from ingreedy.parsers.unit_vocab import (
    ENGLISH_UNIT_RE,
    IMPRECISE_UNIT_RE,
    METRIC_UNIT_RE,
)

DEFAULT_MAX_NESTING_DEPTH = 64


# ── Parse tree types ─────────────────────────────────

class Rule(str, Enum):
    """Closed set of named grammar rules; every ParseNode carries one."""
    INGREDIENT_LINE = "ingredient_line"
    MULTIPART_QUANTITY = "multipart_quantity"
    QUANTITY_FRAGMENT = "quantity_fragment"
    QUANTITY = "quantity"
    AMOUNT_WITH_CONVERSION = "amount_with_conversion"
    AMOUNT_WITH_ATTACHED_UNITS = "amount_with_attached_units"
    AMOUNT_WITH_MULTIPLIER = "amount_with_multiplier"
    AMOUNT_IMPRECISE = "amount_imprecise"
    PARENTHESIZED_QUANTITY = "parenthesized_quantity"
    CONVERSION = "conversion"
    AMOUNT = "amount"
    FLOAT = "float"
    INTEGER = "integer"
    MIXED_NUMBER = "mixed_number"
    SEPARATOR = "separator"
    FRACTION = "fraction"
    MULTICHARACTER_FRACTION = "multicharacter_fraction"
    UNICODE_FRACTION = "unicode_fraction"
    NUMBER_WORD = "number_word"
    UNIT = "unit"
    ENGLISH_UNIT = "english_unit"
    METRIC_UNIT = "metric_unit"
    IMPRECISE_UNIT = "imprecise_unit"
    INGREDIENT = "ingredient"


@dataclass(frozen=True)
class ParseNode:
    """One derivation step: a rule, the span it covered, and its sub-rules."""
    rule: Rule
    start: int
    end: int
    text: str
    children: Tuple["ParseNode", ...] = ()

    def first_child(self) -> Optional["ParseNode"]:
        return self.children[0] if self.children else None

    def find(self, rule: Rule) -> Optional["ParseNode"]:
        """First direct child labeled ``rule``, or None."""
        for child in self.children:
            if child.rule is rule:
                return child
        return None

    def pretty(self, indent: int = 0) -> str:
        """Indented dump of the subtree, one rule per line."""
        pad = "  " * indent
        if not self.children:
            return f"{pad}- {self.rule.value}: {self.text!r}"
        lines = [f"{pad}- {self.rule.value}"]
        lines.extend(child.pretty(indent + 1) for child in self.children)
        return "\n".join(lines)


# ── PEG machinery ────────────────────────────────────

# (end position, nodes produced) or None on failure
_Match = Optional[Tuple[int, List[ParseNode]]]


class _ParseState:
    """Per-call parse state: input, memo table and furthest-failure tracking."""

    def __init__(self, text: str, max_depth: int):
        self.text = text
        self.max_depth = max_depth
        self.stack: List[Rule] = []
        self.memo: Dict[Tuple[Rule, int], _Match] = {}
        self.furthest = -1
        self.furthest_stack: Tuple[str, ...] = ()
        self.expected: List[str] = []

    def fail(self, pos: int, expected: str) -> None:
        if pos > self.furthest:
            self.furthest = pos
            self.furthest_stack = tuple(r.value for r in self.stack)
            self.expected = [expected]
        elif pos == self.furthest and expected not in self.expected:
            self.expected.append(expected)

    def apply(self, rule: Rule, pos: int) -> _Match:
        key = (rule, pos)
        if key in self.memo:
            return self.memo[key]
        if len(self.stack) >= self.max_depth:
            raise IngredientSyntaxError(
                self.text,
                pos,
                rule_stack=[r.value for r in self.stack],
                reason=f"nesting deeper than {self.max_depth} rules",
            )

        self.stack.append(rule)
        try:
            result = _RULES[rule].match(self, pos)
        finally:
            self.stack.pop()

        if result is not None:
            end, children = result
            node = ParseNode(rule, pos, end, self.text[pos:end], tuple(children))
            result = (end, [node])
        self.memo[key] = result
        return result


class _Expr:
    def match(self, state: _ParseState, pos: int) -> _Match:
        raise NotImplementedError


class _Pattern(_Expr):
    """Terminal: a regex anchored at the current position."""

    def __init__(self, pattern: Union[str, "re.Pattern[str]"], expected: str):
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.expected = expected

    def match(self, state: _ParseState, pos: int) -> _Match:
        m = self.regex.match(state.text, pos)
        if m is None:
            state.fail(pos, self.expected)
            return None
        return m.end(), []


class _Seq(_Expr):
    def __init__(self, *items: _Expr):
        self.items = items

    def match(self, state: _ParseState, pos: int) -> _Match:
        nodes: List[ParseNode] = []
        for item in self.items:
            result = item.match(state, pos)
            if result is None:
                return None
            pos, produced = result
            nodes.extend(produced)
        return pos, nodes


class _Choice(_Expr):
    def __init__(self, *alternatives: _Expr):
        self.alternatives = alternatives

    def match(self, state: _ParseState, pos: int) -> _Match:
        for alternative in self.alternatives:
            result = alternative.match(state, pos)
            if result is not None:
                return result
        return None


class _Optional(_Expr):
    def __init__(self, expr: _Expr):
        self.expr = expr

    def match(self, state: _ParseState, pos: int) -> _Match:
        result = self.expr.match(state, pos)
        return result if result is not None else (pos, [])


class _ZeroOrMore(_Expr):
    def __init__(self, expr: _Expr):
        self.expr = expr

    def match(self, state: _ParseState, pos: int) -> _Match:
        nodes: List[ParseNode] = []
        while True:
            result = self.expr.match(state, pos)
            if result is None or result[0] == pos:
                return pos, nodes
            pos, produced = result
            nodes.extend(produced)


class _Ref(_Expr):
    """Reference to a named rule; resolved lazily so rules can recurse."""

    def __init__(self, rule: Rule):
        self.rule = rule

    def match(self, state: _ParseState, pos: int) -> _Match:
        return state.apply(self.rule, pos)


class _EndOfInput(_Expr):
    def match(self, state: _ParseState, pos: int) -> _Match:
        if pos == len(state.text):
            return pos, []
        state.fail(pos, "end of input")
        return None


class _IngredientText(_Expr):
    """Rest of the line, starting at a non-space character.

    Parentheses must balance; trailing whitespace is left unconsumed.
    """

    def match(self, state: _ParseState, pos: int) -> _Match:
        text = state.text
        if pos >= len(text) or text[pos].isspace():
            state.fail(pos, "ingredient name")
            return None

        depth = 0
        for i in range(pos, len(text)):
            ch = text[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                if depth == 0:
                    state.fail(i, "text without an unmatched ')'")
                    return None
                depth -= 1
        if depth:
            state.fail(len(text), "')'")
            return None
        return len(text.rstrip()), []


def _lit(literal: str) -> _Pattern:
    return _Pattern(re.escape(literal), repr(literal))


# ── Grammar ──────────────────────────────────────────

_WS = _Pattern(r"\s+", "whitespace")
_UNIT_SEP = _Pattern(r"\s+|-", "space or '-' before a unit")
_NAME_BREAK = _Pattern(r"[\s,]*", "break before the ingredient name")
_FRAGMENT_SEP = _Choice(_Seq(_Optional(_WS), _lit("/"), _Optional(_WS)), _WS)
_EOI = _EndOfInput()

# amount + unit, the shape shared by attached units and conversion pairs
_AMOUNT_UNIT = _Seq(_Ref(Rule.AMOUNT), _Optional(_UNIT_SEP), _Ref(Rule.UNIT))

_RULES: Dict[Rule, _Expr] = {
    Rule.INGREDIENT_LINE: _Seq(
        _Optional(_WS),
        _Choice(
            _Seq(
                _Ref(Rule.MULTIPART_QUANTITY),
                _NAME_BREAK,
                _Optional(_Ref(Rule.INGREDIENT)),
                _Optional(_WS),
                _EOI,
            ),
            _Seq(_Ref(Rule.INGREDIENT), _Optional(_WS), _EOI),
        ),
    ),
    Rule.MULTIPART_QUANTITY: _Seq(
        _Ref(Rule.QUANTITY_FRAGMENT),
        _ZeroOrMore(_Seq(_FRAGMENT_SEP, _Ref(Rule.QUANTITY_FRAGMENT))),
    ),
    Rule.QUANTITY_FRAGMENT: _Choice(_Ref(Rule.QUANTITY), _Ref(Rule.AMOUNT)),
    Rule.QUANTITY: _Choice(
        _Ref(Rule.AMOUNT_WITH_CONVERSION),
        _Ref(Rule.AMOUNT_WITH_ATTACHED_UNITS),
        _Ref(Rule.AMOUNT_WITH_MULTIPLIER),
        _Ref(Rule.AMOUNT_IMPRECISE),
    ),
    Rule.AMOUNT_WITH_CONVERSION: _Seq(
        _AMOUNT_UNIT,
        _Choice(
            _Seq(_Optional(_WS), _lit("/"), _Optional(_WS), _Ref(Rule.CONVERSION)),
            _Seq(
                _Optional(_WS), _lit("("), _Optional(_WS),
                _Ref(Rule.CONVERSION),
                _Optional(_WS), _lit(")"),
            ),
        ),
    ),
    # Restatement in other units; may itself be compound ("1 pint 7fl oz")
    Rule.CONVERSION: _Seq(_AMOUNT_UNIT, _ZeroOrMore(_Seq(_WS, _AMOUNT_UNIT))),
    Rule.AMOUNT_WITH_ATTACHED_UNITS: _AMOUNT_UNIT,
    Rule.AMOUNT_WITH_MULTIPLIER: _Seq(
        _Ref(Rule.AMOUNT), _Optional(_WS), _Ref(Rule.PARENTHESIZED_QUANTITY),
    ),
    Rule.PARENTHESIZED_QUANTITY: _Seq(
        _lit("("), _Optional(_WS), _Ref(Rule.QUANTITY), _Optional(_WS), _lit(")"),
    ),
    Rule.AMOUNT_IMPRECISE: _Ref(Rule.IMPRECISE_UNIT),
    # float and mixed_number before integer, or "1.5" / "1 1/2" stop at "1"
    Rule.AMOUNT: _Choice(
        _Ref(Rule.FLOAT),
        _Ref(Rule.MIXED_NUMBER),
        _Ref(Rule.FRACTION),
        _Ref(Rule.INTEGER),
        _Ref(Rule.NUMBER_WORD),
    ),
    Rule.FLOAT: _Pattern(r"\d*\.\d+", "decimal number"),
    Rule.INTEGER: _Pattern(r"\d+", "integer"),
    Rule.MIXED_NUMBER: _Seq(
        _Ref(Rule.INTEGER), _Optional(_Ref(Rule.SEPARATOR)), _Ref(Rule.FRACTION),
    ),
    Rule.SEPARATOR: _Pattern(r"\s+|-", "space or '-' in a mixed number"),
    Rule.FRACTION: _Choice(
        _Ref(Rule.MULTICHARACTER_FRACTION), _Ref(Rule.UNICODE_FRACTION),
    ),
    Rule.MULTICHARACTER_FRACTION: _Pattern(r"\d+/\d+", "fraction"),
    Rule.UNICODE_FRACTION: _Pattern(UNICODE_FRACTION_RE, "fraction glyph"),
    Rule.NUMBER_WORD: _Pattern(NUMBER_WORD_RE, "number word"),
    Rule.UNIT: _Choice(
        _Ref(Rule.ENGLISH_UNIT), _Ref(Rule.METRIC_UNIT), _Ref(Rule.IMPRECISE_UNIT),
    ),
    Rule.ENGLISH_UNIT: _Pattern(ENGLISH_UNIT_RE, "english unit"),
    Rule.METRIC_UNIT: _Pattern(METRIC_UNIT_RE, "metric unit"),
    Rule.IMPRECISE_UNIT: _Pattern(IMPRECISE_UNIT_RE, "imprecise unit"),
    Rule.INGREDIENT: _IngredientText(),
}


# ── Public API ───────────────────────────────────────

def parse_tree(
    line: str,
    *,
    max_input_length: Optional[int] = None,
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> ParseNode:
    """Derive ``line`` from the ingredient_line rule.

    Returns the root ParseNode. Raises IngredientSyntaxError when no
    derivation covers the whole line, when the line is longer than
    ``max_input_length`` or when rules nest deeper than ``max_nesting_depth``.

    Examples:
        "1 cup flour" ->
          - ingredient_line
            - multipart_quantity
              - quantity_fragment
                - quantity
                  - amount_with_attached_units
                    - amount
                      - integer: '1'
                    - unit
                      - english_unit: 'cup'
            - ingredient: 'flour'
    """
    if not isinstance(line, str):
        raise TypeError(f"line must be a str, got {type(line).__name__}")
    if max_input_length is not None and len(line) > max_input_length:
        raise IngredientSyntaxError(
            line,
            max_input_length,
            reason=f"input longer than {max_input_length} characters",
        )

    state = _ParseState(line, max_nesting_depth)
    try:
        result = state.apply(Rule.INGREDIENT_LINE, 0)
    except RecursionError as e:
        # max_nesting_depth above what the interpreter stack can hold
        raise IngredientSyntaxError(
            line,
            max(state.furthest, 0),
            rule_stack=state.furthest_stack,
            reason="nesting too deep for the interpreter stack",
        ) from e
    if result is None:
        raise IngredientSyntaxError(
            line,
            max(state.furthest, 0),
            rule_stack=state.furthest_stack,
            expected=state.expected,
        )
    return result[1][0]
