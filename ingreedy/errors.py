"""
Exception classes for the ingredient parser.

Every failure of a parse call is one of four kinds. None is recovered inside
the parser; all reach the caller with enough context to log or display.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple


class IngreedyError(Exception):
    """Base exception for ingredient parsing"""
    kind = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "error": str(self)}


class IngredientSyntaxError(IngreedyError):
    """Raised when the grammar cannot derive the whole input line.

    position is the furthest offset any terminal failed at; rule_stack holds
    the grammar rules that were active there (outermost first) and expected
    the terminal descriptions that failed at that offset.
    """
    kind = "syntax"

    def __init__(
        self,
        line: str,
        position: int,
        rule_stack: Sequence[str] = (),
        expected: Sequence[str] = (),
        reason: Optional[str] = None,
    ):
        self.line = line
        self.position = position
        self.rule_stack: Tuple[str, ...] = tuple(rule_stack)
        self.expected: Tuple[str, ...] = tuple(expected)
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        if self.reason:
            detail = self.reason
        elif self.expected:
            detail = "expected " + " or ".join(self.expected)
        else:
            detail = "unexpected input"
        where = f" while parsing {self.rule_stack[-1]}" if self.rule_stack else ""
        return f"Syntax error at position {self.position}: {detail}{where}"

    def pretty(self) -> str:
        """Render the offending line with a caret under the failure column."""
        return "\n".join([
            str(self),
            f"  {self.line}",
            "  " + " " * self.position + "^",
        ])

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({
            "position": self.position,
            "expected": list(self.expected),
            "rule_stack": list(self.rule_stack),
        })
        return payload


class WrongRuleError(IngreedyError):
    """Raised when the extractor meets a rule other than the one it expected"""
    kind = "wrong_rule"

    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"Wrong rule '{found}' for {expected}")


class InnerRuleMissingError(IngreedyError):
    """Raised when a rule that always has a child arrives without one"""
    kind = "inner_rule_missing"

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(f"No inner rule found for {rule}")


class NumericParseError(IngreedyError):
    """Raised when a numeric literal cannot become a finite float"""
    kind = "numeric_parse"

    def __init__(self, text: str, reason: str = "not a finite number"):
        self.text = text
        self.reason = reason
        super().__init__(f"Couldn't parse '{text}' as a number: {reason}")
