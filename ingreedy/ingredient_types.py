"""
ingreedy Ingredient Types
Defines the structured output of the ingredient parser: the unit system enum,
the Quantity value and the IngredientRecord returned to callers.

Field naming follows the Python API; the interchange names used on the wire
(`unit_type`, `ingredient`) live in ingreedy/contracts.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ────────────────────────────────────────────────
# 📏 Unit system classification
# ────────────────────────────────────────────────

class UnitSystem(str, Enum):
    """Provenance of a unit token: which lexical sub-table matched it."""
    ENGLISH = "English"
    METRIC = "Metric"
    IMPRECISE = "Imprecise"


# ────────────────────────────────────────────────
# 🔢 Quantity
# ────────────────────────────────────────────────

@dataclass
class Quantity:
    """
    One amount with an optional unit.

    amount:       finite, non-negative float.
    unit:         canonical unit name ("ounce", "gram", "pinch") or None.
    unit_system:  set exactly when unit is set.
    """
    amount: float = 0.0
    unit: Optional[str] = None
    unit_system: Optional[UnitSystem] = None

    def __post_init__(self) -> None:
        if (self.unit is None) != (self.unit_system is None):
            raise ValueError(
                f"unit and unit_system must be set together (unit={self.unit!r}, "
                f"unit_system={self.unit_system!r})"
            )

    @property
    def has_unit(self) -> bool:
        return self.unit is not None


# ────────────────────────────────────────────────
# 🧾 Ingredient record
# ────────────────────────────────────────────────

@dataclass
class IngredientRecord:
    """Structured parse of one ingredient line.

    quantities are ordered by textual appearance; ingredient_name is None when
    the line holds nothing after its quantity ("5g").
    """
    quantities: List[Quantity] = field(default_factory=list)
    ingredient_name: Optional[str] = None
