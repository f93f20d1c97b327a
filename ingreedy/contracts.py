# ingreedy/contracts.py
"""
Interchange shape of an IngredientRecord:

    {
      "quantities": [{"amount": 56.0, "unit": "ounce", "unit_type": "English"}],
      "ingredient": "cans crushed tomatoes"
    }

`unit` / `unit_type` are null together; `ingredient` is null when the line had
nothing after its quantity.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import json
import math

from ingreedy.ingredient_types import IngredientRecord, Quantity, UnitSystem
from ingreedy.parsers.unit_vocab import unit_system_of

RecordKeys = {"quantities", "ingredient"}
QuantityKeys = {"amount", "unit", "unit_type"}
_UNIT_TYPES = {s.value for s in UnitSystem}


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def validate_record_payload(payload: Dict[str, Any]) -> Tuple[bool, str]:
    if not isinstance(payload, dict):
        return False, "payload must be an object"

    missing = [k for k in sorted(RecordKeys) if k not in payload]
    if missing:
        return False, f"missing top-level keys: {', '.join(missing)}"

    ingredient = payload["ingredient"]
    if ingredient is not None and not isinstance(ingredient, str):
        return False, "ingredient must be a string or null"

    quantities = payload["quantities"]
    if not isinstance(quantities, list):
        return False, "quantities must be a list"

    for i, q in enumerate(quantities):
        if not isinstance(q, dict):
            return False, f"quantities[{i}] must be an object"
        missing = [k for k in sorted(QuantityKeys) if k not in q]
        if missing:
            return False, f"quantities[{i}] missing keys: {', '.join(missing)}"
        amount = q["amount"]
        if not _is_number(amount) or not math.isfinite(amount) or amount < 0:
            return False, f"quantities[{i}].amount must be a finite non-negative number"
        unit, unit_type = q["unit"], q["unit_type"]
        if (unit is None) != (unit_type is None):
            return False, f"quantities[{i}].unit and unit_type must both be set or both be null"
        if unit is not None and not isinstance(unit, str):
            return False, f"quantities[{i}].unit must be a string or null"
        if unit_type is not None and unit_type not in _UNIT_TYPES:
            return False, (
                f"quantities[{i}].unit_type must be one of {', '.join(sorted(_UNIT_TYPES))}"
            )
        if unit is not None and unit_system_of(unit) != unit_type:
            return False, f"quantities[{i}].unit {unit!r} is not a known {unit_type} unit"

    return True, ""


def quantity_to_dict(quantity: Quantity) -> Dict[str, Any]:
    return {
        "amount": quantity.amount,
        "unit": quantity.unit,
        "unit_type": quantity.unit_system.value if quantity.unit_system else None,
    }


def record_to_dict(record: IngredientRecord) -> Dict[str, Any]:
    return {
        "quantities": [quantity_to_dict(q) for q in record.quantities],
        "ingredient": record.ingredient_name,
    }


def record_from_dict(payload: Dict[str, Any]) -> IngredientRecord:
    """Inverse of record_to_dict. Raises ValueError on a malformed payload."""
    ok, err = validate_record_payload(payload)
    if not ok:
        raise ValueError(err)
    return IngredientRecord(
        quantities=[
            Quantity(
                amount=float(q["amount"]),
                unit=q["unit"],
                unit_system=UnitSystem(q["unit_type"]) if q["unit_type"] else None,
            )
            for q in payload["quantities"]
        ],
        ingredient_name=payload["ingredient"],
    )


def record_to_json(record: IngredientRecord, *, indent: Optional[int] = 2) -> str:
    return json.dumps(record_to_dict(record), indent=indent, ensure_ascii=False)


def record_from_json(text: str) -> IngredientRecord:
    return record_from_dict(json.loads(text))
