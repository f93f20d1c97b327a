# routes/core.py
from flask import Blueprint, jsonify
from datetime import datetime, timezone

from ingreedy.config import SETTINGS
from ingreedy.ingredient_types import UnitSystem
from ingreedy.parsers.unit_vocab import canonical_units

core_bp = Blueprint("core", __name__)


@core_bp.get("/")
def index():
    return jsonify({
        "service": "ingreedy",
        "endpoints": ["/health", "/api/ingredients/parse", "/api/ingredients/parse-batch"],
        "units": {system.value: canonical_units(system) for system in UnitSystem},
    })


@core_bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "max_input_length": SETTINGS.max_input_length,
    })
