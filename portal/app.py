# portal/app.py
from flask import Flask, jsonify, request

# --- Standard libs & typing ---
import logging
from typing import Any, Dict, Tuple

from ingreedy.config import SETTINGS
from ingreedy.contracts import record_to_dict
from ingreedy.errors import IngreedyError
from ingreedy.ingredient import parse_ingredient, parse_ingredients

# ------------------------
# App & Config
# ------------------------
app = Flask(__name__)

app.config["MAX_CONTENT_LENGTH"] = 1 * 1024 * 1024        # ~1 MB of JSON
app.json.sort_keys = False
# Upper bound on lines per batch request
app.config["MAX_BATCH_LINES"] = SETTINGS.max_batch_lines

app.logger.setLevel(SETTINGS.log_level)
logging.getLogger("ingreedy").setLevel(SETTINGS.log_level)

# --- Core routes (health) ---
from routes.core import core_bp
app.register_blueprint(core_bp)


def _bad_request(message: str) -> Tuple[Any, int]:
    return jsonify({"ok": False, "error": message}), 400


def _error_payload(err: IngreedyError) -> Dict[str, Any]:
    payload = err.to_dict()
    payload["ok"] = False
    return payload


# ------------------------
# JSON API
# ------------------------
@app.post("/api/ingredients/parse")
def api_parse_ingredient():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("Request body must be a JSON object")
    line = payload.get("line")
    if not isinstance(line, str):
        return _bad_request("'line' must be a string")

    try:
        record = parse_ingredient(line)
    except IngreedyError as e:
        return jsonify(_error_payload(e)), 422
    return jsonify({"ok": True, "record": record_to_dict(record)})


@app.post("/api/ingredients/parse-batch")
def api_parse_ingredients():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("Request body must be a JSON object")
    lines = payload.get("lines")
    if not isinstance(lines, list) or not all(isinstance(x, str) for x in lines):
        return _bad_request("'lines' must be a list of strings")
    limit = app.config["MAX_BATCH_LINES"]
    if len(lines) > limit:
        return _bad_request(f"Too many lines: {len(lines)} (max {limit})")

    results = []
    for outcome in parse_ingredients(lines):
        if outcome.ok:
            results.append({"line": outcome.line, "ok": True, "record": record_to_dict(outcome.record)})
        else:
            entry = _error_payload(outcome.error)
            entry["line"] = outcome.line
            results.append(entry)

    failed = sum(1 for r in results if not r["ok"])
    if failed:
        app.logger.info("Batch parse: %d of %d lines failed", failed, len(results))
    return jsonify({"ok": True, "count": len(results), "failed": failed, "results": results})


@app.errorhandler(413)
def _too_large(_e):
    return jsonify({"ok": False, "error": "Request too large. Raise MAX_CONTENT_LENGTH or send fewer lines."}), 413


# ------------------------
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
