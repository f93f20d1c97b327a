"""
JSON API over the ingredient parser.

Covers:
  POST /api/ingredients/parse:
  - Success -> 200 {"ok": True, "record": ...}
  - Non-JSON / non-object body -> 400
  - Missing or non-string line -> 400
  - Syntax error -> 422 with kind, position, expected
  - Numeric error -> 422 with kind

  POST /api/ingredients/parse-batch:
  - Mixed good and bad lines -> 200 with per-line results
  - Non-list / non-string entries -> 400
  - More lines than MAX_BATCH_LINES -> 400

  Core routes:
  - GET / lists endpoints and canonical units per system
  - GET /health reports status and limits

  Response Consistency:
  - All error responses have "ok": False + "error"

Run: python -m pytest tests/test_api.py -v
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture()
def client():
    """Flask test client with default batch limit restored after each test."""
    from portal.app import app
    app.config["TESTING"] = True
    limit = app.config["MAX_BATCH_LINES"]
    with app.test_client() as c:
        yield c
    app.config["MAX_BATCH_LINES"] = limit


@pytest.fixture()
def app_config():
    from portal.app import app
    return app.config


class TestParseEndpoint:

    def test_success(self, client):
        resp = client.post("/api/ingredients/parse", json={"line": "12 (6-ounce) chicken breasts"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is True
        assert data["record"] == {
            "quantities": [{"amount": 72.0, "unit": "ounce", "unit_type": "English"}],
            "ingredient": "chicken breasts",
        }

    def test_key_order_kept(self, client):
        resp = client.post("/api/ingredients/parse", json={"line": "1 cup flour"})
        assert resp.get_data(as_text=True).index('"quantities"') < resp.get_data(as_text=True).index('"ingredient"')

    def test_not_json(self, client):
        resp = client.post("/api/ingredients/parse", data="1 cup flour", content_type="text/plain")
        assert resp.status_code == 400
        assert resp.get_json()["ok"] is False

    def test_not_object(self, client):
        resp = client.post("/api/ingredients/parse", json=["1 cup flour"])
        assert resp.status_code == 400

    @pytest.mark.parametrize("body", [{}, {"line": None}, {"line": 5}])
    def test_bad_line(self, client, body):
        resp = client.post("/api/ingredients/parse", json=body)
        assert resp.status_code == 400
        assert "line" in resp.get_json()["error"]

    def test_syntax_error(self, client):
        resp = client.post("/api/ingredients/parse", json={"line": "2 (28 ounce can"})
        assert resp.status_code == 422
        data = resp.get_json()
        assert data["ok"] is False
        assert data["kind"] == "syntax"
        assert data["position"] == 15
        assert data["expected"] == ["')'"]
        assert data["error"].startswith("Syntax error at position 15")

    def test_numeric_error(self, client):
        resp = client.post("/api/ingredients/parse", json={"line": "1/0 cup flour"})
        assert resp.status_code == 422
        assert resp.get_json()["kind"] == "numeric_parse"


class TestBatchEndpoint:

    def test_mixed_results(self, client):
        lines = ["1 cup flour", "(", "pinch salt"]
        resp = client.post("/api/ingredients/parse-batch", json={"lines": lines})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is True
        assert data["count"] == 3
        assert data["failed"] == 1
        assert [r["line"] for r in data["results"]] == lines
        assert [r["ok"] for r in data["results"]] == [True, False, True]
        assert data["results"][1]["kind"] == "syntax"
        assert data["results"][2]["record"]["quantities"][0]["unit"] == "pinch"

    def test_empty_batch(self, client):
        resp = client.post("/api/ingredients/parse-batch", json={"lines": []})
        assert resp.status_code == 200
        assert resp.get_json()["count"] == 0

    @pytest.mark.parametrize("body", [{}, {"lines": "1 cup flour"}, {"lines": ["ok", 3]}])
    def test_bad_lines(self, client, body):
        resp = client.post("/api/ingredients/parse-batch", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["ok"] is False

    def test_too_many_lines(self, client, app_config):
        app_config["MAX_BATCH_LINES"] = 2
        resp = client.post("/api/ingredients/parse-batch", json={"lines": ["a", "b", "c"]})
        assert resp.status_code == 400
        assert "max 2" in resp.get_json()["error"]


class TestCoreRoutes:

    def test_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.get_json()
        assert "/api/ingredients/parse" in data["endpoints"]
        assert set(data["units"]) == {"English", "Metric", "Imprecise"}
        assert "fluid_ounce" in data["units"]["English"]
        assert "kilojoule" in data["units"]["Metric"]
        assert data["units"]["Imprecise"][0] == "dash"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "ok"
        assert data["time"].endswith("Z")
        assert data["max_input_length"] > 0
