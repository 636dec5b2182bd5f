"""HTTP adapter tests: routing, status codes and JSON shapes."""

import json

import pytest

from budget_kernel.exceptions import StoreUnavailableError


def post_json(client, path: str, body):
    return client.post(path, data=json.dumps(body), content_type="application/json")


def _seed(client):
    post_json(client, "/api/fund", {"code": "F1", "name": "General", "total_budget": 1000})
    post_json(client, "/api/agency", {"code": "A1", "name": "Works"})
    post_json(
        client,
        "/api/program",
        {"code": "P1", "name": "Roads", "fund_code": "F1", "agency_code": "A1"},
    )


class TestCreate:
    def test_create_fund_returns_201_with_record(self, client):
        response = post_json(
            client, "/api/fund",
            {"code": "F1", "name": "General", "fiscal_year": 2025, "total_budget": 1500.5},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "F1"
        assert body["total_budget"] == "1500.50"
        assert body["fiscal_year"] == 2025
        assert body["seq"] == 1
        assert "id" in body and "created_at" in body

    def test_allocation_and_disbursement_ids(self, client):
        _seed(client)
        allocation = post_json(
            client, "/api/allocation", {"program_code": "P1", "amount": "250.00"}
        ).json()
        disbursement = post_json(
            client, "/api/disbursement",
            {"allocation_id": allocation["id"], "amount": 100, "recipient": "Acme"},
        )

        assert disbursement.status_code == 201
        assert disbursement.json()["allocation_id"] == allocation["id"]
        assert allocation["status"] == "approved"

    def test_float_amounts_parsed_exactly(self, client):
        _seed(client)
        for _ in range(3):
            post_json(client, "/api/allocation", {"program_code": "P1", "amount": 0.1})

        assert client.get("/api/summary").json()["total_allocated"] == "0.30"


class TestErrors:
    def test_missing_field_400(self, client):
        response = post_json(client, "/api/fund", {"name": "no code"})

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "MISSING_FIELD"
        assert body["error"]["details"]["field"] == "code"

    def test_invalid_amount_400(self, client):
        response = post_json(client, "/api/fund", {"code": "F1", "name": "F", "total_budget": "x"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNT"

    def test_dangling_reference_400(self, client):
        response = post_json(client, "/api/allocation", {"program_code": "P9"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DANGLING_REFERENCE"

    def test_overlong_code_400(self, client):
        response = post_json(client, "/api/agency", {"code": "A" * 51, "name": "Works"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_FIELD"
        assert error["details"]["field"] == "code"
        assert client.get("/api/agencies").json() == []

    def test_duplicate_key_409(self, client):
        post_json(client, "/api/agency", {"code": "A1", "name": "A"})
        response = post_json(client, "/api/agency", {"code": "A1", "name": "B"})

        assert response.status_code == 409
        assert response.json()["error"]["details"]["code_value"] == "A1"

    @pytest.mark.parametrize("raw", [b"{not json", b"[1, 2]"])
    def test_malformed_body_400(self, client, raw):
        response = client.post("/api/fund", data=raw, content_type="application/json")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_wrong_method_405(self, client):
        assert client.get("/api/fund").status_code == 405
        assert client.post("/api/funds").status_code == 405
        assert client.post("/api/summary").status_code == 405

    def test_store_unavailable_503(self, client, api_ledger, monkeypatch):
        def _down():
            raise StoreUnavailableError("connection refused")

        monkeypatch.setattr(api_ledger, "get_summary", _down)
        response = client.get("/api/summary")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"


class TestLists:
    def test_lists_are_arrays_in_insertion_order(self, client):
        _seed(client)
        post_json(client, "/api/fund", {"code": "F0", "name": "Second"})

        funds = client.get("/api/funds").json()
        assert [f["code"] for f in funds] == ["F1", "F0"]
        assert client.get("/api/agencies").json()[0]["code"] == "A1"
        assert client.get("/api/programs").json()[0]["fund_code"] == "F1"
        assert client.get("/api/allocations").json() == []
        assert client.get("/api/disbursements").json() == []


class TestSummary:
    def test_summary_shape(self, client):
        _seed(client)
        post_json(client, "/api/allocation", {"program_code": "P1", "amount": "75"})

        assert client.get("/api/summary").json() == {
            "total_funds": 1,
            "total_budget": "1000.00",
            "total_allocated": "75.00",
            "total_disbursed": "0.00",
            "by_program": [{"program_code": "P1", "allocated": "75.00"}],
        }

    def test_summary_with_maximal_amounts(self, client):
        for i in range(100):
            post_json(
                client, "/api/fund",
                {"code": f"F{i}", "name": "F", "total_budget": "999999999999999.99"},
            )

        response = client.get("/api/summary")

        assert response.status_code == 200
        assert response.json()["total_budget"] == "99999999999999999.00"


class TestConnectivity:
    def test_reachable(self, client):
        response = client.get("/test")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "store": "reachable"}

    def test_unreachable(self, client, api_ledger, monkeypatch):
        def _down():
            raise StoreUnavailableError("timeout")

        monkeypatch.setattr(api_ledger, "ping", _down)
        response = client.get("/test")

        assert response.status_code == 503
        assert json.loads(response.content)["store"] == "unreachable"


class TestRequestId:
    def test_request_id_echoed(self, client):
        response = client.get("/api/funds", HTTP_X_REQUEST_ID="req-42")
        assert response["X-Request-ID"] == "req-42"

    def test_request_id_generated(self, client):
        assert client.get("/api/funds")["X-Request-ID"]
