"""Tests for the payoff simulator HTTP endpoints."""

from __future__ import annotations

from debtsage.services import events


def _post_json(client, url: str, payload):
    return client.post(url, json=payload, headers={"Accept": "application/json"})


class TestScenarioRoutes:
    def test_list_scenarios(self, client):
        response = client.get("/debts/scenarios")

        assert response.status_code == 200
        data = response.get_json()
        assert [s["name"] for s in data] == ["creditCardStack", "autoAndPersonal", "studentLoans"]
        assert data[0]["debts"][0]["name"] == "Chase Sapphire"

    def test_get_scenario(self, client):
        response = client.get("/debts/scenarios/autoAndPersonal")

        assert response.status_code == 200
        data = response.get_json()
        assert data["message"] == "Loaded auto and personal scenario"
        assert len(data["debts"]) == 2

    def test_unknown_scenario_is_404(self, client):
        response = client.get("/debts/scenarios/lottery")

        assert response.status_code == 404
        assert response.get_json()["error"] == "scenario_not_found"


class TestSimulateRoute:
    def test_simulate_posted_debts(self, client, credit_card_stack, debt_payload):
        response = _post_json(
            client,
            "/debts/simulate",
            {"debts": debt_payload(credit_card_stack), "extra_payment": 200},
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["method"] == "avalanche"
        assert [row["name"] for row in data["order"]] == [
            "Store Card",
            "Chase Sapphire",
            "Capital One",
        ]
        assert data["months_to_payoff"] > 0
        assert data["horizon_exceeded"] is False
        assert data["message"].startswith("Debt payoff calculated! Pay off in ")

    def test_simulate_scenario_uses_default_extra(self, client):
        response = _post_json(client, "/debts/simulate", {"scenario": "creditCardStack"})

        assert response.status_code == 200
        assert response.get_json()["extra_payment"] == 200.0

    def test_success_emits_completion_event(self, client):
        calls = []
        events.subscribe(events.SIMULATION_COMPLETED, lambda: calls.append(True))

        _post_json(client, "/debts/simulate", {"scenario": "studentLoans"})

        assert calls == [True]

    def test_empty_debts_rejected_without_event(self, client):
        calls = []
        events.subscribe(events.SIMULATION_COMPLETED, lambda: calls.append(True))

        response = _post_json(client, "/debts/simulate", {"debts": []})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Add at least one debt."
        assert calls == []

    def test_zero_capacity_rejected(self, client):
        payload = {
            "debts": [
                {"name": "Card", "balance": 100, "interestRateAPR": 10, "minPayment": 0}
            ],
            "extra_payment": 0,
        }

        response = _post_json(client, "/debts/simulate", payload)

        assert response.status_code == 400
        assert response.get_json()["error"] == "Total payment must be greater than $0."

    def test_field_errors_are_reported(self, client):
        payload = {"debts": [{"name": "Card", "balance": "x", "apr": 10, "minPayment": 5}]}

        response = _post_json(client, "/debts/simulate", payload)

        assert response.status_code == 400
        assert "debts[0].balance" in response.get_json()["errors"]

    def test_oversized_amount_is_a_field_error(self, client):
        payload = {"debts": [{"name": "Card", "balance": "1e30", "apr": 10, "minPayment": 5}]}

        for url in ("/debts/simulate", "/debts/summary", "/debts/compare"):
            response = _post_json(client, url, payload)

            assert response.status_code == 400
            assert "debts[0].balance" in response.get_json()["errors"]

    def test_oversized_extra_payment_rejected(self, client):
        response = _post_json(
            client, "/debts/simulate", {"scenario": "creditCardStack", "extra_payment": "1e30"}
        )

        assert response.status_code == 400
        assert "extra_payment" in response.get_json()["errors"]

    def test_non_json_body(self, client):
        response = client.post("/debts/simulate", data="debts=1")

        assert response.status_code == 400

    def test_horizon_exceeded_is_flagged(self, client):
        payload = {
            "debts": [
                {"name": "Card", "balance": 10000, "interestRateAPR": 24, "minPayment": 100}
            ],
            "extra_payment": 0,
        }

        response = _post_json(client, "/debts/simulate", payload)

        assert response.status_code == 200
        data = response.get_json()
        assert data["horizon_exceeded"] is True
        assert data["months_to_payoff"] == 600
        assert data["message"].startswith("Payoff exceeds the 50-year planning horizon.")


class TestSummaryAndCompareRoutes:
    def test_summary(self, client):
        response = _post_json(client, "/debts/summary", {"scenario": "creditCardStack"})

        assert response.status_code == 200
        assert response.get_json() == {
            "count": 3,
            "total_debt": 5150.0,
            "total_min_payments": 165.0,
            "weighted_apr": 24.67,
        }

    def test_compare(self, client):
        response = _post_json(
            client, "/debts/compare", {"scenario": "creditCardStack", "extra_payment": 200}
        )

        assert response.status_code == 200
        data = response.get_json()
        assert [row["extra_payment"] for row in data["extra_payments"]] == [0.0, 50.0, 100.0, 200.0]
        assert data["extra_payments"][0]["interest_saved"] == 0
        assert data["strategies"]["recommended"] in {"avalanche", "snowball"}

    def test_compare_rejects_bad_extras(self, client):
        response = _post_json(
            client, "/debts/compare", {"scenario": "creditCardStack", "extras": ["lots"]}
        )

        assert response.status_code == 400

    def test_compare_rejects_oversized_extras(self, client):
        response = _post_json(
            client, "/debts/compare", {"scenario": "creditCardStack", "extras": ["1e30"]}
        )

        assert response.status_code == 400
        assert "extras" in response.get_json()["errors"]


class TestSimulationJobs:
    def test_queue_and_poll(self, client):
        response = _post_json(client, "/debts/simulate/jobs", {"scenario": "creditCardStack"})

        assert response.status_code == 202
        job = response.get_json()
        assert job["metadata"] == {"debts": 3, "method": "avalanche"}

        status = client.get(f"/debts/jobs/{job['id']}")
        assert status.status_code == 200
        body = status.get_json()
        assert body["status"] == "succeeded"
        assert body["result"]["order"][0]["name"] == "Store Card"

    def test_unpayable_input_rejected_before_queueing(self, client):
        payload = {
            "debts": [{"name": "Card", "balance": 100, "interestRateAPR": 10, "minPayment": 0}],
            "extra_payment": 0,
        }

        response = _post_json(client, "/debts/simulate/jobs", payload)

        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "Total payment must be greater than $0."
        assert body["errors"] == {"extra_payment": ["Total payment must be greater than $0."]}

    def test_duplicate_ids_rejected_before_queueing(self, client):
        row = {"id": "a", "name": "Card", "balance": 100, "interestRateAPR": 10, "minPayment": 10}

        response = _post_json(client, "/debts/simulate/jobs", {"debts": [row, dict(row)]})

        assert response.status_code == 400
        assert "Duplicate debt id" in response.get_json()["error"]

    def test_unknown_job(self, client):
        response = client.get("/debts/jobs/nope")

        assert response.status_code == 404
        assert response.get_json() == {"error": "job_not_found", "job_id": "nope"}
