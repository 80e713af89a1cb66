"""Tests for the Flask form page and JSON API."""

import pytest

from loan_amort_web.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_index_renders_empty_form(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Loan Repayment Calculator" in body
    assert "Loan Summary" not in body


def test_form_submission_shows_summary(client) -> None:
    response = client.post("/", data={"principal": "200,000", "rate": "6", "term": "30", "extra_payment": ""})
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Loan Summary" in body
    assert "$1,199" in body
    assert "30.0 years" in body
    assert "Start of loan" in body
    assert "241 more rows truncated." in body
    assert "Interest saved" not in body


def test_form_submission_with_extra_payment_shows_savings(client) -> None:
    response = client.post("/", data={"principal": "200000", "rate": "6", "term": "30", "extra_payment": "500"})
    body = response.get_data(as_text=True)
    assert "Interest saved" in body
    assert "Term reduction" in body


def test_form_rejects_short_term(client) -> None:
    response = client.post("/", data={"principal": "200000", "rate": "6", "term": "0.2"})
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "at least 0.5" in body
    assert "Loan Summary" not in body


def test_form_reports_non_amortizing_loan(client) -> None:
    response = client.post("/", data={"principal": "200000", "rate": "100", "term": "30"})
    body = response.get_data(as_text=True)
    assert "does not cover the accruing interest" in body


def test_api_get(client) -> None:
    response = client.get(
        "/api/amortization",
        query_string={"principal": "200000", "annual_rate_percent": "6", "term_years": "30"},
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["monthly_payment"] == pytest.approx(1199.10, abs=0.01)
    assert len(data["amortization_schedule"]) == 361
    assert data["actual_term_years"] == 30.0
    assert data["savings"] is None
    assert data["chart"]["labels"][-1]["tooltip"] == "End of loan"


def test_api_post_json_with_extra_payment(client) -> None:
    response = client.post(
        "/api/amortization",
        json={"principal": 200000, "annual_rate_percent": 6, "term_years": 30, "extra_monthly_payment": 500},
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["payoff_months"] < 360
    assert data["savings"]["months_saved"] == 360 - data["payoff_months"]
    assert data["savings"]["interest_saved"] > 0


def test_api_zero_principal(client) -> None:
    response = client.post("/api/amortization", json={"principal": 0, "annual_rate_percent": 5, "term_years": 10})
    data = response.get_json()
    assert data["amortization_schedule"] == [{"month": 0, "principal_balance": 0.0, "interest_paid": 0.0}]
    assert data["monthly_payment"] == 0.0


@pytest.mark.parametrize(
    "payload, kind",
    [
        ({"principal": 200000, "annual_rate_percent": 100, "term_years": 30}, "non_amortizing_loan"),
        ({"annual_rate_percent": 6, "term_years": 30}, "invalid_input"),
        ({"principal": "abc", "annual_rate_percent": 6, "term_years": 30}, "invalid_input"),
        ({"principal": -1, "annual_rate_percent": 6, "term_years": 30}, "invalid_input"),
        ({"principal": 1000, "annual_rate_percent": 6, "term_years": 0}, "invalid_input"),
    ],
)
def test_api_errors_return_400(client, payload, kind) -> None:
    response = client.post("/api/amortization", json=payload)
    assert response.status_code == 400
    data = response.get_json()
    assert data["error"] == kind
    assert data["message"]


def test_calculator_alias_route(client) -> None:
    response = client.post(
        "/loan-repayment-calculator", data={"principal": "200000", "rate": "6", "term": "30"}
    )
    assert response.status_code == 200
    assert "$1,199" in response.get_data(as_text=True)


def test_form_keeps_result_when_loan_without_extra_never_pays_off(client) -> None:
    """At 100 % over 30 years only the extra payment makes the loan amortize."""
    response = client.post("/", data={"principal": "200000", "rate": "100", "term": "30", "extra_payment": "1000"})
    body = response.get_data(as_text=True)
    assert "Loan Summary" in body
    assert "Interest saved" not in body
    assert 'class="error"' not in body


def test_api_keeps_result_when_loan_without_extra_never_pays_off(client) -> None:
    response = client.post(
        "/api/amortization",
        json={"principal": 200000, "annual_rate_percent": 100, "term_years": 30, "extra_monthly_payment": 1000},
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["savings"] is None
    assert data["payoff_months"] < 360
    assert data["amortization_schedule"][-1]["principal_balance"] == 0.0


def test_api_rejects_terms_beyond_limit(client) -> None:
    response = client.get(
        "/api/amortization",
        query_string={"principal": "1000000", "annual_rate_percent": "0", "term_years": "800000"},
    )
    assert response.status_code == 400
    data = response.get_json()
    assert data["error"] == "invalid_input"
    assert "at most 100" in data["message"]


def test_form_rejects_terms_beyond_limit(client) -> None:
    response = client.post("/", data={"principal": "1000", "rate": "5", "term": "101"})
    body = response.get_data(as_text=True)
    assert "at most 100" in body
    assert "Loan Summary" not in body


def test_importing_app_leaves_logging_alone(monkeypatch) -> None:
    import importlib
    import logging

    import loan_amort_web.app as web_app

    def fail(**kwargs):
        raise AssertionError("logging configured at import")

    monkeypatch.setattr(logging, "basicConfig", fail)
    importlib.reload(web_app)
