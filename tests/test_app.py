import logging
from decimal import Decimal

import pytest

from loan_pro_web.app import create_app


@pytest.fixture
def client():
    app = create_app({"TESTING": True})
    return app.test_client()


class TestIndex:
    def test_liveness(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.get_data(as_text=True) == "LoanPro API up"


class TestCalculateEndpoint:
    def test_totals_only(self, client):
        response = client.post(
            "/loans/calculate",
            json={"principal": 100000, "annualNominalRate": 0, "months": 10},
        )
        assert response.status_code == 200
        body = response.get_json()
        assert body["monthlyPayment"] == "10000.00"
        assert body["totalPaid"] == "100000.00"
        assert body["totalInterest"] == "0.00"
        assert body["schedule"] is None

    def test_with_schedule(self, client):
        response = client.post(
            "/loans/calculate",
            data='{"principal": 123456.78, "annualNominalRate": 0.1234, "months": 37, "generateSchedule": true}',
            content_type="application/json",
        )
        assert response.status_code == 200
        body = response.get_json()
        assert len(body["schedule"]) == 37
        assert body["schedule"][0]["payment"] == body["monthlyPayment"]
        assert body["schedule"][-1]["remainingPrincipal"] == "0.00"

    def test_validation_problem(self, client):
        response = client.post(
            "/loans/calculate",
            json={"principal": 0, "annualNominalRate": -0.1, "months": 0},
        )
        assert response.status_code == 400
        body = response.get_json()
        assert body["title"] == "Validation failed"
        assert body["status"] == 400
        assert body["errors"] == {
            "Principal must be greater than 0.": ["Invalid"],
            "Months must be greater than 0.": ["Invalid"],
            "Annual nominal rate cannot be negative.": ["Invalid"],
        }

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2, 3]",
            '{"principal": 1000, "months": 12}',
            '{"principal": 1000, "annualNominalRate": 0.1, "months": "twelve"}',
        ],
    )
    def test_malformed_request(self, client, payload):
        response = client.post("/loans/calculate", data=payload, content_type="application/json")
        assert response.status_code == 400
        body = response.get_json()
        assert body["title"] == "Malformed request"
        assert body["detail"]

    def test_default_decimals_from_config(self):
        app = create_app({"TESTING": True, "DEFAULT_CURRENCY_DECIMALS": 0})
        response = app.test_client().post(
            "/loans/calculate",
            json={"principal": 1000, "annualNominalRate": 0, "months": 3},
        )
        assert response.status_code == 200
        assert response.get_json()["monthlyPayment"] == "333"

    def test_amounts_are_exact_on_the_wire(self, client):
        response = client.post(
            "/loans/calculate",
            data='{"principal": 123456789012.123456, "annualNominalRate": 0.1, "months": 12, "currencyDecimals": 6}',
            content_type="application/json",
        )
        assert response.status_code == 200
        body = response.get_json()
        assert isinstance(body["totalPaid"], str)
        assert len(body["totalPaid"].split(".")[1]) == 6
        assert Decimal(body["totalPaid"]) - Decimal("123456789012.123456") == Decimal(body["totalInterest"])

    @pytest.mark.parametrize(
        "payload",
        [
            '{"principal": 1e30, "annualNominalRate": 0.1, "months": 12}',
            '{"principal": 1000, "annualNominalRate": 1e25, "months": 12}',
        ],
    )
    def test_amounts_beyond_precision(self, client, payload):
        response = client.post("/loans/calculate", data=payload, content_type="application/json")
        assert response.status_code == 400
        body = response.get_json()
        assert body["title"] == "Malformed request"
        assert "precision" in body["detail"]


class TestCreateApp:
    def test_does_not_touch_package_logger_level(self):
        package_logger = logging.getLogger("loan_pro")
        before = package_logger.level
        create_app({"TESTING": True, "LOG_LEVEL": "DEBUG"})
        assert package_logger.level == before

    def test_log_level_from_config(self):
        app = create_app({"TESTING": True, "LOG_LEVEL": "DEBUG"})
        assert app.config["LOG_LEVEL"] == "DEBUG"
