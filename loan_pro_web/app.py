from __future__ import annotations

import json
import logging
import os
from decimal import Decimal

from flask import Flask, jsonify, request

from loan_pro.data_models import ValidationError
from loan_pro.service import calculate_summary

logger = logging.getLogger(__name__)


def _validation_problem(failure: ValidationError):
    body = {
        "title": "Validation failed",
        "status": 400,
        "errors": {message: ["Invalid"] for message in failure.errors},
    }
    return jsonify(body), 400


def _malformed_request(detail: str):
    body = {"title": "Malformed request", "status": 400, "detail": detail}
    return jsonify(body), 400


def _parse_body() -> dict:
    """Decode the JSON request body, keeping every number as ``Decimal``."""
    raw = request.get_data(as_text=True)
    try:
        data = json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Request body is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config["LOG_LEVEL"] = os.environ.get("LOAN_PRO_LOG_LEVEL", "INFO")
    app.config["DEFAULT_CURRENCY_DECIMALS"] = int(os.environ.get("LOAN_PRO_DEFAULT_DECIMALS", "2"))
    if config:
        app.config.update(config)

    @app.get("/")
    def index():
        return "LoanPro API up", 200, {"Content-Type": "text/plain; charset=utf-8"}

    @app.post("/loans/calculate")
    def calculate_loan():
        try:
            data = _parse_body()
            outcome = calculate_summary(data, app.config["DEFAULT_CURRENCY_DECIMALS"])
        except ValueError as exc:
            logger.info("Rejected malformed request: %s", exc)
            return _malformed_request(str(exc))

        if isinstance(outcome, ValidationError):
            logger.info("Rejected loan request: %s", " | ".join(outcome.errors))
            return _validation_problem(outcome)
        return jsonify(outcome)

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    print("Starting LoanPro API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
