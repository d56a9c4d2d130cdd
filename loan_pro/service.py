"""Request/response mapping around the calculation engine.

The web handler and the CLI exchange plain mappings with the outside world.
This module converts an inbound request mapping (camelCase keys, as sent to
``POST /loans/calculate``) into ``LoanParameters``, runs the engine and turns
the ``LoanResult`` into a JSON-serialisable summary dictionary.
"""

from __future__ import annotations

from decimal import Decimal, DecimalException
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .data_models import Installment, LoanParameters, LoanResult, ValidationError
from .engine import calculate
from .utils import decimal_from_str, fits_precision

DEFAULT_CURRENCY_DECIMALS = 2


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"Missing required field: {key}")
    return data[key]


def _as_decimal(key: str, value: Any) -> Decimal:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValueError(f"Field {key} must be a number")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)):
        return decimal_from_str(str(value))
    raise ValueError(f"Field {key} must be a number")


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Field {key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Field {key} must be an integer") from exc
    raise ValueError(f"Field {key} must be an integer")


def request_from_mapping(
    data: Mapping[str, Any], default_decimals: int = DEFAULT_CURRENCY_DECIMALS
) -> Tuple[LoanParameters, bool]:
    """Build ``LoanParameters`` and the schedule flag from a request mapping.

    Raises ``ValueError`` when a field is missing, has the wrong type, or
    the principal has too many digits to be rounded to the requested
    decimals. Range checks are left to the engine's validation.
    """
    principal = _as_decimal("principal", _require(data, "principal"))
    rate = _as_decimal("annualNominalRate", _require(data, "annualNominalRate"))
    months = _as_int("months", _require(data, "months"))
    decimals_raw = data.get("currencyDecimals")
    decimals = default_decimals if decimals_raw is None else _as_int("currencyDecimals", decimals_raw)
    generate_schedule = data.get("generateSchedule", False)
    if not isinstance(generate_schedule, bool):
        raise ValueError("Field generateSchedule must be a boolean")
    if not fits_precision(principal, max(decimals, 0)):
        raise ValueError("Field principal exceeds the supported decimal precision")

    params = LoanParameters(
        principal=principal,
        annual_nominal_rate=rate,
        months=months,
        currency_decimals=decimals,
    )
    return params, generate_schedule


def installment_to_dict(entry: Installment) -> Dict[str, Any]:
    return {
        "number": entry.number,
        "payment": str(entry.payment),
        "interestPortion": str(entry.interest_portion),
        "principalPortion": str(entry.principal_portion),
        "remainingPrincipal": str(entry.remaining_principal),
    }


def result_to_summary(result: LoanResult) -> Dict[str, Any]:
    """Convert a ``LoanResult`` into a JSON-serialisable summary."""
    schedule: Optional[List[Dict[str, Any]]] = None
    if result.schedule is not None:
        schedule = [installment_to_dict(entry) for entry in result.schedule]
    return {
        "monthlyPayment": str(result.monthly_payment),
        "totalPaid": str(result.total_paid),
        "totalInterest": str(result.total_interest),
        "schedule": schedule,
    }


def calculate_summary(
    data: Mapping[str, Any], default_decimals: int = DEFAULT_CURRENCY_DECIMALS
) -> Union[Dict[str, Any], ValidationError]:
    """Run a calculation for a request mapping.

    Returns the summary dictionary, or the engine's ``ValidationError``
    unchanged so the caller can report every violated rule. Raises
    ``ValueError`` for malformed requests, including amounts whose results
    do not fit the currency context.
    """
    params, generate_schedule = request_from_mapping(data, default_decimals)
    try:
        outcome = calculate(params, generate_schedule)
    except DecimalException as exc:
        raise ValueError("Amounts exceed the supported decimal precision") from exc
    if isinstance(outcome, ValidationError):
        return outcome
    return result_to_summary(outcome)
