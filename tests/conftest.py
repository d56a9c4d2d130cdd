"""Shared loan fixtures.

The 45 % / 12-month loan is the reference case for the nominal monthly rate
(0.45 / 12 = 3.75 %). The 123,456.78 / 12.34 % / 37-month loan is chosen so
that rounding drift accumulates over the schedule.
"""

import pytest
from decimal import Decimal

from loan_pro.data_models import LoanParameters


@pytest.fixture
def zero_rate_params() -> LoanParameters:
    """100K over 10 months at 0 %, divides exactly."""
    return LoanParameters(
        principal=Decimal("100000"),
        annual_nominal_rate=Decimal("0"),
        months=10,
        currency_decimals=2,
    )


@pytest.fixture
def nominal_rate_params() -> LoanParameters:
    """100K over 12 months at 45 % nominal annual."""
    return LoanParameters(
        principal=Decimal("100000"),
        annual_nominal_rate=Decimal("0.45"),
        months=12,
        currency_decimals=2,
    )


@pytest.fixture
def drift_params() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("123456.78"),
        annual_nominal_rate=Decimal("0.1234"),
        months=37,
        currency_decimals=2,
    )
