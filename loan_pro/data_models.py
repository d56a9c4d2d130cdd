"""Data models for the loan calculator.

This module defines the immutable values exchanged with the calculation
engine: the loan parameters supplied by the caller, the individual
installments of an amortization schedule, the overall loan result and the
validation failure returned when the parameters break a domain rule. All of
them are frozen dataclasses; they are created fresh for every calculation
and never mutated afterwards.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of a loan calculation.

    Attributes
    ----------
    principal: Decimal
        Amount financed. Must be strictly greater than zero.
    annual_nominal_rate: Decimal
        Nominal annual rate as a fraction (``Decimal("0.45")`` is 45 %).
        Must not be negative.
    months: int
        Number of monthly installments. Must be strictly greater than zero.
    currency_decimals: int
        Decimal places used when rounding currency amounts, between 0 and 6.
    """

    principal: Decimal
    annual_nominal_rate: Decimal
    months: int
    currency_decimals: int = 2


@dataclass(frozen=True)
class Installment:
    """One row of the amortization schedule.

    ``payment`` always equals ``interest_portion + principal_portion``.
    ``remaining_principal`` is the balance left after this installment.
    """

    number: int
    payment: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_principal: Decimal


@dataclass(frozen=True)
class LoanResult:
    """Outcome of a loan calculation.

    ``schedule`` is ``None`` unless the caller asked for the full schedule.
    """

    monthly_payment: Decimal
    total_paid: Decimal
    total_interest: Decimal
    schedule: Optional[Tuple[Installment, ...]] = None


@dataclass(frozen=True)
class ValidationError:
    """Parameters rejected by one or more domain rules.

    ``errors`` holds one message per violated rule, in evaluation order.
    """

    errors: Tuple[str, ...]

    def __str__(self) -> str:
        return "Domain validation failed: " + " | ".join(self.errors)
