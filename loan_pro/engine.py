"""Core calculation engine for the loan calculator.

This module implements the French (constant-payment) amortization method.
Given validated ``LoanParameters`` it derives the fixed monthly payment and,
when requested, unrolls the full amortization schedule installment by
installment. All arithmetic is done with ``Decimal``; currency amounts are
rounded with banker's rounding to the configured number of decimals.

The monthly rate is the *nominal* one (annual rate / 12), not the effective
``(1 + annual) ** (1 / 12) - 1``. The two diverge noticeably for high rates.
"""

from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import List, Tuple, Union

from .data_models import Installment, LoanParameters, LoanResult, ValidationError
from .utils import CURRENCY_CONTEXT, ONE, decimal_pow, round_currency

logger = logging.getLogger(__name__)

MAX_CURRENCY_DECIMALS = 6


def validate(p: LoanParameters) -> List[str]:
    """Return the messages of every domain rule ``p`` violates.

    An empty list means the parameters are valid.
    """
    errors: List[str] = []

    if p.principal <= 0:
        errors.append("Principal must be greater than 0.")

    if p.months <= 0:
        errors.append("Months must be greater than 0.")

    if p.annual_nominal_rate < 0:
        errors.append("Annual nominal rate cannot be negative.")

    if p.currency_decimals < 0 or p.currency_decimals > MAX_CURRENCY_DECIMALS:
        errors.append(f"Currency decimals must be between 0 and {MAX_CURRENCY_DECIMALS}.")

    return errors


def monthly_rate(annual_nominal_rate: Decimal) -> Decimal:
    """Convert an annual nominal rate into the nominal monthly rate.

    Example: 0.45 (45 % annual) gives 0.0375 (3.75 % per month).
    """
    return annual_nominal_rate / Decimal(12)


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, months: int) -> Decimal:
    """Return the unrounded constant installment for a loan.

    The formula is:

        payment = P * i / (1 - (1 + i)^(-n))

    where ``P`` is the principal, ``i`` the monthly rate and ``n`` the number
    of installments. When the rate is zero the payment is simply ``P / n``.
    """
    if rate_per_month == 0:
        return principal / Decimal(months)
    discount = decimal_pow(ONE + rate_per_month, -months)
    return principal * rate_per_month / (ONE - discount)


def _build_schedule(
    p: LoanParameters, rate_per_month: Decimal, payment: Decimal
) -> Tuple[List[Installment], Decimal, Decimal]:
    """Unroll the schedule and return it with the accumulated totals."""
    decimals = p.currency_decimals
    remaining = p.principal
    schedule: List[Installment] = []
    total_interest = Decimal("0")
    total_paid = Decimal("0")

    for k in range(1, p.months + 1):
        if rate_per_month == 0:
            interest = Decimal("0")
        else:
            interest = round_currency(remaining * rate_per_month, decimals)

        principal_part = payment - interest

        # Last installment absorbs the accumulated rounding drift so the
        # balance closes at exactly zero.
        if k == p.months:
            principal_part = round_currency(remaining, decimals)
            payment = round_currency(principal_part + interest, decimals)

        remaining = round_currency(remaining - principal_part, decimals)

        total_interest += interest
        total_paid += payment

        schedule.append(
            Installment(
                number=k,
                payment=payment,
                interest_portion=interest,
                principal_portion=principal_part,
                remaining_principal=remaining,
            )
        )

    return schedule, total_interest, total_paid


def calculate(
    p: LoanParameters, generate_schedule: bool = False
) -> Union[LoanResult, ValidationError]:
    """Calculate the fixed monthly payment and, optionally, the schedule.

    Parameters
    ----------
    p: LoanParameters
        Principal, nominal annual rate, number of months and currency decimals.
    generate_schedule: bool
        When true the result carries one ``Installment`` per month; otherwise
        only the totals are computed, without iterating.

    Returns
    -------
    LoanResult | ValidationError
        The result, or a ``ValidationError`` listing every violated rule. No
        partial computation is performed for invalid parameters. The same
        input gives the same result regardless of the caller's decimal context.
    """
    errors = validate(p)
    if errors:
        logger.debug("Rejected loan parameters %s: %s", p, errors)
        return ValidationError(errors=tuple(errors))

    with localcontext(CURRENCY_CONTEXT):
        return _calculate_valid(p, generate_schedule)


def _calculate_valid(p: LoanParameters, generate_schedule: bool) -> LoanResult:
    decimals = p.currency_decimals
    rate_per_month = monthly_rate(p.annual_nominal_rate)
    payment = round_currency(
        _calculate_annuity_payment(p.principal, rate_per_month, p.months), decimals
    )
    logger.debug("Monthly payment %s for %s over %d months", payment, p.principal, p.months)

    # Totals only: O(1), no schedule iteration.
    if not generate_schedule:
        total_paid = round_currency(payment * p.months, decimals)
        total_interest = round_currency(total_paid - p.principal, decimals)
        return LoanResult(
            monthly_payment=payment,
            total_paid=total_paid,
            total_interest=total_interest,
        )

    schedule, total_interest, total_paid = _build_schedule(p, rate_per_month, payment)
    logger.debug("Built schedule with %d installments", len(schedule))

    return LoanResult(
        monthly_payment=schedule[0].payment,
        total_paid=round_currency(total_paid, decimals),
        total_interest=round_currency(total_interest, decimals),
        schedule=tuple(schedule),
    )
