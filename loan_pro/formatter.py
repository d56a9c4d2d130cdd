"""Output helpers for the loan calculator.

This module provides simple functions to render loan results, amortization
schedules and validation failures in a tabular text format. Everything goes
through ``click.echo`` so output can be captured by click's test runner and
redirected to stderr where appropriate.
"""

from __future__ import annotations

from typing import Iterable

import click

from .data_models import Installment, LoanParameters, LoanResult, ValidationError


def _fmt(value, decimals: int) -> str:
    return f"{value:,.{decimals}f}"


def print_summary(params: LoanParameters, result: LoanResult) -> None:
    """Print the totals of a loan in a human-readable format."""
    d = params.currency_decimals
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Principal          : {_fmt(params.principal, d)}")
    click.echo(f"Annual rate        : {params.annual_nominal_rate * 100:.4f}% (nominal)")
    click.echo(f"Term               : {params.months} months")
    click.echo(f"Monthly payment    : {_fmt(result.monthly_payment, d)}")
    click.echo(f"Total paid         : {_fmt(result.total_paid, d)}")
    click.echo(f"Total interest     : {_fmt(result.total_interest, d)}")
    if result.schedule:
        last = result.schedule[-1]
        # Only worth showing when the terminal correction changed the amount
        if last.payment != result.monthly_payment:
            click.echo(f"Last payment       : {_fmt(last.payment, d)}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[Installment], decimals: int = 2) -> None:
    """Print the amortization schedule as a simple tab-separated table."""
    headers = ["Number", "Payment", "Interest", "Principal", "Remaining"]
    click.echo("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.number),
            f"{entry.payment:.{decimals}f}",
            f"{entry.interest_portion:.{decimals}f}",
            f"{entry.principal_portion:.{decimals}f}",
            f"{entry.remaining_principal:.{decimals}f}",
        ]
        click.echo("\t".join(row))


def print_errors(failure: ValidationError) -> None:
    """Print each violated rule on its own line to stderr."""
    click.echo("Validation failed", err=True)
    for message in failure.errors:
        click.echo(f"  - {message}", err=True)
