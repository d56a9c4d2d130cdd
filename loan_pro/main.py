"""Command-line interface for the loan calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute the totals of a French-amortization loan or its
full installment schedule. Results can be printed to the terminal or exported
to JSON/CSV files.

Examples:

    loan-pro summary -p 100k -r 45% -t 12
    loan-pro schedule -p 123456.78 -r 0.1234 -t 37 --output plan.csv
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from decimal import DecimalException
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .data_models import LoanParameters, LoanResult, ValidationError
from .engine import calculate
from .formatter import print_errors, print_schedule, print_summary
from .service import result_to_summary
from .utils import parse_amount, parse_rate

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parameters_from_options(
    principal: str,
    rate: str,
    months: int,
    decimals: int,
) -> LoanParameters:
    """Turn raw CLI option values into ``LoanParameters``.

    Range checks are left to the engine so that every violation is reported
    together; only unparseable numbers are rejected here.
    """
    try:
        principal_value = parse_amount(principal)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--principal")
    try:
        rate_value = parse_rate(rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rate")
    return LoanParameters(
        principal=principal_value,
        annual_nominal_rate=rate_value,
        months=months,
        currency_decimals=decimals,
    )


def run_calculation(params: LoanParameters, generate_schedule: bool) -> LoanResult:
    """Run the engine, exiting with status 1 on a validation failure."""
    try:
        outcome = calculate(params, generate_schedule)
    except DecimalException as exc:
        raise click.ClickException("Amounts exceed the supported decimal precision") from exc
    if isinstance(outcome, ValidationError):
        logger.info("Validation failed: %s", outcome.errors)
        print_errors(outcome)
        sys.exit(1)
    return outcome


def export_to_json(path: Path, result: LoanResult) -> None:
    """Export totals (and the schedule, when present) to a JSON file."""
    summary: Dict[str, Any] = result_to_summary(result)
    if summary["schedule"] is None:
        summary.pop("schedule")
    with path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)


def export_to_csv(path: Path, result: LoanResult) -> None:
    """Export the schedule to a CSV file."""
    header = [
        "Number",
        "Payment",
        "Interest_Portion",
        "Principal_Portion",
        "Remaining_Principal",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in result.schedule or ():
            writer.writerow(
                [
                    e.number,
                    str(e.payment),
                    str(e.interest_portion),
                    str(e.principal_portion),
                    str(e.remaining_principal),
                ]
            )


@click.group()
@click.option(
    "--log-level",
    "log_level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """A command-line loan calculator using the French amortization method."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 100000, 100k)")
@click.option("--rate", "-r", "rate", required=True, help="Annual nominal rate as a fraction (0.45) or percentage (45%)")
@click.option("--term", "-t", "months", required=True, type=int, help="Loan term in months")
@click.option("--decimals", "decimals", type=int, default=2, show_default=True, help="Currency decimal places (0-6)")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: str, months: int, decimals: int, output: Optional[str]) -> None:
    """Compute and print only the payment and totals for a loan."""
    params = build_parameters_from_options(principal, rate, months, decimals)
    result = run_calculation(params, generate_schedule=False)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        export_to_json(path, result)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(params, result)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 100000, 100k)")
@click.option("--rate", "-r", "rate", required=True, help="Annual nominal rate as a fraction (0.45) or percentage (45%)")
@click.option("--term", "-t", "months", required=True, type=int, help="Loan term in months")
@click.option("--decimals", "decimals", type=int, default=2, show_default=True, help="Currency decimal places (0-6)")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(principal: str, rate: str, months: int, decimals: int, output: Optional[str]) -> None:
    """Compute and print the full amortization schedule."""
    params = build_parameters_from_options(principal, rate, months, decimals)
    result = run_calculation(params, generate_schedule=True)
    if output:
        path = Path(output)
        suffix = path.suffix.lower()
        if suffix == ".json":
            export_to_json(path, result)
        elif suffix == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
    else:
        print_summary(params, result)
        print_schedule(result.schedule or (), params.currency_decimals)


if __name__ == "__main__":
    cli()
