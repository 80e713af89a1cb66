"""Command-line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi-command interface.
Users can compute full amortization schedules, view summaries or see what an
extra monthly payment saves. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click

from .data_models import AmortizationResult, LoanInputs
from .engine import compare_extra_payment, compute_for_inputs
from .exceptions import AmortizationError
from .formatter import print_comparison, print_schedule, print_summary, result_to_dict, savings_to_dict
from .utils import MIN_TERM_YEARS, decimal_from_str

logger = logging.getLogger(__name__)

MAX_PRINTED_ROWS = 120


def parse_amount(value: str) -> Decimal:
    """Parse a non-negative amount with optional suffixes.

    Accepts plain numbers ("200000", "200,000") and shorthand with ``k``/``m``
    suffixes (e.g., "200k" meaning 200_000).
    """
    value = value.strip().lower()
    factor = Decimal("1")
    if value.endswith("k"):
        factor = Decimal("1000")
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal("1000000")
        value = value[:-1]
    try:
        amount = decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")
    if amount < 0:
        raise click.BadParameter(f"Amount must not be negative: {value}")
    return amount


def parse_rate(value: str) -> Decimal:
    """Parse an annual percentage rate such as "6", "6.5" or "6.5%"."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        rate = decimal_from_str(value)
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}")
    if rate < 0:
        raise click.BadParameter(f"Rate must not be negative: {value}")
    return rate


def build_inputs_from_options(
    principal: str,
    rate: str,
    term: float,
    extra_payment: Optional[str] = None,
) -> LoanInputs:
    term_value = decimal_from_str(str(term))
    if term_value < MIN_TERM_YEARS:
        raise click.BadParameter(f"Loan term must be at least {MIN_TERM_YEARS} years")
    return LoanInputs(
        principal=parse_amount(principal),
        annual_rate_percent=parse_rate(rate),
        term_years=term_value,
        extra_monthly_payment=parse_amount(extra_payment) if extra_payment else Decimal("0"),
    )


def _run(compute: Callable[[LoanInputs], Any], inputs: LoanInputs) -> Any:
    try:
        return compute(inputs)
    except AmortizationError as exc:
        logger.debug("Engine rejected %s: %s", inputs, exc)
        raise click.ClickException(str(exc))


def export_to_json(path: Path, result: AmortizationResult, inputs: LoanInputs) -> None:
    """Export inputs, summary and schedule to a JSON file."""
    data: Dict[str, Any] = {
        "inputs": {
            "principal": float(inputs.principal),
            "annual_rate_percent": float(inputs.annual_rate_percent),
            "term_years": float(inputs.term_years),
            "extra_monthly_payment": float(inputs.extra_monthly_payment),
        },
        **result_to_dict(result),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export the schedule to a CSV file."""
    header = ["Month", "Principal_Balance", "Interest_Paid"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for point in result.amortization_schedule:
            writer.writerow([point.month, float(point.principal_balance), float(point.interest_paid)])


def loan_options(func: Callable) -> Callable:
    """Attach the loan input options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount, e.g. 200000 or 200k"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option(
            "--term",
            "-t",
            "term",
            required=True,
            type=click.FloatRange(min=float(MIN_TERM_YEARS)),
            help="Loan term in years (at least 0.5)",
        ),
        click.option("--extra", "-e", "extra_payment", help="Extra monthly payment applied to principal"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line loan amortization calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(principal: str, rate: str, term: float, extra_payment: Optional[str], output: Optional[str]) -> None:
    """Compute and print the full amortization schedule."""
    inputs = build_inputs_from_options(principal, rate, term, extra_payment)
    result = _run(compute_for_inputs, inputs)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result, inputs)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result, inputs.extra_monthly_payment)
    points = result.amortization_schedule
    # Limit schedule length printed to avoid flooding the terminal
    if len(points) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(points)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        print_schedule(points[:MAX_PRINTED_ROWS])
    else:
        print_schedule(points)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: str, term: float, extra_payment: Optional[str], output: Optional[str]) -> None:
    """Compute and print only the summary metrics for a loan."""
    inputs = build_inputs_from_options(principal, rate, term, extra_payment)
    result = _run(compute_for_inputs, inputs)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        data = {k: v for k, v in result_to_dict(result).items() if k != "amortization_schedule"}
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result, inputs.extra_monthly_payment)


@cli.command()
@loan_options
@click.option("--json", "as_json", is_flag=True, help="Print the comparison as JSON")
def compare(principal: str, rate: str, term: float, extra_payment: Optional[str], as_json: bool) -> None:
    """Compare the loan without and with the extra monthly payment.

    Example:

        loan-amort compare -p 200k -r 6 -t 30 -e 500
    """
    inputs = build_inputs_from_options(principal, rate, term, extra_payment)
    result = _run(compute_for_inputs, inputs)
    try:
        savings = compare_extra_payment(inputs)
    except AmortizationError as exc:
        # The loan without the extra payment never pays off; report the requested loan on its own.
        logger.debug("No baseline for %s: %s", inputs, exc)
        if as_json:
            data = {k: v for k, v in result_to_dict(result).items() if k != "amortization_schedule"}
            click.echo(json.dumps({"baseline_error": exc.kind, "message": str(exc), **data}, indent=2))
        else:
            click.echo(f"Without the extra payment the loan never pays off: {exc}")
            print_summary(result, inputs.extra_monthly_payment)
        return
    if as_json:
        click.echo(json.dumps(savings_to_dict(savings), indent=2))
    else:
        print_comparison(savings)


if __name__ == "__main__":
    cli()
