"""Output helpers for the amortization calculator.

This module renders engine results for people and for other programs: plain
text tables for the terminal, month labels and series for the balance chart,
and JSON-ready dictionaries for export and the web API. We rely only on
built-in printing and string formatting here.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List

from .data_models import AmortizationPoint, AmortizationResult, ExtraPaymentSavings


def format_currency(value: Decimal) -> str:
    """Format an amount as whole US dollars, e.g. ``$1,199``."""
    if value < 0:
        return f"-${-value:,.0f}"
    return f"${value:,.0f}"


def format_axis_label(month: int) -> str:
    """Return the x-axis label for ``month``: ``"2"`` for whole years, ``"2.3"`` otherwise."""
    if month == 0:
        return "0"
    years, months = divmod(month, 12)
    if months == 0:
        return f"{years}"
    return f"{years}.{months}"


def format_tooltip_label(month: int, is_last: bool) -> str:
    """Return the hover label for a schedule point.

    The first point is the start of the loan and the last one its end; every
    other point is described as a year and month offset from the start.
    """
    if month == 0:
        return "Start of loan"
    if is_last:
        return "End of loan"
    years, months = divmod(month, 12)
    if months == 0:
        return f"Year {years}"
    return f"Year {years}, Month {months}"


def build_chart_series(result: AmortizationResult) -> Dict[str, List[Any]]:
    """Convert the schedule into the two series drawn on the balance chart."""
    schedule = result.amortization_schedule
    last_index = len(schedule) - 1
    return {
        "labels": [
            {
                "display": format_axis_label(point.month),
                "tooltip": format_tooltip_label(point.month, index == last_index),
            }
            for index, point in enumerate(schedule)
        ],
        "principal_balance": [float(point.principal_balance) for point in schedule],
        "interest_paid": [float(point.interest_paid) for point in schedule],
    }


def point_to_dict(point: AmortizationPoint) -> Dict[str, Any]:
    return {
        "month": point.month,
        "principal_balance": float(point.principal_balance),
        "interest_paid": float(point.interest_paid),
    }


def result_to_dict(result: AmortizationResult) -> Dict[str, Any]:
    """Convert a result into JSON-serialisable primitives."""
    return {
        "monthly_payment": float(result.monthly_payment),
        "total_interest": float(result.total_interest),
        "total_payment": float(result.total_payment),
        "actual_term_years": float(result.actual_term_years),
        "payoff_months": result.payoff_months,
        "amortization_schedule": [point_to_dict(p) for p in result.amortization_schedule],
    }


def savings_to_dict(savings: ExtraPaymentSavings) -> Dict[str, Any]:
    return {
        "baseline_total_interest": float(savings.baseline.total_interest),
        "total_interest": float(savings.accelerated.total_interest),
        "interest_saved": float(savings.interest_saved),
        "baseline_term_years": float(savings.baseline.actual_term_years),
        "actual_term_years": float(savings.accelerated.actual_term_years),
        "months_saved": savings.months_saved,
    }


def print_summary(result: AmortizationResult, extra_monthly_payment: Decimal = Decimal("0")) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {result.principal:.2f}")
    print(f"Monthly payment    : {result.monthly_payment:.2f}")
    if extra_monthly_payment:
        print(f"Extra payment      : {extra_monthly_payment:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total payment      : {result.total_payment:.2f}")
    print(f"Loan term          : {result.actual_term_years:.1f} years ({result.payoff_months} payments)")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationPoint]) -> None:
    """Print the amortization schedule as a simple tab-separated table."""
    headers = ["Month", "Label", "Balance", "InterestPaid"]
    print("\t".join(headers))
    for point in schedule:
        row = [
            str(point.month),
            format_axis_label(point.month),
            f"{point.principal_balance:.2f}",
            f"{point.interest_paid:.2f}",
        ]
        print("\t".join(row))


def print_comparison(savings: ExtraPaymentSavings) -> None:
    """Print the loan without and with its extra payment side by side.

    The difference column is baseline minus accelerated, so a positive value
    is what the extra payment saves.
    """
    baseline = savings.baseline
    accelerated = savings.accelerated
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':20s} {'No extra':>15s} {'With extra':>15s} {'Saved':>15s}")
    rows = [
        ("total_interest", baseline.total_interest, accelerated.total_interest),
        ("total_payment", baseline.total_payment, accelerated.total_payment),
        ("term_years", baseline.actual_term_years, accelerated.actual_term_years),
    ]
    for key, v1, v2 in rows:
        print(f"{key:20s} {v1:15.2f} {v2:15.2f} {v1 - v2:15.2f}")
    print(f"{'payments':20s} {baseline.payoff_months:15d} {accelerated.payoff_months:15d} {savings.months_saved:15d}")
    print("=" * 72)
