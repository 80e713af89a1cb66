"""Data models for the amortization calculator.

This module defines the dataclasses exchanged between the engine and its
callers: the validated loan inputs, a single point of the amortization
schedule, the computed result and the comparison of a loan with and without
an extra monthly payment. All of them are frozen; a result is never modified
after the engine has built it.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


@dataclass(frozen=True)
class LoanInputs:
    """The four numbers a caller supplies to the engine.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed. Zero is allowed and yields an empty schedule.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent, e.g. ``Decimal("6")``.
    term_years: Decimal
        Nominal term in years, at least 0.5. Fractional values are rounded to
        the nearest whole month.
    extra_monthly_payment: Decimal
        Amount paid on top of the required payment every month and applied
        directly to principal.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_years: Decimal
    extra_monthly_payment: Decimal = Decimal("0")


@dataclass(frozen=True)
class AmortizationPoint:
    """State of the loan after ``month`` payments.

    Month 0 is the starting point before any payment; ``interest_paid`` is
    cumulative.
    """

    month: int
    principal_balance: Decimal
    interest_paid: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    monthly_payment: Decimal  # required payment for the nominal term, without extra
    total_interest: Decimal
    total_payment: Decimal
    amortization_schedule: Tuple[AmortizationPoint, ...]
    actual_term_years: Decimal

    @property
    def principal(self) -> Decimal:
        return self.amortization_schedule[0].principal_balance

    @property
    def payoff_months(self) -> int:
        """Number of monthly payments until the balance reached zero."""
        return self.amortization_schedule[-1].month


@dataclass(frozen=True)
class ExtraPaymentSavings:
    """A loan computed with and without its extra monthly payment."""

    baseline: AmortizationResult
    accelerated: AmortizationResult

    @property
    def interest_saved(self) -> Decimal:
        return self.baseline.total_interest - self.accelerated.total_interest

    @property
    def months_saved(self) -> int:
        return self.baseline.payoff_months - self.accelerated.payoff_months
