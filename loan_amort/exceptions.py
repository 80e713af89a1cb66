"""Errors raised by the amortization engine.

All errors derive from ``AmortizationError`` which itself is a ``ValueError``,
so callers that already guard numeric parsing with ``except ValueError`` also
catch engine rejections.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class AmortizationError(ValueError):
    """Base class for every error reported by the engine."""

    kind = "amortization_error"


class InvalidInputError(AmortizationError):
    """An input lies outside its documented domain."""

    kind = "invalid_input"

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} ({value!r}): {reason}")


class NonAmortizingLoanError(AmortizationError):
    """The payment does not retire any meaningful part of the principal."""

    kind = "non_amortizing_loan"

    def __init__(self, payment: Decimal, interest: Decimal) -> None:
        self.payment = payment
        self.interest = interest
        super().__init__(
            f"Monthly payment {payment:.2f} does not cover the accruing interest "
            f"{interest:.2f}; the balance would never decrease"
        )


class LoanNeverPaysOffError(AmortizationError):
    """The simulation reached its month limit with principal still owed."""

    kind = "loan_never_pays_off"

    def __init__(self, months: int) -> None:
        self.months = months
        super().__init__(f"Loan is not paid off after {months} months")
