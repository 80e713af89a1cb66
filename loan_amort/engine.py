"""Core calculation engine for the amortization calculator.

This module implements the financial logic for a fixed-rate annuity loan with
an optional extra monthly payment. Given the principal, the annual rate, the
nominal term and the extra payment it derives the required monthly payment and
simulates the loan month by month until the balance reaches zero. Results are
returned as an immutable ``AmortizationResult``.

The engine is a pure function of its inputs; it keeps no state between calls.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import List, Union

from .data_models import AmortizationPoint, AmortizationResult, ExtraPaymentSavings, LoanInputs
from .exceptions import InvalidInputError, LoanNeverPaysOffError, NonAmortizingLoanError
from .utils import MIN_TERM_YEARS

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

Number = Union[int, float, str, Decimal]

# A balance this small relative to the payment is rounding residue of the
# 28-digit context, not principal still owed.
RESIDUE_FRACTION = Decimal("1e-15")
# A payment retiring less than this share of the balance is effectively
# interest-only at 28 significant digits.
MIN_PRINCIPAL_FRACTION = Decimal("1e-10")


def _to_decimal(value: Number, field: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "expected a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(field, value, "expected a number") from exc
    if not result.is_finite():
        raise InvalidInputError(field, value, "must be finite")
    return result


def _number_of_payments(term_years: Decimal) -> int:
    """Return the nominal number of monthly payments, rounded half up, at least 1."""
    months = (term_years * 12).to_integral_value(rounding=ROUND_HALF_UP)
    return max(1, int(months))


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_month == 0:
        return principal / Decimal(term)
    return principal * rate_per_month / (1 - (1 + rate_per_month) ** -term)


def compute_amortization(
    principal: Number,
    annual_rate_percent: Number,
    term_years: Number,
    extra_monthly_payment: Number = 0,
) -> AmortizationResult:
    """Compute the amortization schedule and totals for a loan.

    Parameters
    ----------
    principal: number
        Amount borrowed, non-negative.
    annual_rate_percent: number
        Nominal annual rate in percent, non-negative.
    term_years: number
        Nominal term in years, at least 0.5.
    extra_monthly_payment: number
        Additional amount applied to principal each month, non-negative.

    Returns
    -------
    AmortizationResult
        ``monthly_payment`` is the base payment for the nominal term. The
        schedule holds one point per month from month 0 until the month the
        balance reaches zero, which may be earlier than the nominal term when
        an extra payment is made.

    Raises
    ------
    InvalidInputError
        If an input is outside its domain.
    NonAmortizingLoanError
        If the payment does not exceed the interest accruing each month.
    LoanNeverPaysOffError
        If the balance is still positive after twice the nominal number of
        payments.
    """
    principal_dec = _to_decimal(principal, "principal")
    rate = _to_decimal(annual_rate_percent, "annual_rate_percent")
    term = _to_decimal(term_years, "term_years")
    extra = _to_decimal(extra_monthly_payment, "extra_monthly_payment")

    if principal_dec < 0:
        raise InvalidInputError("principal", principal, "must not be negative")
    if rate < 0:
        raise InvalidInputError("annual_rate_percent", annual_rate_percent, "must not be negative")
    if term < MIN_TERM_YEARS:
        raise InvalidInputError("term_years", term_years, f"must be at least {MIN_TERM_YEARS} years")
    if extra < 0:
        raise InvalidInputError("extra_monthly_payment", extra_monthly_payment, "must not be negative")

    zero = Decimal("0")
    if principal_dec == 0:
        return AmortizationResult(
            monthly_payment=zero,
            total_interest=zero,
            total_payment=zero,
            amortization_schedule=(AmortizationPoint(month=0, principal_balance=zero, interest_paid=zero),),
            actual_term_years=zero,
        )

    # Convert annual rate from percent to monthly decimal
    rate_per_month = rate / Decimal(100) / Decimal(12)
    n_payments = _number_of_payments(term)
    monthly_payment = _calculate_annuity_payment(principal_dec, rate_per_month, n_payments)
    payment_amount = monthly_payment + extra
    max_months = n_payments * 2

    balance = principal_dec
    cumulative_interest = zero
    schedule: List[AmortizationPoint] = [
        AmortizationPoint(month=0, principal_balance=balance, interest_paid=cumulative_interest)
    ]
    month = 0
    while balance > 0:
        if month >= max_months:
            logger.warning("Loan of %s still owes %s after %d months", principal_dec, balance, month)
            raise LoanNeverPaysOffError(month)
        interest_this_month = balance * rate_per_month
        reduction = payment_amount - interest_this_month
        if reduction <= 0 or reduction < balance * MIN_PRINCIPAL_FRACTION:
            logger.warning(
                "Rejecting non-amortizing loan: payment %s, interest %s", payment_amount, interest_this_month
            )
            raise NonAmortizingLoanError(payment_amount, interest_this_month)

        principal_this_month = min(balance, reduction)
        balance -= principal_this_month
        cumulative_interest += interest_this_month
        if balance < payment_amount * RESIDUE_FRACTION:
            balance = zero
        month += 1
        schedule.append(
            AmortizationPoint(month=month, principal_balance=balance, interest_paid=cumulative_interest)
        )

    logger.debug(
        "Amortized %s at %s%% over %d months (nominal %d), payment %s, extra %s",
        principal_dec,
        rate,
        month,
        n_payments,
        monthly_payment,
        extra,
    )
    return AmortizationResult(
        monthly_payment=monthly_payment,
        total_interest=cumulative_interest,
        total_payment=principal_dec + cumulative_interest,
        amortization_schedule=tuple(schedule),
        actual_term_years=Decimal(month) / Decimal(12),
    )


def compute_for_inputs(inputs: LoanInputs) -> AmortizationResult:
    """Run ``compute_amortization`` on a ``LoanInputs`` instance."""
    return compute_amortization(
        inputs.principal,
        inputs.annual_rate_percent,
        inputs.term_years,
        inputs.extra_monthly_payment,
    )


def compare_extra_payment(inputs: LoanInputs) -> ExtraPaymentSavings:
    """Compute the loan with and without its extra payment.

    The baseline uses the same principal, rate and term with no extra
    payment, so ``interest_saved`` and ``months_saved`` on the returned object
    show what the extra payment buys.
    """
    baseline = compute_amortization(inputs.principal, inputs.annual_rate_percent, inputs.term_years, 0)
    accelerated = compute_for_inputs(inputs)
    return ExtraPaymentSavings(baseline=baseline, accelerated=accelerated)
