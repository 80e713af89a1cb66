"""Utility functions for the amortization calculator.

This module provides helpers for turning user input into ``Decimal`` values
before they reach the engine. Form fields arrive as free text; these helpers
apply the same sanitisation the calculator form always did (digits-only loan
amount, non-negative numbers, a minimum term of half a year).
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, getcontext
from typing import Optional

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

MIN_TERM_YEARS = Decimal("0.5")

_NON_DIGITS = re.compile(r"[^\d]")


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a finite ``Decimal``.

    The function strips any commas and surrounding whitespace and handles both
    integer and float-like strings. It raises ``ValueError`` if conversion
    fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def clean_amount_text(value: Optional[str]) -> Decimal:
    """Return the whole-dollar amount typed into a loan amount field.

    Every character that is not a digit is dropped, so ``"$200,000"`` becomes
    ``200000``. An empty field means zero.
    """
    digits = _NON_DIGITS.sub("", value or "")
    if not digits:
        return Decimal("0")
    return Decimal(digits)


def coerce_non_negative(value: Optional[str], minimum: Decimal = Decimal("0")) -> Decimal:
    """Parse a numeric field that must not be below ``minimum``.

    An empty field is read as zero. Raises ``ValueError`` for text that is not
    a number or for values below ``minimum``.
    """
    if value is None or not value.strip():
        return Decimal("0")
    number = decimal_from_str(value)
    if number < minimum:
        raise ValueError(f"Value must be at least {minimum}: {value}")
    return number


def coerce_term(value: Optional[str]) -> Decimal:
    """Parse a loan term in years.

    An empty field yields zero, which the engine rejects as too short; any
    other value must be at least half a year.
    """
    if value is None or not value.strip():
        return Decimal("0")
    term = decimal_from_str(value)
    if term < MIN_TERM_YEARS:
        raise ValueError(f"Loan term must be at least {MIN_TERM_YEARS} years: {value}")
    return term
