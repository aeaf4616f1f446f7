"""Operator value parsing: monetary amounts and calendar dates.

Amounts are compared as positive magnitudes regardless of the transaction sign convention. Dates
are calendar days; ISO `YYYY-MM-DD` is tried first and `dateparser` reads other complete dates
("15 January 2020"). Day, month and year must all be present: nothing is filled in from today.
"""

from __future__ import annotations

from datetime import UTC, date
from decimal import Decimal, InvalidOperation

import dateparser
from dateparser.conf import Settings as DateparserSettings

_DATEPARSER_SETTINGS = DateparserSettings().replace(
    STRICT_PARSING=True,
    DATE_ORDER="YMD",
    TIMEZONE="UTC",
    TO_TIMEZONE="UTC",
    RETURN_AS_TIMEZONE_AWARE=True,
)


def positive(amount: Decimal) -> Decimal:
    """Return the non-negative magnitude of `amount` (idempotent)."""

    return amount.copy_abs()


def parse_amount(value: str) -> Decimal | None:
    """Parse a decimal amount and normalize it to a positive magnitude.

    Returns:
        The amount, or `None` if the text is not a finite decimal number.
    """

    text = (value or "").strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return positive(amount)


def parse_date(value: str) -> date | None:
    """Parse a calendar date.

    Returns:
        The date, or `None` if nothing date-like could be read from the text.
    """

    text = (value or "").strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    dt = dateparser.parse(text, settings=_DATEPARSER_SETTINGS)
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.date()
