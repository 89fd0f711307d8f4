"""Safe lookups and display formatters for loosely typed statement values."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

from stockcore.data.models import FinancialYearRecord
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import NOT_AVAILABLE, ColorClass, Formatted, Missing


def safe_get(accessor: Callable[[], Any], default: Any = NOT_AVAILABLE) -> Any:
    """Evaluate a zero-argument accessor, returning ``default`` on failure.

    Any exception raised by the accessor resolves to ``default``, as do None, an
    empty string and a lone ``"-"``.

    Args:
        accessor: Callable that reads the value, e.g. ``lambda: peer.price``.
        default: Fallback value.

    Returns:
        The resolved value or ``default``.
    """
    try:
        value = accessor()
    except Exception:
        return default
    if value is None:
        return default
    if isinstance(value, str) and value.strip() in ("", "-"):
        return default
    return value


def _statement_map(record: FinancialYearRecord, statement: Statement) -> dict[str, Any] | None:
    if statement is Statement.INCOME:
        return record.income_statement
    if statement is Statement.BALANCE:
        return record.balance_sheet
    if statement is Statement.CASH_FLOW:
        return record.cash_flow_statement
    return None


def find_statement_value(
    records: Sequence[FinancialYearRecord],
    year_index: int,
    statement: Statement,
    key: str,
    default: Any = NOT_AVAILABLE,
) -> Any:
    """Read one line item for one year.

    Args:
        records: Yearly records, most recent first.
        year_index: 0 for the latest year, 1 for the prior year, etc.
        statement: Which statement map to read.
        key: Line-item key.
        default: Returned when the year, statement or key is absent.

    Returns:
        The stored value (unparsed) or ``default``.
    """
    if year_index < 0 or year_index >= len(records):
        return default
    statement_map = _statement_map(records[year_index], statement)
    if not statement_map or key not in statement_map:
        return default
    return safe_get(lambda: statement_map[key], default)


def to_float(value: Any) -> float | Missing:
    """Coerce a loosely typed value to a finite float.

    Numeric strings may carry thousands separators or a trailing ``%``.

    Returns:
        The float, or NOT_AVAILABLE for Missing, None, booleans,
        unparseable strings and non-finite numbers.
    """
    if value is None or isinstance(value, (Missing, bool)):
        return NOT_AVAILABLE
    if isinstance(value, str):
        value = value.strip().replace(",", "").rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    if not math.isfinite(number):
        return NOT_AVAILABLE
    return number


def sign_color(number: float) -> ColorClass:
    if number > 0:
        return ColorClass.POSITIVE
    if number < 0:
        return ColorClass.NEGATIVE
    return ColorClass.NEUTRAL


def indian_grouping(number: float, decimals: int = 2) -> str:
    """Format with Indian digit grouping, e.g. 1234567.891 -> "12,34,567.89".

    The last three integer digits form one group; the rest are grouped in
    pairs.
    """
    text = f"{abs(number):.{decimals}f}"
    integer, _, fraction = text.partition(".")
    if len(integer) > 3:
        head, tail = integer[:-3], integer[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        integer = ",".join(pairs + [tail])
    sign = "-" if number < 0 and float(text) != 0 else ""
    return f"{sign}{integer}.{fraction}" if fraction else f"{sign}{integer}"


def _parse(value: Any) -> float | Formatted:
    """Float for formatting, or the failure result to return directly."""
    if isinstance(value, Missing):
        return Formatted(formatted=value)
    number = to_float(value)
    if isinstance(number, Missing):
        return Formatted(formatted=NOT_AVAILABLE)
    return number


def to_crores(value: Any) -> Formatted:
    """Amount already in crores, Indian grouping, two decimals."""
    number = _parse(value)
    if isinstance(number, Formatted):
        return number
    return Formatted(formatted=indian_grouping(number), unit="Cr", raw=number)


def to_percentage(value: Any, color_sign: bool = False) -> Formatted:
    """Percentage with two decimals, optionally coloured by sign."""
    number = _parse(value)
    if isinstance(number, Formatted):
        return number
    color = sign_color(number) if color_sign else ColorClass.NEUTRAL
    return Formatted(formatted=f"{number:.2f}", unit="%", raw=number, color_class=color)


def to_ratio(value: Any) -> Formatted:
    number = _parse(value)
    if isinstance(number, Formatted):
        return number
    return Formatted(formatted=f"{number:.2f}", unit="x", raw=number)


def to_currency(value: Any) -> Formatted:
    """Rupee amount, Indian grouping, symbol shown before the value."""
    number = _parse(value)
    if isinstance(number, Formatted):
        return number
    return Formatted(
        formatted=indian_grouping(number),
        unit="₹",
        raw=number,
        symbol_prefix=True,
    )


def to_count(value: Any) -> Formatted:
    """Share count with Indian grouping and no unit."""
    number = _parse(value)
    if isinstance(number, Formatted):
        return number
    decimals = 0 if number.is_integer() else 2
    return Formatted(formatted=indian_grouping(number, decimals), raw=number)


def safe_ratio(numerator: Any, denominator: Any, scale: float = 1.0) -> float | Missing:
    """``numerator / denominator * scale``, NOT_AVAILABLE on a missing operand or zero denominator."""
    num = to_float(numerator)
    den = to_float(denominator)
    if isinstance(num, Missing) or isinstance(den, Missing) or den == 0:
        return NOT_AVAILABLE
    return num / den * scale


def safe_add(*values: Any) -> float | Missing:
    """Sum of all operands, NOT_AVAILABLE if any is missing."""
    total = 0.0
    for value in values:
        number = to_float(value)
        if isinstance(number, Missing):
            return NOT_AVAILABLE
        total += number
    return total
