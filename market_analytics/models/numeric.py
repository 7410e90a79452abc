"""
Numeric parsing rule for provider records.

Market data providers deliver prices and quantities as decimal strings.
Every such field is parsed exactly once, here, before it can reach any
arithmetic. Values that do not parse to a finite number, or whose magnitude
is outside float range, are normalized to zero so a single malformed record
can never poison an aggregate.

Example:
    >>> parse_decimal("101.25")
    Decimal('101.25')
    >>> parse_decimal("n/a")
    Decimal('0')
    >>> parse_decimal("1e400")
    Decimal('0')
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def parse_decimal(value: Any) -> Decimal:
    """
    Parse a provider numeric field into a finite Decimal.

    Args:
        value: Raw field value (str, int, float, Decimal or None).

    Returns:
        Decimal: Parsed value, or Decimal("0") when the input is missing,
                 malformed, NaN, infinite or outside float range.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO

    if not parsed.is_finite():
        return ZERO

    # Must survive float conversion: no overflow to inf, no underflow to 0
    as_float = float(parsed)
    if not math.isfinite(as_float) or as_float == 0.0:
        return ZERO
    return parsed


def finite_float(value: Any) -> float:
    """
    Convert a derived statistic to a JSON-safe float.

    Products and sums of in-range inputs can still exceed float range; those
    report 0.0 rather than ``inf``.
    """
    result = float(value)
    return result if math.isfinite(result) else 0.0
