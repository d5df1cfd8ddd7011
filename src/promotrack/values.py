from __future__ import annotations

import math
import numbers
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import pandas as pd


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _integral_text(number: Decimal) -> str:
    """Render a finite Decimal with no grouping and zero fraction digits."""

    rounded = number.to_integral_value(rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    return "0" if text == "-0" else text


def clean_value(value: Any) -> str:
    """Return a trimmed display string for a spreadsheet cell.

    Numbers (and strings in ``e+`` scientific notation) are rendered as full
    integer digit strings so barcodes auto-numified by spreadsheet tools
    (``8.936123456789E+12``) come back as ``"8936123456789"``.
    """

    if _is_missing(value):
        return ""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if isinstance(value, numbers.Integral):
            return str(int(value))
        if not math.isfinite(float(value)):
            return str(value).strip()
        return _integral_text(Decimal(float(value)))

    text = str(value).strip()
    if "e+" in text.lower():
        try:
            number = Decimal(text)
        except InvalidOperation:
            return text
        if number.is_finite():
            return _integral_text(number)
    return text


def coerce_number(value: Any) -> float:
    """Parse a quantity/amount cell; empty, non-numeric or non-finite give 0."""

    if _is_missing(value) or isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        number = float(value)
    else:
        text = str(value).strip()
        # float() also accepts digit-group underscores ("1_000")
        if "_" in text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0
