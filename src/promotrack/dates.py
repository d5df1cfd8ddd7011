"""Canonical date handling for POS exports and event windows.

Every date that is compared downstream must pass through :func:`normalize_date`
first: window filtering relies on lexicographic ordering of ``YYYY-MM-DD``.
"""
from __future__ import annotations

import re
from typing import Any

CANONICAL_DATE_RX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
COMPACT_DATE_RX = re.compile(r"^\d{8}$")
_SEPARATOR_RX = re.compile(r"[/\-]")


def _pad(part: str) -> str:
    return part.rjust(2, "0")


def normalize_date(value: Any) -> str:
    """Convert a raw date cell to ``YYYY-MM-DD``.

    Resolution order:
    1) already canonical -> unchanged
    2) three parts split on ``/`` or ``-``: year-first when the first part is
       four digits, otherwise day-first (D/M/Y)
    3) compact ``YYYYMMDD``
    4) fallback: the trimmed input unchanged

    Never raises; ``None`` and blank input give ``""``.
    """

    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    if CANONICAL_DATE_RX.match(text):
        return text

    parts = _SEPARATOR_RX.split(text)
    if len(parts) == 3:
        first, second, third = parts
        if first.isdigit() and len(first) == 4:
            return f"{first}-{_pad(second)}-{_pad(third)}"
        return f"{third}-{_pad(second)}-{_pad(first)}"

    if COMPACT_DATE_RX.match(text):
        return f"{text[:4]}-{text[4:6]}-{text[6:8]}"
    return text


def is_canonical_date(value: Any) -> bool:
    if value is None:
        return False
    return bool(CANONICAL_DATE_RX.match(str(value)))
