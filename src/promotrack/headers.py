"""Header row detection for hand-built catalog spreadsheets.

Catalogs often start with title or merged-cell rows and carry bilingual
(Vietnamese/English) headers, so the header row is found by scanning a bounded
window for the first row that names both a barcode and an item-name column.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

DEFAULT_SCAN_ROWS = 100

DEFAULT_BARCODE_KEYWORDS = (
    "barcode", "mavach", "mahang", "code", "id", "upc", "ean", "sku", "masp", "mabarcode", "ma",
)
DEFAULT_NAME_KEYWORDS = (
    "tensanpham", "itemname", "productname", "tenhang", "name", "tensp",
    "description", "desc", "tenhanghoa", "ten",
)

_COMBINING_MARKS_RX = re.compile("[\u0300-\u036f]")
_NON_ALNUM_RX = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class HeaderMatch:
    row_index: int
    barcode_column: int
    name_column: int


def normalize_header_token(cell: Any) -> str:
    """Lowercase, strip diacritics (``đ`` -> ``d``) and drop non-alphanumerics.

    ``"Mã vạch"`` -> ``"mavach"``, ``"Tên hàng"`` -> ``"tenhang"``.
    """

    if cell is None:
        return ""
    token = unicodedata.normalize("NFD", str(cell).strip().lower())
    token = _COMBINING_MARKS_RX.sub("", token)
    token = token.replace("đ", "d")
    return _NON_ALNUM_RX.sub("", token)


def _first_matching_column(tokens: Sequence[str], keywords: Iterable[str]) -> int:
    keywords = tuple(keywords)
    for idx, token in enumerate(tokens):
        if not token:
            continue
        if any(token == kw or kw in token for kw in keywords):
            return idx
    return -1


def resolve_header(
    grid: Sequence[Sequence[Any]],
    barcode_keywords: Iterable[str] = DEFAULT_BARCODE_KEYWORDS,
    name_keywords: Iterable[str] = DEFAULT_NAME_KEYWORDS,
    max_rows: int = DEFAULT_SCAN_ROWS,
) -> Optional[HeaderMatch]:
    """Return the first row (within ``max_rows``) holding both header columns.

    Keywords are matched against normalized cell tokens by equality or
    containment. Returns ``None`` when no row qualifies.
    """

    barcode_keywords = tuple(normalize_header_token(k) for k in barcode_keywords)
    name_keywords = tuple(normalize_header_token(k) for k in name_keywords)
    barcode_keywords = tuple(k for k in barcode_keywords if k)
    name_keywords = tuple(k for k in name_keywords if k)

    for r, row in enumerate(grid):
        if r >= max_rows:
            break
        if not isinstance(row, (list, tuple)):
            continue
        tokens = [normalize_header_token(cell) for cell in row]
        barcode_col = _first_matching_column(tokens, barcode_keywords)
        name_col = _first_matching_column(tokens, name_keywords)
        if barcode_col != -1 and name_col != -1:
            return HeaderMatch(row_index=r, barcode_column=barcode_col, name_column=name_col)
    return None
