"""Daily POS sales import and helpers over an in-memory sales snapshot."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .config import DEFAULT_SALE_COLUMN_ALIASES, PromotrackConfig
from .dates import normalize_date
from .errors import FileFormatError
from .models import SALE_RECORD_COLUMNS, SaleBatch, SaleRecord
from .values import coerce_number

LOGGER = logging.getLogger("promotrack.sales")


def read_sales_csv(data: bytes) -> List[Dict[str, str]]:
    """Parse UTF-8 CSV bytes (header row required) into string-keyed rows.

    Values are kept as strings; blank lines are skipped. Surplus trailing
    fields (rows ending in a delimiter) are dropped so columns stay aligned
    with the header.

    Raises:
        FileFormatError: undecodable or unparsable content
    """

    try:
        frame = pd.read_csv(
            BytesIO(data),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
            index_col=False,
        )
    except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise FileFormatError(f"Unable to read sales CSV: {exc}", source="sales") from exc
    frame.columns = [str(c).strip() for c in frame.columns]
    return frame.to_dict(orient="records")


def _text(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def _first_present(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the first alias value that is present and not blank."""

    for alias in aliases:
        value = row.get(alias)
        if _text(value):
            return value
    return None


def build_sale_record(
    row: Mapping[str, Any],
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> Optional[SaleRecord]:
    """Map one CSV row to a :class:`SaleRecord`; ``None`` when rejected.

    A row is rejected only when the sales day or the barcode is empty. A date
    that does not normalize is kept as its trimmed text.
    """

    aliases = aliases or DEFAULT_SALE_COLUMN_ALIASES

    def pick(field_name: str) -> Any:
        return _first_present(row, aliases[field_name])

    sales_day = normalize_date(pick("sales_day"))
    barcode = _text(pick("barcode"))
    if not sales_day or not barcode:
        return None
    return SaleRecord(
        sales_day=sales_day,
        layer1_code=_text(pick("layer1_code")),
        barcode=barcode,
        item_name=_text(pick("item_name")),
        qty=coerce_number(pick("qty")),
        amount_excl_tax=coerce_number(pick("amount_excl_tax")),
        transaction_id=_text(pick("transaction_id")),
    )


def build_sale_records(
    rows: Iterable[Mapping[str, Any]],
    config: Optional[PromotrackConfig] = None,
) -> SaleBatch:
    """Validate a whole batch. Rejected rows are dropped and counted."""

    aliases = (config or PromotrackConfig()).sales.column_aliases
    records: List[SaleRecord] = []
    rejected = 0
    for idx, row in enumerate(rows):
        record = build_sale_record(row, aliases)
        if record is None:
            rejected += 1
            LOGGER.debug("Rejected sales row %d: missing sales day or barcode", idx)
            continue
        records.append(record)
    LOGGER.info("Sales import: %d accepted, %d rejected", len(records), rejected)
    return SaleBatch(records=tuple(records), rejected=rejected)


def records_to_frame(records: Iterable[SaleRecord]) -> pd.DataFrame:
    """Bulk-insert view of the records, one column per record field."""

    return pd.DataFrame([r.to_dict() for r in records], columns=list(SALE_RECORD_COLUMNS))


def sales_days(records: Iterable[SaleRecord]) -> List[str]:
    return sorted({r.sales_day for r in records})


def latest_sales_day(records: Iterable[SaleRecord]) -> str:
    """Most recent sales day, the default report date. ``""`` when empty."""

    days = sales_days(records)
    return days[-1] if days else ""


def layer_options(records: Iterable[SaleRecord]) -> List[str]:
    return sorted({r.layer1_code for r in records if r.layer1_code})


def filter_sales(
    records: Iterable[SaleRecord],
    search: str = "",
    layer: str = "all",
) -> List[SaleRecord]:
    """Filter by barcode substring or case-insensitive item name, and by layer."""

    term = (search or "").strip()
    lowered = term.lower()
    out: List[SaleRecord] = []
    for r in records:
        matches_search = not term or term in r.barcode or lowered in r.item_name.lower()
        matches_layer = layer == "all" or r.layer1_code == layer
        if matches_search and matches_layer:
            out.append(r)
    return out


def drop_sales_day(records: Iterable[SaleRecord], day: str) -> List[SaleRecord]:
    """Return the snapshot without the records of one exact sales day."""

    target = normalize_date(day)
    return [r for r in records if r.sales_day != target]
