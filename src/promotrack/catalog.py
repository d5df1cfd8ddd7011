"""Catalog workbook import: workbook bytes -> event products -> events.

The extractor only produces products. Event metadata (name and window) is
attached by the caller with :func:`attach_event` right before persisting, and
persisted rows are regrouped into :class:`Event` objects with
:func:`group_events`.
"""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .config import PromotrackConfig
from .dates import normalize_date
from .errors import FileFormatError
from .headers import resolve_header
from .models import Event, EventProduct
from .values import clean_value

LOGGER = logging.getLogger("promotrack.catalog")

EVENT_ROW_COLUMNS = ("event_name", "start_date", "end_date", "barcode", "item_name")


def read_workbook_grid(data: bytes) -> List[List[Any]]:
    """Read the first sheet of a workbook as a 2-D grid of raw cell values.

    Missing cells become ``""``. Numeric cells are kept as numbers so the
    value cleaner can undo scientific notation.

    Raises:
        FileFormatError: the bytes are not a readable workbook or the sheet is empty
    """

    try:
        frame = pd.read_excel(BytesIO(data), sheet_name=0, header=None, dtype=object)
    except Exception as exc:
        raise FileFormatError(f"Unable to read catalog workbook: {exc}", source="catalog") from exc
    if frame.empty:
        raise FileFormatError("Catalog workbook is empty", source="catalog")
    frame = frame.astype(object).where(frame.notna(), "")
    return frame.values.tolist()


def _cell(row: Sequence[Any], idx: int) -> Any:
    return row[idx] if 0 <= idx < len(row) else ""


def extract_catalog_from_grid(
    grid: Sequence[Sequence[Any]],
    config: Optional[PromotrackConfig] = None,
) -> List[EventProduct]:
    """Locate the header row and extract every product row below it.

    Rows without a barcode are skipped; blank names get the configured
    placeholder. Returns ``[]`` when no header row is found.
    """

    cfg = (config or PromotrackConfig()).catalog
    match = resolve_header(
        grid,
        cfg.barcode_keywords,
        cfg.name_keywords,
        max_rows=cfg.header_scan_rows,
    )
    if match is None:
        LOGGER.warning(
            "No header row with barcode and item name columns in the first %d rows",
            cfg.header_scan_rows,
        )
        return []
    LOGGER.debug(
        "Header row %d: barcode column %d, name column %d",
        match.row_index,
        match.barcode_column,
        match.name_column,
    )

    products: List[EventProduct] = []
    skipped = 0
    for row in grid[match.row_index + 1:]:
        if not isinstance(row, (list, tuple)):
            continue
        barcode = clean_value(_cell(row, match.barcode_column))
        if not barcode:
            skipped += 1
            continue
        item_name = clean_value(_cell(row, match.name_column)) or cfg.unnamed_item
        products.append(EventProduct(barcode=barcode, item_name=item_name))

    LOGGER.info("Catalog extraction: %d products, %d rows without barcode", len(products), skipped)
    return products


def extract_catalog(data: bytes, config: Optional[PromotrackConfig] = None) -> List[EventProduct]:
    """Parse catalog workbook bytes into an ordered list of products."""

    return extract_catalog_from_grid(read_workbook_grid(data), config)


def attach_event(
    products: Iterable[EventProduct],
    event_name: str,
    start_date: str,
    end_date: str,
) -> List[Dict[str, str]]:
    """Attach event metadata to extracted products, producing persistable rows.

    Raises:
        ValueError: blank name or a window that ends before it starts
    """

    name = str(event_name or "").strip()
    if not name:
        raise ValueError("Event name is required")
    start = normalize_date(start_date)
    end = normalize_date(end_date)
    if not start or not end:
        raise ValueError("Event start and end dates are required")
    event = Event(name=name, start_date=start, end_date=end, products=tuple(products))
    return [
        {
            "event_name": event.name,
            "start_date": event.start_date,
            "end_date": event.end_date,
            "barcode": p.barcode,
            "item_name": p.item_name,
        }
        for p in event.products
    ]


def group_events(rows: Iterable[Mapping[str, Any]]) -> List[Event]:
    """Rebuild events from persisted product rows.

    Rows are grouped by ``(event_name, start_date)`` in first-seen order; the
    first row of a group supplies the end date.
    """

    groups: Dict[tuple, Dict[str, Any]] = {}
    for row in rows:
        name = str(row.get("event_name", "") or "").strip()
        start = normalize_date(row.get("start_date"))
        key = (name, start)
        if key not in groups:
            groups[key] = {
                "name": name,
                "start_date": start,
                "end_date": normalize_date(row.get("end_date")),
                "products": [],
            }
        groups[key]["products"].append(
            EventProduct(
                barcode=clean_value(row.get("barcode")),
                item_name=clean_value(row.get("item_name")),
            )
        )
    return [Event(**g) for g in groups.values()]


def find_event(events: Iterable[Event], event_id: str) -> Optional[Event]:
    for event in events:
        if event.event_id == event_id:
            return event
    return None
