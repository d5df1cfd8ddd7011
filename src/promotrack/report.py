"""Event performance report over a snapshot of daily sales.

The report is a pure function of (event, report date, sales records) and is
recomputed on every request.

Window rules:
  - day slice: records with ``sales_day == report_date``
  - cumulative window: ``[start_date, min(report_date, end_date)]`` inclusive
  - only records whose trimmed barcode is in the event catalog count

Date comparisons are lexicographic and require canonical ``YYYY-MM-DD``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from .dates import normalize_date
from .models import Event, NoDataAvailable, ProductSummary, Report, SaleRecord

LOGGER = logging.getLogger("promotrack.report")

DEFAULT_TOP_N = 5


class _ProductAccumulator:
    __slots__ = ("item_name", "qty", "revenue")

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name
        self.qty = 0.0
        self.revenue = 0.0


def _accumulate(records: Sequence[SaleRecord]) -> List[ProductSummary]:
    """Group by barcode in encounter order; the first record names the product."""

    groups: Dict[str, _ProductAccumulator] = {}
    for r in records:
        bc = r.barcode.strip()
        acc = groups.get(bc)
        if acc is None:
            acc = groups[bc] = _ProductAccumulator(r.item_name)
        acc.qty += r.qty
        acc.revenue += r.amount_excl_tax
    return [
        ProductSummary(barcode=bc, item_name=acc.item_name, qty=acc.qty, revenue=acc.revenue)
        for bc, acc in groups.items()
    ]


def compute_report(
    event: Optional[Event],
    report_date: Optional[str],
    sales: Sequence[SaleRecord],
    top_n: int = DEFAULT_TOP_N,
) -> Union[Report, NoDataAvailable]:
    """Compute day and cumulative metrics for one event.

    Returns :class:`NoDataAvailable` when the event is unresolved, there are
    no sales or no report date is set. Never raises for those cases.
    """

    if event is None:
        return NoDataAvailable("event not found")
    snapshot = tuple(sales or ())
    if not snapshot:
        return NoDataAvailable("no sales records")
    day = normalize_date(report_date)
    if not day:
        return NoDataAvailable("report date not set")

    join_set = event.barcodes
    in_event = [r for r in snapshot if r.barcode.strip() in join_set]

    day_revenue = sum((r.amount_excl_tax for r in in_event if r.sales_day == day), 0.0)

    effective_end = event.end_date if day > event.end_date else day
    cumulative = [r for r in in_event if event.start_date <= r.sales_day <= effective_end]

    total_revenue = sum((r.amount_excl_tax for r in cumulative), 0.0)
    total_qty = sum((r.qty for r in cumulative), 0.0)
    total_customers = len({r.transaction_id for r in cumulative if r.transaction_id})

    products = _accumulate(cumulative)
    # sorted() is stable: ties keep encounter order
    by_qty = sorted(products, key=lambda p: p.qty, reverse=True)
    by_revenue = sorted(products, key=lambda p: p.revenue, reverse=True)

    LOGGER.debug(
        "Report %s @ %s: window %s..%s, %d records, %d products",
        event.event_id,
        day,
        event.start_date,
        effective_end,
        len(cumulative),
        len(products),
    )
    return Report(
        event_id=event.event_id,
        event_name=event.name,
        report_date=day,
        effective_end=effective_end,
        day_revenue=day_revenue,
        total_revenue=total_revenue,
        total_qty=total_qty,
        total_customers=total_customers,
        top_qty=tuple(by_qty[:top_n]),
        top_revenue=tuple(by_revenue[:top_n]),
        details=tuple(by_revenue),
    )


def summary_payload(report: Report) -> Dict[str, Any]:
    """Read-only scalars and ranked names handed to an external summarizer."""

    return {
        "event_name": report.event_name,
        "report_date": report.report_date,
        "total_revenue": report.total_revenue,
        "total_customers": report.total_customers,
        "total_qty": report.total_qty,
        "top_qty": [p.item_name for p in report.top_qty],
        "top_revenue": [p.item_name for p in report.top_revenue],
    }


def report_details_frame(report: Report) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"barcode": p.barcode, "item_name": p.item_name, "qty": p.qty, "revenue": p.revenue}
            for p in report.details
        ],
        columns=["barcode", "item_name", "qty", "revenue"],
    )
