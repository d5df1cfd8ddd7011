"""Data shapes exchanged between the ingestion, reporting and persistence layers.

All containers are frozen so a report is always computed over an immutable
snapshot of the event and sales collections.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, FrozenSet, Tuple


@dataclass(frozen=True)
class EventProduct:
    """One SKU of a promotional catalog. ``barcode`` is the join key."""

    barcode: str
    item_name: str


@dataclass(frozen=True)
class Event:
    """A promotional campaign with a fixed product catalog and date window.

    Dates are canonical ``YYYY-MM-DD`` strings so they compare lexicographically.
    """

    name: str
    start_date: str
    end_date: str
    products: Tuple[EventProduct, ...] = ()

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"Event '{self.name}' starts after it ends: {self.start_date} > {self.end_date}"
            )
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def event_id(self) -> str:
        return f"{self.name}_{self.start_date}"

    @property
    def barcodes(self) -> FrozenSet[str]:
        """Distinct trimmed barcodes of the catalog (the join-set)."""

        return frozenset(p.barcode.strip() for p in self.products if p.barcode.strip())


@dataclass(frozen=True)
class SaleRecord:
    sales_day: str
    layer1_code: str
    barcode: str
    item_name: str
    qty: float
    amount_excl_tax: float
    transaction_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SALE_RECORD_COLUMNS = (
    "sales_day",
    "layer1_code",
    "barcode",
    "item_name",
    "qty",
    "amount_excl_tax",
    "transaction_id",
)


@dataclass(frozen=True)
class SaleBatch:
    """Validated output of one sales import: accepted records plus reject count."""

    records: Tuple[SaleRecord, ...] = ()
    rejected: int = 0

    @property
    def accepted(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ProductSummary:
    barcode: str
    item_name: str
    qty: float
    revenue: float


@dataclass(frozen=True)
class Report:
    """Derived, read-only view over (event, report date, sales)."""

    event_id: str
    event_name: str
    report_date: str
    effective_end: str
    day_revenue: float
    total_revenue: float
    total_qty: float
    total_customers: int
    top_qty: Tuple[ProductSummary, ...] = field(default_factory=tuple)
    top_revenue: Tuple[ProductSummary, ...] = field(default_factory=tuple)
    details: Tuple[ProductSummary, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NoDataAvailable:
    """Returned instead of a report when its preconditions are unmet."""

    reason: str

    def __bool__(self) -> bool:
        return False
