"""Promotional event tracking: catalog/sales ingestion and event reporting."""

from .catalog import attach_event, extract_catalog, group_events
from .dates import normalize_date
from .errors import FileFormatError
from .models import Event, EventProduct, NoDataAvailable, Report, SaleBatch, SaleRecord
from .report import compute_report
from .sales import build_sale_records, read_sales_csv

__all__ = [
    "Event",
    "EventProduct",
    "FileFormatError",
    "NoDataAvailable",
    "Report",
    "SaleBatch",
    "SaleRecord",
    "attach_event",
    "build_sale_records",
    "compute_report",
    "extract_catalog",
    "group_events",
    "normalize_date",
    "read_sales_csv",
]
