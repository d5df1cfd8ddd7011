"""Command line driver for catalog import, sales import and event reports.

Persistence is out of scope: each command reads and writes plain files so the
outputs can be handed to whatever store the operator uses.

  promotrack catalog --file promo.xlsx --name "Tet" --start 01/03/2024 --end 10/03/2024
  promotrack sales --file pos_export.csv --output sales.csv
  promotrack report --events events.csv --sales sales.csv --event-id Tet_2024-03-01
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .catalog import EVENT_ROW_COLUMNS, attach_event, extract_catalog, find_event, group_events
from .config import PromotrackConfig, load_config
from .errors import FileFormatError
from .logging_utils import get_logger, log_error, log_system_event, log_warning
from .models import NoDataAvailable, Report
from .report import compute_report, summary_payload
from .sales import build_sale_records, latest_sales_day, read_sales_csv, records_to_frame


def _read_bytes(path: str) -> bytes:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input not found: {p}")
    return p.read_bytes()


def _write_csv(frame: pd.DataFrame, output: Optional[str]) -> Optional[Path]:
    if not output:
        return None
    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(out, index=False, encoding="utf-8")
    return out


def run_catalog(args: argparse.Namespace, config: PromotrackConfig, logger: logging.Logger) -> int:
    products = extract_catalog(_read_bytes(args.file), config)
    if not products:
        log_error(logger, f"No usable header found in {args.file}; no products imported.")
        return 1
    rows = attach_event(products, args.name, args.start, args.end)
    out = _write_csv(pd.DataFrame(rows, columns=list(EVENT_ROW_COLUMNS)), args.output)
    log_system_event(logger, f"Catalog import: {len(rows)} products for event '{args.name}'")
    print(f"Imported {len(rows)} products" + (f" -> {out}" if out else ""))
    return 0


def run_sales(args: argparse.Namespace, config: PromotrackConfig, logger: logging.Logger) -> int:
    batch = build_sale_records(read_sales_csv(_read_bytes(args.file)), config)
    out = _write_csv(records_to_frame(batch.records), args.output)
    if batch.rejected:
        log_warning(logger, f"{batch.rejected} rows rejected (missing sales day or barcode)")
    print(f"Accepted {batch.accepted} rows, rejected {batch.rejected}" + (f" -> {out}" if out else ""))
    return 0


def _format_report(report: Report) -> str:
    lines = [
        f"Event: {report.event_name} ({report.event_id})",
        f"Report date: {report.report_date} (window ends {report.effective_end})",
        f"Day revenue: {report.day_revenue:,.0f}",
        f"Total revenue: {report.total_revenue:,.0f}",
        f"Total qty: {report.total_qty:,.0f}",
        f"Total customers: {report.total_customers}",
        "Top by qty:",
    ]
    lines.extend(f"  - {p.item_name} ({p.barcode}): {p.qty:,.0f}" for p in report.top_qty)
    lines.append("Top by revenue:")
    lines.extend(f"  - {p.item_name} ({p.barcode}): {p.revenue:,.0f}" for p in report.top_revenue)
    return "\n".join(lines)


def run_report(args: argparse.Namespace, config: PromotrackConfig, logger: logging.Logger) -> int:
    event_rows = pd.read_csv(args.events, dtype=str, keep_default_na=False).to_dict(orient="records")
    event = find_event(group_events(event_rows), args.event_id)
    batch = build_sale_records(read_sales_csv(_read_bytes(args.sales)), config)
    report_date = args.date or latest_sales_day(batch.records)

    report = compute_report(event, report_date, batch.records, top_n=config.report.top_n)
    if isinstance(report, NoDataAvailable):
        log_warning(logger, f"No report for '{args.event_id}': {report.reason}")
        return 1
    if args.json:
        print(json.dumps(summary_payload(report), ensure_ascii=False, indent=2))
    else:
        print(_format_report(report))
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Create an argument parser for the promotrack CLI."""

    parser = argparse.ArgumentParser(description="Promotional event sales tracking")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    catalog = sub.add_parser("catalog", help="Extract an event catalog from a workbook")
    catalog.add_argument("--file", required=True, help="Catalog workbook (.xlsx)")
    catalog.add_argument("--name", required=True, help="Event name")
    catalog.add_argument("--start", required=True, help="Event start date")
    catalog.add_argument("--end", required=True, help="Event end date")
    catalog.add_argument("--output", help="Write event product rows to this CSV")
    catalog.set_defaults(handler=run_catalog)

    sales = sub.add_parser("sales", help="Validate a daily POS sales CSV export")
    sales.add_argument("--file", required=True, help="POS export (.csv)")
    sales.add_argument("--output", help="Write normalized sales records to this CSV")
    sales.set_defaults(handler=run_sales)

    report = sub.add_parser("report", help="Compute an event performance report")
    report.add_argument("--events", required=True, help="Event product rows CSV")
    report.add_argument("--sales", required=True, help="Sales CSV (raw or normalized)")
    report.add_argument("--event-id", required=True, help="Event id: <name>_<start date>")
    report.add_argument("--date", help="Report date (defaults to the latest sales day)")
    report.add_argument("--json", action="store_true", help="Print the summary payload as JSON")
    report.set_defaults(handler=run_report)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)
    logger = get_logger(config)
    try:
        return args.handler(args, config, logger)
    except (FileFormatError, FileNotFoundError, ValueError) as exc:
        log_error(logger, str(exc))
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI guard
    raise SystemExit(main())
