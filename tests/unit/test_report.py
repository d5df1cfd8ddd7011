import pandas as pd

from promotrack.models import Event, EventProduct, NoDataAvailable, Report, SaleRecord
from promotrack.report import compute_report, report_details_frame, summary_payload


def _event(*barcodes, start="2024-03-01", end="2024-03-10"):
    products = tuple(EventProduct(bc, f"Item {bc}") for bc in (barcodes or ("111", "222")))
    return Event(name="Tet", start_date=start, end_date=end, products=products)


def _sale(day, barcode, qty=1, amount=10, txn="", name=None):
    return SaleRecord(day, "", barcode, name or f"Sold {barcode}", float(qty), float(amount), txn)


def _scenario_sales():
    return [
        _sale("2024-03-01", "111", qty=2, amount=100, txn="A"),
        _sale("2024-03-05", "222", qty=1, amount=50, txn="B"),
        _sale("2024-03-15", "111", qty=9, amount=999, txn="C"),
    ]


def test_end_to_end_scenario():
    report = compute_report(_event(), "2024-03-05", _scenario_sales())
    assert isinstance(report, Report)
    assert report.day_revenue == 50
    assert report.total_revenue == 150
    assert report.total_qty == 3
    assert report.total_customers == 2
    assert report.effective_end == "2024-03-05"


def test_report_date_with_no_event_sales_has_zero_day_revenue():
    sales = _scenario_sales()[:1] + [_sale("2024-03-04", "222", qty=1, amount=50, txn="B")]
    report = compute_report(_event(), "2024-03-05", sales)
    assert report.day_revenue == 0
    assert report.total_revenue == 150


def test_window_clamps_to_event_end():
    sales = _scenario_sales() + [_sale("2024-03-10", "222", qty=4, amount=40, txn="D")]
    after_end = compute_report(_event(), "2024-03-20", sales)
    at_end = compute_report(_event(), "2024-03-10", sales)
    assert after_end.effective_end == "2024-03-10"
    assert after_end.total_revenue == at_end.total_revenue == 190
    assert after_end.total_qty == at_end.total_qty
    assert after_end.day_revenue == 0


def test_sales_before_start_are_excluded():
    sales = [_sale("2024-02-29", "111", amount=70), _sale("2024-03-01", "111", amount=30)]
    report = compute_report(_event(), "2024-03-02", sales)
    assert report.total_revenue == 30


def test_non_catalog_barcodes_are_ignored_and_barcodes_trimmed():
    sales = [_sale("2024-03-02", " 111 ", amount=30), _sale("2024-03-02", "999", amount=500)]
    report = compute_report(_event(), "2024-03-02", sales)
    assert report.total_revenue == 30
    assert [p.barcode for p in report.details] == ["111"]


def test_distinct_customers_ignore_blank_transaction_ids():
    sales = [
        _sale("2024-03-02", "111", txn="T1"),
        _sale("2024-03-02", "222", txn="T1"),
        _sale("2024-03-03", "111", txn=""),
        _sale("2024-03-03", "222", txn="T2"),
    ]
    report = compute_report(_event(), "2024-03-03", sales)
    assert report.total_customers == 2


def test_duplicate_catalog_barcodes_do_not_double_count():
    event = _event("111", "111", " 111")
    report = compute_report(event, "2024-03-02", [_sale("2024-03-02", "111", qty=2, amount=20)])
    assert report.total_revenue == 20
    assert report.total_qty == 2


def test_first_seen_item_name_wins():
    sales = [
        _sale("2024-03-02", "111", name="Old name"),
        _sale("2024-03-03", "111", name="New name"),
    ]
    report = compute_report(_event(), "2024-03-03", sales)
    assert report.details[0].item_name == "Old name"
    assert report.details[0].qty == 2


def test_rankings_sorted_independently_with_stable_ties():
    barcodes = [str(i) for i in range(1, 8)]
    sales = [
        _sale("2024-03-02", "1", qty=5, amount=10),
        _sale("2024-03-02", "2", qty=1, amount=90),
        _sale("2024-03-02", "3", qty=5, amount=10),
        _sale("2024-03-02", "4", qty=3, amount=40),
        _sale("2024-03-02", "5", qty=2, amount=40),
        _sale("2024-03-02", "6", qty=4, amount=5),
        _sale("2024-03-02", "7", qty=0, amount=1),
    ]
    report = compute_report(_event(*barcodes), "2024-03-02", sales)
    assert [p.barcode for p in report.top_qty] == ["1", "3", "6", "4", "5"]
    assert [p.barcode for p in report.top_revenue] == ["2", "4", "5", "1", "3"]
    assert [p.barcode for p in report.details] == ["2", "4", "5", "1", "3", "6", "7"]


def test_top_n_is_configurable():
    sales = [_sale("2024-03-02", "111", qty=1), _sale("2024-03-02", "222", qty=2)]
    report = compute_report(_event(), "2024-03-02", sales, top_n=1)
    assert [p.barcode for p in report.top_qty] == ["222"]


def test_no_data_sentinels():
    sales = _scenario_sales()
    for result in (
        compute_report(None, "2024-03-05", sales),
        compute_report(_event(), "2024-03-05", []),
        compute_report(_event(), "", sales),
        compute_report(_event(), None, sales),
    ):
        assert isinstance(result, NoDataAvailable)
        assert not result
        assert result.reason


def test_report_date_is_normalized():
    report = compute_report(_event(), "05/03/2024", _scenario_sales())
    assert report.report_date == "2024-03-05"
    assert report.total_revenue == 150


def test_summary_payload_contains_only_scalars_and_names():
    report = compute_report(_event(), "2024-03-05", _scenario_sales())
    payload = summary_payload(report)
    assert payload == {
        "event_name": "Tet",
        "report_date": "2024-03-05",
        "total_revenue": 150,
        "total_customers": 2,
        "total_qty": 3,
        "top_qty": ["Sold 111", "Sold 222"],
        "top_revenue": ["Sold 111", "Sold 222"],
    }


def test_report_details_frame():
    report = compute_report(_event(), "2024-03-05", _scenario_sales())
    frame = report_details_frame(report)
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["barcode", "item_name", "qty", "revenue"]
    assert frame["revenue"].tolist() == [100.0, 50.0]
