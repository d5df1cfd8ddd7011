import pytest

from promotrack.catalog import (
    attach_event,
    extract_catalog,
    extract_catalog_from_grid,
    find_event,
    group_events,
    read_workbook_grid,
)
from promotrack.config import load_and_validate_config
from promotrack.errors import FileFormatError
from promotrack.models import Event, EventProduct


def _catalog_rows():
    return [
        ["CHƯƠNG TRÌNH KHUYẾN MÃI THÁNG 3"],
        [],
        ["Áp dụng từ 01/03 đến 10/03"],
        ["STT", "Mã vạch", "Tên hàng"],
        [1, 8936123456789, "Sữa tươi"],
        [2, "8.936000000001E+12", "  Bánh quy  "],
        [3, None, "Không có mã"],
        [4, "0012345", None],
    ]


def test_extract_catalog_from_workbook_bytes(workbook_bytes):
    products = extract_catalog(workbook_bytes(_catalog_rows()))
    assert products == [
        EventProduct(barcode="8936123456789", item_name="Sữa tươi"),
        EventProduct(barcode="8936000000001", item_name="Bánh quy"),
        EventProduct(barcode="0012345", item_name="Không tên"),
    ]


def test_extract_catalog_handles_float_barcodes(workbook_bytes):
    data = workbook_bytes([["Barcode", "Item Name"], [8.936123456789e12, "Trà xanh"]])
    assert extract_catalog(data) == [EventProduct(barcode="8936123456789", item_name="Trà xanh")]


def test_extract_catalog_without_header_returns_empty_list(workbook_bytes):
    data = workbook_bytes([["foo", "bar"], [1, 2]])
    assert extract_catalog(data) == []


def test_extract_catalog_corrupt_bytes_raises_file_format_error():
    with pytest.raises(FileFormatError):
        extract_catalog(b"definitely not a workbook")


def test_extract_catalog_empty_workbook_raises_file_format_error(workbook_bytes):
    with pytest.raises(FileFormatError):
        extract_catalog(workbook_bytes([]))


def test_read_workbook_grid_fills_missing_cells(workbook_bytes):
    grid = read_workbook_grid(workbook_bytes([["Barcode", "Item Name", "Note"], ["111", "A"]]))
    assert grid[1][2] == ""
    assert len(grid) == 2


def test_extract_catalog_from_ragged_grid_uses_placeholder_from_config():
    config = load_and_validate_config({"catalog": {"unnamed_item": "unnamed item"}})
    grid = [["Barcode", "Item Name"], ["111"], ["", "no barcode"], ["222", "B"]]
    products = extract_catalog_from_grid(grid, config)
    assert products == [
        EventProduct(barcode="111", item_name="unnamed item"),
        EventProduct(barcode="222", item_name="B"),
    ]


def test_attach_event_normalizes_dates_and_builds_rows():
    rows = attach_event([EventProduct("111", "A")], " Tet ", "01/03/2024", "20240310")
    assert rows == [
        {
            "event_name": "Tet",
            "start_date": "2024-03-01",
            "end_date": "2024-03-10",
            "barcode": "111",
            "item_name": "A",
        }
    ]


def test_attach_event_rejects_inverted_window():
    with pytest.raises(ValueError):
        attach_event([EventProduct("111", "A")], "Tet", "2024-03-10", "2024-03-01")


def test_attach_event_requires_name_and_dates():
    with pytest.raises(ValueError):
        attach_event([], "", "2024-03-01", "2024-03-10")
    with pytest.raises(ValueError):
        attach_event([], "Tet", "", "2024-03-10")


def test_group_events_by_name_and_start_date():
    rows = [
        {"event_name": "Tet", "start_date": "2024-03-01", "end_date": "2024-03-10", "barcode": "111", "item_name": "A"},
        {"event_name": "Summer", "start_date": "2024-06-01", "end_date": "2024-06-30", "barcode": "333", "item_name": "C"},
        {"event_name": "Tet", "start_date": "2024-03-01", "end_date": "2024-03-10", "barcode": "222", "item_name": "B"},
    ]
    events = group_events(rows)
    assert [e.event_id for e in events] == ["Tet_2024-03-01", "Summer_2024-06-01"]
    assert [p.barcode for p in events[0].products] == ["111", "222"]
    assert find_event(events, "Summer_2024-06-01").end_date == "2024-06-30"
    assert find_event(events, "missing") is None


def test_event_join_set_dedupes_and_trims_barcodes():
    event = Event(
        name="Tet",
        start_date="2024-03-01",
        end_date="2024-03-10",
        products=(EventProduct("111", "A"), EventProduct(" 111 ", "A again"), EventProduct("", "blank")),
    )
    assert event.barcodes == frozenset({"111"})
