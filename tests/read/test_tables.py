from __future__ import annotations

import pytest

from edskit import PlateGrid, RowOutOfRange
from edskit.read import parse_analysis_result, parse_multicomponent_data


def _table(*rows: str) -> str:
    return "\n".join(rows)


def test_analysis_result() -> None:
    text = _table("Well\tCt", "3\t25.1", "bad\tx", "7\t30.2")
    assert parse_analysis_result(text) == [
        {"Well": "3", "Ct": "25.1"},
        {"Well": "7", "Ct": "30.2"},
    ]


def test_analysis_result_preamble_and_crlf() -> None:
    text = "\r\n".join(["# Block Type = 96", "3\tignored", "Well\tCt", "3\t25.1", ""])
    assert parse_analysis_result(text) == [{"Well": "3", "Ct": "25.1"}]


def test_analysis_result_no_header() -> None:
    assert parse_analysis_result(_table("3\t25.1", "4\t26.0")) == []
    assert parse_analysis_result("") == []


def test_analysis_result_short_and_long_rows() -> None:
    text = _table("Well\tSample Name\tCt", "1\ta", "2\tb\t20.0\textra")
    assert parse_analysis_result(text) == [
        {"Well": "1", "Sample Name": "a", "Ct": None},
        {"Well": "2", "Sample Name": "b", "Ct": "20.0"},
    ]


def test_analysis_result_header_reset() -> None:
    text = _table("Well\tCt", "1\t20.0", "well\tRn\tDelta Rn", "1\t0.5\t0.1")
    assert parse_analysis_result(text) == [
        {"Well": "1", "Ct": "20.0"},
        {"well": "1", "Rn": "0.5", "Delta Rn": "0.1"},
    ]


def test_analysis_result_leading_int_wells() -> None:
    text = _table("Well\tCt", "12abc\t1", "-1\t2", " 5\t3")
    # well fields are read like an integer prefix; negative wells are skipped
    assert [row["Ct"] for row in parse_analysis_result(text)] == ["1", "3"]


MC_HEADER = "Well\tCycle\tDye\tFAM\tRaw  Fluor Value"


def test_multicomponent() -> None:
    text = _table(
        MC_HEADER,
        "0\t1\tFAM\t0\t1000.5",
        "0\t2\tFAM\t0\t1010.5",
        "0\t1\tVIC\t0\t500.25",
        "95\t1\tROX\t0\t80.0",
    )
    assert parse_multicomponent_data(text) == {
        "A1": {"FAM": {1: "1000.5", 2: "1010.5"}, "VIC": {1: "500.25"}},
        "H12": {"ROX": {1: "80.0"}},
    }


def test_multicomponent_later_reading_wins() -> None:
    text = _table(MC_HEADER, "13\t1\tFAM\t0\t1.0", "13\t1\tFAM\t0\t2.0")
    assert parse_multicomponent_data(text) == {"B2": {"FAM": {1: "2.0"}}}


def test_multicomponent_shifted_columns() -> None:
    text = _table(
        MC_HEADER,
        "0\t1\t2\t3\t4\tFAM\t6\t7",  # one group of three extra columns
        "1\t1\t2\t0\t1\t2\t9\t1\tVIC\t0\t5.5",  # two groups
    )
    assert parse_multicomponent_data(text) == {
        "A1": {"FAM": {4: "7"}},
        "A2": {"VIC": {1: "5.5"}},
    }


def test_multicomponent_skipped_rows() -> None:
    text = _table(
        "Preamble\t1\t2\t3\t4",
        "0\t1\tFAM\t0\t1.0",  # before the header
        MC_HEADER,
        "1\t1\tFAM\t0",  # fewer than five fields
        "2\t1\t\t0\t1.0",  # no dye, well is still registered
        "3\tx\tFAM\t0\t1.0",  # non-numeric cycle, well is still registered
        "nope\t1\tFAM\t0\t1.0",
    )
    assert parse_multicomponent_data(text) == {"A3": {}, "A4": {}}


def test_multicomponent_missing_value() -> None:
    text = _table(MC_HEADER, "0\t1\t2\t3\t4\tFAM\t6")
    assert parse_multicomponent_data(text) == {"A1": {"FAM": {4: None}}}


def test_multicomponent_grid() -> None:
    grid = PlateGrid(rows=16, cols=24)
    text = _table(MC_HEADER, "383\t1\tFAM\t0\t1.0")
    assert parse_multicomponent_data(text, grid) == {"P24": {"FAM": {1: "1.0"}}}


def test_multicomponent_index_past_plate() -> None:
    # rows past the plate still get a letter while they are within the column count
    text = _table(MC_HEADER, "96\t1\tFAM\t0\t1.0")
    assert parse_multicomponent_data(text) == {"I1": {"FAM": {1: "1.0"}}}
    with pytest.raises(RowOutOfRange):
        parse_multicomponent_data(_table(MC_HEADER, "144\t1\tFAM\t0\t1.0"))
