"""Slot math, date/time rendering and quantity formatting helpers."""

from decimal import Decimal

import pandas as pd
import pytest

from msconslogic import utils


def test_day_bounds_are_utc_midnights():
    start, end = utils.day_bounds("2024-03-31")
    assert start == pd.Timestamp("2024-03-31 00:00", tz="UTC")
    assert end - start == pd.Timedelta(hours=24)


@pytest.mark.parametrize("i", [0, 1, 47, 95])
def test_slot_bounds_follow_grid(i):
    start, end = utils.slot_bounds("2024-01-11", i)
    midnight = utils.day_bounds("2024-01-11")[0]
    assert start == midnight + pd.Timedelta(minutes=15 * i)
    assert end == start + pd.Timedelta(minutes=15)


def test_slot_edges_have_no_gaps():
    edges = utils.slot_edges(pd.Timestamp("2024-10-27", tz="UTC"))
    assert len(edges) == 97
    assert (edges[1:] - edges[:-1] == pd.Timedelta(minutes=15)).all()
    assert edges[-1] == utils.day_bounds("2024-10-27")[1]


def test_slot_bounds_out_of_range():
    with pytest.raises(ValueError):
        utils.slot_bounds("2024-01-11", 96)


@pytest.mark.parametrize(
    "h, m, expected",
    [(0, 0, 0), (0, 15, 1), (7, 0, 28), (23, 45, 95), (7, 7, None), (24, 0, None)],
)
def test_slot_index(h, m, expected):
    assert utils.slot_index(h, m) == expected


def test_format_edifact_datetime_naive_is_utc_label():
    assert utils.format_edifact_datetime(pd.Timestamp("2024-01-11 23:45")) == "202401112345+00"


def test_format_edifact_datetime_converts_aware():
    ts = pd.Timestamp("2024-01-11 01:00", tz="Europe/Berlin")
    assert utils.format_edifact_datetime(ts) == "202401110000+00"


def test_format_interchange_datetime():
    assert utils.format_interchange_datetime(pd.Timestamp("2024-02-01 10:30:07")) == (
        "240201",
        "1030",
    )


@pytest.mark.parametrize(
    "value, factor, expected",
    [
        (1.0, 1.0, "1.000"),
        (4.0, 0.25, "1.000"),
        (15.024, 1.0, "15.024"),
        (0.0, 1.0, "0.000"),
        (1.0005, 1.0, "1.001"),
        (-1.0005, 1.0, "-1.001"),
        (2.5e-4, 1.0, "0.000"),
        (5e-4, 1.0, "0.001"),
        (-1e-4, 1.0, "0.000"),
        (1234567.8915, 1.0, "1234567.892"),
    ],
)
def test_format_quantity_rounds_half_away_from_zero(value, factor, expected):
    assert utils.format_quantity(value, factor) == expected


def test_format_quantity_rejects_nan():
    with pytest.raises(ValueError):
        utils.format_quantity(float("nan"))


def test_parse_decimal():
    assert utils.parse_decimal("15,024") == utils.parse_decimal("15.024") == 15.024
    assert utils.parse_decimal("1e999") == 0.0


@pytest.mark.parametrize("value", [1e29, 123456789012345678901234567890.0, 1.7e308])
def test_format_quantity_large_finite_values(value):
    out = utils.format_quantity(value)
    integer, decimals = out.split(".")
    assert decimals == "000"
    assert Decimal(integer) == Decimal(repr(value))
