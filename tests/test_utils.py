from datetime import date

import pytest

from ledger.utils import fmt_num, parse_num, reconcile_price_amount, safe_div, to_date


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1,5", 1.5),
        ("1.5", 1.5),
        (" 2,25 ", 2.25),
        (3, 3.0),
        (2.5, 2.5),
        ("1e3", 1000.0),
    ],
)
def test_parse_num_accepts_comma_and_period(value, expected):
    assert parse_num(value) == expected


@pytest.mark.parametrize("value", ["", "abc", None, "1,000.5", "nan", "inf", float("nan"), "1_000", True, [], {}])
def test_parse_num_degrades_to_zero(value):
    assert parse_num(value) == 0.0


def test_reconcile_derives_unit_price_from_amount():
    assert reconcile_price_amount("4", "", "32") == (8.0, 32.0)


def test_reconcile_derives_amount_from_unit_price():
    assert reconcile_price_amount("4", "8", None) == (8.0, 32.0)


def test_reconcile_unit_price_wins_over_disagreeing_amount():
    assert reconcile_price_amount(4, 8, 30) == (8.0, 32.0)


def test_reconcile_without_quantity_derives_nothing():
    assert reconcile_price_amount(0, "", "32") == (0.0, 32.0)


def test_safe_div_by_zero():
    assert safe_div(10, 0) == 0.0
    assert safe_div(10, 4) == 2.5


def test_fmt_num():
    assert fmt_num(1234.5) == "1,234.5"
    assert fmt_num(10) == "10"
    assert fmt_num(float("inf")) == "-"
    assert fmt_num("x") == "-"


def test_to_date_falls_back_on_garbage():
    fallback = date(2020, 1, 1)
    assert to_date("2025-09-01") == date(2025, 9, 1)
    assert to_date("2025-09-01T10:00:00") == date(2025, 9, 1)
    assert to_date("not a date", fallback) == fallback
    assert to_date(None, fallback) == fallback
