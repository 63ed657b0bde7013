from decimal import Decimal

import pytest

from utils import (
    clean_price,
    format_money,
    parse_money,
    round_money,
    sanitize_filename,
    to_cost,
    to_money,
    try_parse_decimal,
    validate_image_path,
    validate_menu_choice,
)


@pytest.mark.parametrize("text, expected", [
    ("12.34", Decimal("12.34")),
    ("$1,234.567", Decimal("1234.56")),
    ("-5", Decimal("5")),
    ("1.2.3", Decimal("1.2")),
    ("", Decimal("0")),
    (".", Decimal("0")),
    ("abc", Decimal("0")),
])
def test_parse_money(text, expected):
    assert parse_money(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("12.50", Decimal("12.50")),
    ("12,50", Decimal("12.50")),
    ("1.234,50", Decimal("1234.50")),
    ("1,234.50", Decimal("1234.50")),
    ("4.99 лв", Decimal("4.99")),
    ("n/a", None),
])
def test_clean_price(text, expected):
    assert clean_price(text) == expected


def test_to_money():
    assert to_money(Decimal("-1")) == 0
    assert to_money("-2") == 0
    assert to_money(" -0.50") == 0
    assert to_money(2.5) == Decimal("2.5")
    assert to_money("3.10") == Decimal("3.10")
    assert to_money(None) == 0
    assert to_money(True) == 0
    assert to_money(Decimal("NaN")) == 0


def test_rounding_is_half_up():
    assert round_money(Decimal("12.825")) == Decimal("12.83")
    assert round_money(Decimal("25.649999")) == Decimal("25.65")


def test_format_money():
    assert format_money(Decimal("1234.5"), "USD") == "$1,234.50"
    assert format_money(Decimal("12.825"), "EUR") == "€12.83"
    assert format_money(Decimal("3"), "BGN") == "3.00 лв"
    assert format_money(Decimal("3"), "JPY") == "3.00 JPY"


def test_try_parse_decimal():
    assert try_parse_decimal(" 18,5 ") == Decimal("18.5")
    assert try_parse_decimal("x") is None
    assert try_parse_decimal(None) is None


def test_validate_menu_choice():
    assert validate_menu_choice(" 2 ", ["1", "2"]) == "2"
    assert validate_menu_choice("9", ["1", "2"]) is None


def test_sanitize_filename():
    assert sanitize_filename("my bill?.json") == "my_bill.json"
    assert sanitize_filename("") == "unnamed_file"


def test_validate_image_path(tmp_path):
    image = tmp_path / "r.jpg"
    image.write_bytes(b"\xff\xd8")
    text = tmp_path / "r.txt"
    text.write_text("x")

    assert validate_image_path(str(image))
    assert not validate_image_path(str(text))
    assert not validate_image_path(str(tmp_path / "missing.png"))
    assert not validate_image_path(str(tmp_path))
    assert not validate_image_path(None)


def test_to_cost_truncates_to_cents():
    assert to_cost(Decimal("1.009")) == Decimal("1.00")
    assert to_cost("12.505") == Decimal("12.50")
    assert to_cost(Decimal("100").normalize()) == 100
    assert to_cost(Decimal("-3.999")) == 0
