# tests/test_codes.py

from datetime import date

import pytest

from stockroom.core.errors import ConflictError, ValidationError
from stockroom.services.codes import (
    batch_number,
    category_prefix,
    is_valid_product_code,
    next_product_code,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Footwear", "FOO"),
        ("tv", "TV"),
        ("Home & Garden", "HOM"),
        ("3D Printers", "DPR"),
    ],
)
def test_category_prefix(name, expected):
    assert category_prefix(name) == expected


def test_category_prefix_without_letters_is_rejected():
    with pytest.raises(ValidationError) as exc:
        category_prefix("123 !!")
    assert exc.value.status_code == 400
    assert exc.value.context["category_name"] == "123 !!"


def test_first_code_for_prefix():
    assert next_product_code("FOO", []) == "FOO001"


def test_next_code_follows_highest_suffix_not_count():
    # FOO002 was deleted; the gap is not reused
    assert next_product_code("FOO", ["FOO001", "FOO003"]) == "FOO004"


def test_codes_from_other_prefixes_are_ignored():
    existing = ["FOO001", "FOO002", "FOOD01", "FO005"]
    assert next_product_code("FO", existing) == "FO006"
    assert next_product_code("FOO", existing) == "FOO003"
    assert next_product_code("F", existing) == "F001"


def test_exhausted_sequence_is_a_conflict():
    with pytest.raises(ConflictError):
        next_product_code("FOO", ["FOO999"])


def test_product_code_format():
    assert is_valid_product_code("FOO001")
    assert is_valid_product_code("TV010")
    assert not is_valid_product_code("foo001")
    assert not is_valid_product_code("FOOD001")
    assert not is_valid_product_code("FOO01")


def test_batch_number_uses_day_month_two_digit_year():
    assert batch_number("FOO001", date(2025, 3, 7)) == "BATCH_FOO001_070325"
