"""core.validators: pure domain validators.

Invariants:
    - Each validator returns None on success, raises ValidationError otherwise
    - The error message names the offending field
"""

import pytest

from core.domain.errors import ValidationError
from core.domain.models import InvoiceItem
from core.validators import (
    require_distinct,
    require_email,
    require_integer,
    require_invoice_items,
    require_mobile,
    require_non_empty_string,
    require_number_range,
    require_optional_iso_date,
)


# -- require_non_empty_string --------------------------------------------------

@pytest.mark.parametrize("value", [None, "", "   ", 42])
def test_non_empty_string_rejects(value):
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty_string("Name", value)


def test_non_empty_string_accepts_text():
    assert require_non_empty_string("Name", "Budi") is None


# -- require_email -------------------------------------------------------------

def test_email_accepts_conventional_shape():
    assert require_email("Email", "a@b.co") is None


@pytest.mark.parametrize("value", ["a@b", "abc", "", None, "a b@c.co", "a@@b.co"])
def test_email_rejects(value):
    with pytest.raises(ValidationError) as exc_info:
        require_email("Email", value)
    assert "Email" in str(exc_info.value)
    assert exc_info.value.field == "Email"


# -- require_mobile ------------------------------------------------------------

@pytest.mark.parametrize("value", ["08123456789", "+628123456789", " 081234567890 "])
def test_mobile_accepts(value):
    assert require_mobile("Mobile", value) is None


@pytest.mark.parametrize("value", ["", "12345", "0812-3456-789", "phone", "+", None, "1" * 16])
def test_mobile_rejects(value):
    with pytest.raises(ValidationError, match="Mobile"):
        require_mobile("Mobile", value)


# -- require_optional_iso_date -------------------------------------------------

@pytest.mark.parametrize("value", [None, "", "  "])
def test_iso_date_empty_is_noop(value):
    assert require_optional_iso_date("Expired At", value) is None


@pytest.mark.parametrize(
    "value",
    [
        "2025-12-31T23:59:59.000Z",
        "2025-12-31T23:59:59Z",
        "2025-12-31T23:59",
        "2025-12-31T23:59:59+07:00",
        "2025-01-01T10:00:00.5Z",
        "2025-01-01T10:00:00.12345+07:00",
    ],
)
def test_iso_date_accepts_complete_timestamps(value):
    assert require_optional_iso_date("Expired At", value) is None


@pytest.mark.parametrize("value", ["2025-12-31", "tomorrow", "2025-13-01T00:00:00Z", "31/12/2025 10:00"])
def test_iso_date_rejects(value):
    with pytest.raises(ValidationError, match="Expired At"):
        require_optional_iso_date("Expired At", value)


# -- require_number_range ------------------------------------------------------

def test_number_range_below_minimum_fails():
    with pytest.raises(ValidationError, match="Page must be at least 1"):
        require_number_range("Page", 0, 1)


def test_number_range_at_minimum_succeeds():
    assert require_number_range("Page", 1, 1) is None


def test_number_range_above_maximum_fails():
    with pytest.raises(ValidationError, match="Page Size must be at most 100"):
        require_number_range("Page Size", 101, 1, 100)


@pytest.mark.parametrize("value", [None, "2", True])
def test_number_range_rejects_non_numbers(value):
    with pytest.raises(ValidationError, match="must be a number"):
        require_number_range("Page", value, 1)


def test_number_range_accepts_floats():
    assert require_number_range("Discount Value", 0.01, 0.01) is None


# -- require_invoice_items -----------------------------------------------------

def test_invoice_items_empty_fails():
    with pytest.raises(ValidationError, match="at least one item"):
        require_invoice_items([])


def test_invoice_items_minimal_valid_item_succeeds():
    assert require_invoice_items([{"quantity": 1, "rate": 0.01}]) is None


def test_invoice_items_zero_quantity_fails():
    with pytest.raises(ValidationError, match="Item 1: quantity"):
        require_invoice_items([{"quantity": 0, "rate": 1}])


def test_invoice_items_reports_first_bad_position():
    items = [{"quantity": 2, "rate": 10}, {"quantity": 1, "rate": 0}]
    with pytest.raises(ValidationError, match="Item 2: rate"):
        require_invoice_items(items)


def test_invoice_items_accepts_models():
    assert require_invoice_items([InvoiceItem(quantity=3, rate=1500, description="Kaos")]) is None


def test_invoice_items_missing_rate_fails():
    with pytest.raises(ValidationError, match="rate"):
        require_invoice_items([{"quantity": 1}])


# -- require_distinct ----------------------------------------------------------

def test_distinct_equal_values_fail():
    with pytest.raises(ValidationError, match="must differ"):
        require_distinct("From Email", "a@x.com", "To Email", "a@x.com")


def test_distinct_different_values_pass():
    assert require_distinct("From Email", "a@x.com", "To Email", "b@x.com") is None


# -- require_integer -----------------------------------------------------------

@pytest.mark.parametrize("value", [1, 10, 3.0])
def test_integer_accepts_integral_values(value):
    assert require_integer("Total Coupons", value, 1) is None


@pytest.mark.parametrize("value", [1.5, "2", None, True])
def test_integer_rejects_non_integral_values(value):
    with pytest.raises(ValidationError, match="Total Coupons must be an integer"):
        require_integer("Total Coupons", value, 1)


def test_integer_below_minimum_fails():
    with pytest.raises(ValidationError, match="Total Coupons must be at least 1"):
        require_integer("Total Coupons", 0, 1)


def test_invoice_items_fractional_quantity_fails():
    with pytest.raises(ValidationError, match="Item 1: quantity must be an integer"):
        require_invoice_items([{"quantity": 1.5, "rate": 1}])


def test_invoice_items_integral_float_quantity_succeeds():
    assert require_invoice_items([{"quantity": 2.0, "rate": 1}]) is None
