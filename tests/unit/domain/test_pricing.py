"""Unit tests for invoice pricing"""

import pytest
from decimal import Decimal
from types import SimpleNamespace

from src.domain.base import DESCRIPTION_MAX_LENGTH
from src.domain.exceptions import InvoiceValidationError
from src.domain.pricing import (
    compute_line,
    recompute_total,
    validate_line_item,
    quantize_money,
    format_money,
    format_quantity,
    to_decimal,
)


def make_item(quantity, unit_price, tax_rate=0, discount_rate=0, description="Item"):
    return SimpleNamespace(
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        tax_rate=tax_rate,
        discount_rate=discount_rate,
    )


class TestComputeLine:
    """Test per-line amounts"""

    def test_tax_and_discount_applied_to_subtotal(self):
        """1 x 100 at 10% tax and 5% discount totals 105"""
        amounts = compute_line(make_item(Decimal("1"), Decimal("100"), Decimal("10"), Decimal("5")))

        assert amounts.subtotal == Decimal("100")
        assert amounts.tax_amount == Decimal("10")
        assert amounts.discount_amount == Decimal("5")
        assert amounts.line_total == Decimal("105")

    def test_zero_rates(self):
        amounts = compute_line(make_item(Decimal("3"), Decimal("19.99")))

        assert amounts.tax_amount == Decimal("0")
        assert amounts.discount_amount == Decimal("0")
        assert amounts.line_total == Decimal("59.97")

    def test_none_rates_treated_as_zero(self):
        amounts = compute_line(make_item(Decimal("2"), Decimal("50"), None, None))

        assert amounts.line_total == Decimal("100")

    def test_zero_quantity_gives_zero_total(self):
        amounts = compute_line(make_item(Decimal("0"), Decimal("100"), Decimal("10")))

        assert amounts.line_total == Decimal("0")

    def test_discount_larger_than_subtotal_gives_negative_total(self):
        """Rates are not clamped here; the result may go negative"""
        amounts = compute_line(make_item(Decimal("1"), Decimal("100"), Decimal("0"), Decimal("150")))

        assert amounts.line_total == Decimal("-50")

    def test_negative_quantity_rejected(self):
        with pytest.raises(InvoiceValidationError) as exc_info:
            compute_line(make_item(Decimal("-1"), Decimal("100")))

        assert exc_info.value.code == "VALIDATION_FAILED"
        assert exc_info.value.retryable is False

    def test_negative_unit_price_rejected(self):
        with pytest.raises(InvoiceValidationError):
            compute_line(make_item(Decimal("1"), Decimal("-0.01")))

    def test_floats_converted_without_binary_drift(self):
        """0.1 x 3 is exactly 0.3, not 0.30000000000000004"""
        amounts = compute_line(make_item(0.1, 3))

        assert amounts.line_total == Decimal("0.3")

    def test_no_rounding_before_display(self):
        """Fractions of a cent are kept in the computed amount"""
        amounts = compute_line(make_item(Decimal("1"), Decimal("0.333"), Decimal("10")))

        assert amounts.line_total == Decimal("0.3663")
        assert quantize_money(amounts.line_total) == Decimal("0.37")

    def test_largest_inputs_multiply_exactly(self):
        largest = Decimal("999999999999.999999")

        amounts = compute_line(make_item(largest, largest, Decimal("0.0001")))

        assert amounts.subtotal == Decimal("999999999999999998000000.000000000001")
        assert amounts.tax_amount == Decimal("999999999999999998.000000000000000001")

    def test_same_input_same_output(self):
        item = make_item(Decimal("7"), Decimal("13.37"), Decimal("21"), Decimal("3.5"))

        assert compute_line(item) == compute_line(item)


class TestRecomputeTotal:
    """Test invoice total"""

    def test_sum_of_line_totals(self):
        items = [
            make_item(Decimal("1"), Decimal("100"), Decimal("10"), Decimal("5")),
            make_item(Decimal("2"), Decimal("50")),
        ]

        assert recompute_total(items) == Decimal("205")

    def test_empty_items_total_zero(self):
        assert recompute_total([]) == Decimal("0")

    def test_negative_line_reduces_total(self):
        items = [
            make_item(Decimal("1"), Decimal("100")),
            make_item(Decimal("1"), Decimal("10"), Decimal("0"), Decimal("200")),
        ]

        assert recompute_total(items) == Decimal("90")

    def test_total_matches_sum_of_compute_line(self):
        items = [
            make_item(Decimal("1.5"), Decimal("33.33"), Decimal("7.5"), Decimal("2")),
            make_item(Decimal("4"), Decimal("0.99"), Decimal("19")),
        ]

        expected = sum(compute_line(item).line_total for item in items)
        assert recompute_total(items) == expected


class TestValidateLineItem:
    """Test boundary validation"""

    def test_valid_item_passes(self):
        validate_line_item(make_item(Decimal("1"), Decimal("10"), Decimal("100"), Decimal("0")))

    def test_empty_description_rejected(self):
        with pytest.raises(InvoiceValidationError):
            validate_line_item(make_item(Decimal("1"), Decimal("10"), description="   "))

    def test_rate_above_hundred_rejected(self):
        with pytest.raises(InvoiceValidationError) as exc_info:
            validate_line_item(make_item(Decimal("1"), Decimal("10"), Decimal("100.01")))

        assert "tax_rate" in exc_info.value.message

    def test_negative_discount_rejected(self):
        with pytest.raises(InvoiceValidationError):
            validate_line_item(make_item(Decimal("1"), Decimal("10"), Decimal("0"), Decimal("-1")))

    def test_non_numeric_quantity_rejected(self):
        with pytest.raises(InvoiceValidationError):
            validate_line_item(make_item("abc", Decimal("10")))

    def test_quantity_with_seven_decimal_places_rejected(self):
        with pytest.raises(InvoiceValidationError) as exc_info:
            validate_line_item(make_item(Decimal("0.3333333"), Decimal("3")))

        assert "quantity" in exc_info.value.message
        assert "6 decimal places" in exc_info.value.message

    def test_rate_with_five_decimal_places_rejected(self):
        with pytest.raises(InvoiceValidationError) as exc_info:
            validate_line_item(make_item(Decimal("1"), Decimal("3"), Decimal("12.34567")))

        assert "tax_rate" in exc_info.value.message

    def test_trailing_zeros_do_not_count_as_places(self):
        validate_line_item(make_item(Decimal("2.500000000"), Decimal("3.10000000")))

    def test_unit_price_with_too_many_integer_digits_rejected(self):
        with pytest.raises(InvoiceValidationError) as exc_info:
            validate_line_item(make_item(Decimal("1"), Decimal("1000000000000")))

        assert "unit_price" in exc_info.value.message

    def test_largest_storable_values_pass(self):
        validate_line_item(
            make_item(
                Decimal("999999999999.999999"),
                Decimal("999999999999.999999"),
                Decimal("99.9999"),
                Decimal("0.0001"),
            )
        )

    def test_description_length_limit(self):
        validate_line_item(make_item(1, 1, description="x" * DESCRIPTION_MAX_LENGTH))

        with pytest.raises(InvoiceValidationError) as exc_info:
            validate_line_item(make_item(1, 1, description="x" * (DESCRIPTION_MAX_LENGTH + 1)))

        assert "description" in exc_info.value.message


class TestToDecimal:
    """Test numeric conversion"""

    def test_none_rejected(self):
        with pytest.raises(InvoiceValidationError):
            to_decimal(None, "quantity")

    def test_bool_rejected(self):
        with pytest.raises(InvoiceValidationError):
            to_decimal(True, "quantity")

    def test_infinity_rejected(self):
        with pytest.raises(InvoiceValidationError):
            to_decimal(float("inf"), "unit_price")

    def test_string_accepted(self):
        assert to_decimal("12.50", "unit_price") == Decimal("12.50")


class TestFormatting:
    """Test display helpers"""

    def test_half_up_rounding(self):
        assert quantize_money(Decimal("2.345")) == Decimal("2.35")
        assert quantize_money(Decimal("2.344")) == Decimal("2.34")

    def test_format_money_thousands_separator(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_format_money_negative(self):
        assert format_money(Decimal("-5")) == "-$5.00"

    def test_format_money_accepts_int_and_symbol(self):
        assert format_money(7, symbol="EUR ") == "EUR 7.00"

    def test_format_quantity_drops_trailing_zeros(self):
        assert format_quantity(Decimal("2.500000")) == "2.5"
        assert format_quantity(Decimal("3.000000")) == "3"
        assert format_quantity(Decimal("0")) == "0"
