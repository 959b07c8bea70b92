"""Invoice Pricing

Pure monetary computation over line items. Every amount is a Decimal and
nothing is rounded before summation; quantize_money is applied only when an
amount is displayed.

Works on any object exposing quantity, unit_price, tax_rate and
discount_rate (InvoiceLine entities, line item DTOs, request schemas).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable

from src.domain.base import (
    AMOUNT_MAX_DIGITS,
    DESCRIPTION_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    QUANTITY_DECIMAL_PLACES,
    RATE_DECIMAL_PLACES,
    RATE_MAX_DIGITS,
)
from src.domain.exceptions import InvoiceValidationError

HUNDRED = Decimal("100")
CENT = Decimal("0.01")
# Enough significant digits for the widest accepted qty x price x rate
LINE_PRECISION = 60

# field: (max digits, max decimal places), matching the line item columns
LINE_ITEM_SCALES = {
    "quantity": (AMOUNT_MAX_DIGITS, QUANTITY_DECIMAL_PLACES),
    "unit_price": (AMOUNT_MAX_DIGITS, PRICE_DECIMAL_PLACES),
    "tax_rate": (RATE_MAX_DIGITS, RATE_DECIMAL_PLACES),
    "discount_rate": (RATE_MAX_DIGITS, RATE_DECIMAL_PLACES),
}


@dataclass(frozen=True)
class LineAmounts:
    """Computed amounts for a single line item"""

    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    line_total: Decimal


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Convert a numeric input to Decimal without binary float drift

    Floats go through str() so 0.1 becomes Decimal("0.1").
    """
    if value is None:
        raise InvoiceValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise InvoiceValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvoiceValidationError(f"{field} must be a number", reason=repr(value))
    if not result.is_finite():
        raise InvoiceValidationError(f"{field} must be a finite number", reason=str(result))
    return result


def compute_line(item: Any) -> LineAmounts:
    """
    Compute subtotal, tax, discount and line total for one item

    Rates are percentages and are not clamped here; a discount larger than
    subtotal plus tax yields a negative line total.

    Raises:
        InvoiceValidationError: quantity or unit price is negative
    """
    quantity = to_decimal(item.quantity, "quantity")
    unit_price = to_decimal(item.unit_price, "unit_price")
    tax_rate = to_decimal(item.tax_rate or 0, "tax_rate")
    discount_rate = to_decimal(item.discount_rate or 0, "discount_rate")

    if quantity < 0:
        raise InvoiceValidationError("Quantity must not be negative", reason=str(quantity))
    if unit_price < 0:
        raise InvoiceValidationError("Unit price must not be negative", reason=str(unit_price))

    with localcontext() as ctx:
        ctx.prec = LINE_PRECISION
        subtotal = quantity * unit_price
        tax_amount = subtotal * tax_rate / HUNDRED
        discount_amount = subtotal * discount_rate / HUNDRED
        line_total = subtotal + tax_amount - discount_amount
    return LineAmounts(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        line_total=line_total,
    )


def recompute_total(items: Iterable[Any]) -> Decimal:
    """Sum of line totals; Decimal("0") for no items"""
    totals = [compute_line(item).line_total for item in items]
    with localcontext() as ctx:
        ctx.prec = LINE_PRECISION
        return sum(totals, Decimal("0"))


def check_scale(value: Decimal, field: str, max_digits: int, decimal_places: int) -> None:
    """
    Reject values the line item columns cannot store exactly

    Trailing zeros do not count: 2.5000000 has one decimal place.
    """
    normalized = value.normalize()
    if normalized.as_tuple().exponent < -decimal_places:
        raise InvoiceValidationError(
            f"{field} allows at most {decimal_places} decimal places", reason=str(value)
        )
    if normalized != 0 and normalized.adjusted() >= max_digits - decimal_places:
        raise InvoiceValidationError(
            f"{field} allows at most {max_digits - decimal_places} integer digits",
            reason=str(value),
        )


def validate_line_item(item: Any) -> None:
    """
    Boundary checks run before an item reaches the pricing functions

    Raises:
        InvoiceValidationError: empty or overlong description, negative
            quantity or price, a rate outside 0-100, or more digits than
            the line item columns store
    """
    if not item.description or not str(item.description).strip():
        raise InvoiceValidationError("Line item description is required")
    if len(str(item.description).strip()) > DESCRIPTION_MAX_LENGTH:
        raise InvoiceValidationError(
            f"Line item description allows at most {DESCRIPTION_MAX_LENGTH} characters"
        )

    for field in ("quantity", "unit_price"):
        if to_decimal(getattr(item, field), field) < 0:
            raise InvoiceValidationError(f"{field} must not be negative")

    for field in ("tax_rate", "discount_rate"):
        rate = to_decimal(getattr(item, field) or 0, field)
        if rate < 0 or rate > HUNDRED:
            raise InvoiceValidationError(
                f"{field} must be between 0 and 100", reason=str(rate)
            )

    for field, (max_digits, decimal_places) in LINE_ITEM_SCALES.items():
        check_scale(to_decimal(getattr(item, field) or 0, field), field, max_digits, decimal_places)


def quantize_money(amount: Any) -> Decimal:
    """Round to cents for display"""
    return to_decimal(amount, "amount").quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Any, symbol: str = "$") -> str:
    """Format an amount with a currency symbol, e.g. $1,234.50 or -$5.00"""
    value = quantize_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_quantity(quantity: Decimal) -> str:
    """Drop trailing zeros: 2.500000 -> 2.5, 3.000000 -> 3"""
    text = f"{quantity:,.6f}".rstrip("0").rstrip(".")
    return text or "0"
