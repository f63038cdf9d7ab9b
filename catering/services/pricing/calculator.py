"""Order pricing."""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, List, Tuple, Union

from pydantic import BaseModel

from catering.core.exceptions import ValidationFailure

DEFAULT_TAX_RATE = Decimal("0.12")
CENT = Decimal("0.01")

Amount = Union[Decimal, int, str]


class PricingResult(BaseModel):
    """Totals for a priced set of lines."""

    line_subtotals: List[Decimal]
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def to_money(value: Amount) -> Decimal:
    """Quantize an amount to cents.

    Floats are refused so binary rounding never reaches a persisted total.
    """
    if isinstance(value, float):
        raise ValidationFailure(f"Monetary amount {value!r} must be a Decimal, not a float")
    return _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Amount) -> Decimal:
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationFailure(f"{value!r} is not a valid amount") from e
    if not number.is_finite():
        raise ValidationFailure(f"Amount must be finite (got {value!r})")
    return number


def calculate_totals(
    lines: Iterable[Tuple[Amount, int]],
    discount: Amount = Decimal("0"),
    tax_rate: Amount = DEFAULT_TAX_RATE,
) -> PricingResult:
    """
    Price an ordered list of ``(unit_price, quantity)`` pairs.

    Args:
        lines: Unit price and quantity of each order line
        discount: Amount taken off after tax
        tax_rate: Fraction applied to the subtotal (0.12 for 12%)

    Returns:
        PricingResult with per-line subtotals and order totals

    Raises:
        ValidationFailure: on a non-positive quantity, a negative price or
            discount, or a discount larger than subtotal plus tax
    """
    discount = to_money(discount)
    if discount < 0:
        raise ValidationFailure(f"Discount cannot be negative (got {discount})")

    if isinstance(tax_rate, float):
        raise ValidationFailure(f"Tax rate {tax_rate!r} must be a Decimal, not a float")
    rate = _to_decimal(tax_rate)
    if rate < 0:
        raise ValidationFailure(f"Tax rate cannot be negative (got {rate})")

    line_subtotals: List[Decimal] = []
    for position, (price, quantity) in enumerate(lines, start=1):
        price = to_money(price)
        if price < 0:
            raise ValidationFailure(f"Line {position}: price cannot be negative (got {price})")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationFailure(
                f"Line {position}: quantity must be a positive integer (got {quantity!r})"
            )
        line_subtotals.append(to_money(price * quantity))

    subtotal = sum(line_subtotals, Decimal("0.00"))
    tax = to_money(subtotal * rate)
    gross = subtotal + tax
    if discount > gross:
        raise ValidationFailure(
            f"Discount {discount} exceeds order amount {gross} (subtotal plus tax)"
        )

    return PricingResult(
        line_subtotals=line_subtotals,
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=gross - discount,
    )
