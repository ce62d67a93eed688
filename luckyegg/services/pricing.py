"""
Order total calculation.

Derives the checkout pricing breakdown from cart lines. Recomputed on
demand from current cart contents; nothing here is cached or stored.
Amounts carry full precision; callers round to cents only when presenting.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from luckyegg.config import FLAT_SHIPPING, FREE_SHIPPING_THRESHOLD, TAX_RATE
from luckyegg.models.cart import CartLineItem

CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class OrderTotals:
    """Checkout pricing breakdown."""

    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    def rounded(self) -> "OrderTotals":
        """Copy with every amount quantized half-up to cents, for display."""
        return OrderTotals(
            subtotal=_to_cents(self.subtotal),
            tax=_to_cents(self.tax),
            shipping=_to_cents(self.shipping),
            total=_to_cents(self.total),
        )


def _to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_subtotal(items: Iterable[CartLineItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


def calculate_tax(subtotal: Decimal) -> Decimal:
    """Flat-rate tax. Not rounded; see OrderTotals.rounded()."""
    return subtotal * TAX_RATE


def calculate_shipping(subtotal: Decimal) -> Decimal:
    """Free above the threshold; exactly the threshold still pays."""
    if subtotal > FREE_SHIPPING_THRESHOLD:
        return Decimal("0.00")
    return FLAT_SHIPPING


def calculate_order_totals(items: Iterable[CartLineItem]) -> OrderTotals:
    """
    Compute subtotal, tax, shipping, and grand total for cart lines.

    Example:
        subtotal 40.00 -> tax 3.2000, shipping 9.99, total 53.1900
        subtotal 12.34 -> tax 0.9872, shipping 9.99, total 23.3172
    """
    subtotal = calculate_subtotal(items)
    tax = calculate_tax(subtotal)
    shipping = calculate_shipping(subtotal)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
    )
