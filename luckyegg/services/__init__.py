from luckyegg.services.checkout import (
    CheckoutForm,
    OrderConfirmation,
    submit_order,
    validate_checkout_form,
)
from luckyegg.services.pricing import OrderTotals, calculate_order_totals

__all__ = [
    "CheckoutForm",
    "OrderConfirmation",
    "OrderTotals",
    "calculate_order_totals",
    "submit_order",
    "validate_checkout_form",
]
