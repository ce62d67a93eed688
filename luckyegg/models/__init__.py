from luckyegg.models.card import Card, CardInput, Condition, Rarity
from luckyegg.models.cart import CartLineItem, CartState, deserialize_items, serialize_items
from luckyegg.models.failure import (
    AuthError,
    BackendError,
    CheckoutError,
    CheckoutValidationError,
    EmptyCartError,
    FailureDetail,
    FailureKind,
    FailureResponse,
    InvalidInputError,
    KnownError,
    NotFoundError,
    PermissionDeniedError,
)
from luckyegg.models.order import (
    Address,
    Customer,
    EmailSubscriber,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Role,
    UserProfile,
)

__all__ = [
    "Address",
    "AuthError",
    "BackendError",
    "Card",
    "CardInput",
    "CartLineItem",
    "CartState",
    "CheckoutError",
    "CheckoutValidationError",
    "Condition",
    "Customer",
    "EmailSubscriber",
    "EmptyCartError",
    "FailureDetail",
    "FailureKind",
    "FailureResponse",
    "InvalidInputError",
    "KnownError",
    "NotFoundError",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "PermissionDeniedError",
    "Rarity",
    "Role",
    "UserProfile",
    "deserialize_items",
    "serialize_items",
]
