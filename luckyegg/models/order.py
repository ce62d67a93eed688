"""Order, customer, and account records exchanged with the hosted backend."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Role(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class Address(BaseModel):
    """
    Postal address stored as JSON on the order row.

    Stored with camelCase keys (addressLine1, postalCode); either key style
    is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "US"


class Customer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Order(BaseModel):
    """
    A placed order.

    `order_number` is assigned by the backend on insert, never locally.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    customer_id: str
    order_number: str
    status: OrderStatus = OrderStatus.PENDING
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    total_amount: Decimal
    currency: str = "usd"
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    order_id: str
    card_id: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    total_price: Decimal
    created_at: datetime | None = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: Role = Role.CUSTOMER
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class EmailSubscriber(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email: str
    first_name: str | None = None
    subscription_source: str | None = None
    created_at: datetime | None = None
