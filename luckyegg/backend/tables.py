"""Backend table and bucket names."""

CARDS = "cards"
CUSTOMERS = "customers"
ORDERS = "orders"
ORDER_ITEMS = "order_items"
EMAIL_SUBSCRIBERS = "email_subscribers"
PROFILES = "profiles"
