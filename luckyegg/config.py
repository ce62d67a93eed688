from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LUCKYEGG_")

    app_name: str = "Lucky Egg Storefront"
    debug: bool = False

    # Local key-value store for visitor carts
    database_url: str = "postgresql+asyncpg://localhost:5432/luckyegg"

    # Hosted backend (rows, auth, file storage)
    backend_url: str = "http://localhost:54321"
    backend_anon_key: str = ""
    # None means requests wait until the backend answers or fails
    backend_timeout: float | None = None

    image_bucket: str = "card-images"
    cart_storage_key: str = "luckyegg_cart"

    # Storefront card list cache; a write to the cards table also invalidates it
    catalog_cache_seconds: float = 30.0

    # When True, a failed checkout undoes the writes it already made.
    # Default: False (customer/order rows from a failed checkout are left behind)
    compensate_failed_checkout: bool = False


settings = Settings()


# =============================================================================
# PRICING CONSTANTS
# =============================================================================

# Flat sales tax, not per-jurisdiction
TAX_RATE = Decimal("0.08")

# Orders with a subtotal strictly above this ship free
FREE_SHIPPING_THRESHOLD = Decimal("50.00")

FLAT_SHIPPING = Decimal("9.99")
