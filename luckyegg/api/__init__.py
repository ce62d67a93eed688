from luckyegg.api.admin import router as admin_router
from luckyegg.api.auth import router as auth_router
from luckyegg.api.cart import router as cart_router
from luckyegg.api.catalog import router as catalog_router
from luckyegg.api.checkout import router as checkout_router
from luckyegg.api.health import router as health_router
from luckyegg.api.newsletter import router as newsletter_router

__all__ = [
    "admin_router",
    "auth_router",
    "cart_router",
    "catalog_router",
    "checkout_router",
    "health_router",
    "newsletter_router",
]
