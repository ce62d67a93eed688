"""
Shared FastAPI dependencies.

The backend client and the catalog view are created once in the app
lifespan and stored on `app.state`; tests override `get_backend` and
`get_catalog` to point at a mocked backend.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from luckyegg.backend import BackendClient
from luckyegg.cart.store import CartStore
from luckyegg.config import settings
from luckyegg.db import flush_snapshot_storage, get_session, load_snapshot_storage
from luckyegg.models.failure import AuthError, InvalidInputError
from luckyegg.models.order import UserProfile
from luckyegg.services.auth import require_admin
from luckyegg.services.catalog import CatalogView

MAX_CART_ID_LENGTH = 128


def get_backend(request: Request) -> BackendClient:
    backend: BackendClient = request.app.state.backend
    return backend


def get_catalog(request: Request) -> CatalogView:
    catalog: CatalogView = request.app.state.catalog
    return catalog


def cart_storage_key(cart_id: str) -> str:
    return f"{settings.cart_storage_key}:{cart_id}"


def get_cart_id(x_cart_id: Annotated[str | None, Header()] = None) -> str:
    """Read the visitor's cart id from the X-Cart-Id header."""
    cart_id = (x_cart_id or "").strip()
    if not cart_id or len(cart_id) > MAX_CART_ID_LENGTH:
        raise InvalidInputError(
            "Missing or invalid cart id",
            suggestion="Send a stable per-visitor id in the X-Cart-Id header",
        )
    return cart_id


async def get_cart_store(
    cart_id: Annotated[str, Depends(get_cart_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AsyncGenerator[CartStore, None]:
    """
    Provide the visitor's cart, hydrated from the local store.

    Whatever the cart store wrote during the request is saved afterwards.
    """
    key = cart_storage_key(cart_id)
    storage = await load_snapshot_storage(session, key)
    store = CartStore.load(storage, key)
    yield store
    await flush_snapshot_storage(session, storage)


def get_access_token(authorization: Annotated[str | None, Header()] = None) -> str:
    """Extract a bearer token from the Authorization header."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Not signed in")
    return token.strip()


async def get_admin(
    backend: Annotated[BackendClient, Depends(get_backend)],
    token: Annotated[str, Depends(get_access_token)],
) -> UserProfile:
    return await require_admin(backend, token)


async def get_admin_backend(
    backend: Annotated[BackendClient, Depends(get_backend)],
    token: Annotated[str, Depends(get_access_token)],
    _admin: Annotated[UserProfile, Depends(get_admin)],
) -> BackendClient:
    """Backend client acting as the signed-in admin."""
    return backend.as_user(token)


BackendDep = Annotated[BackendClient, Depends(get_backend)]
CatalogDep = Annotated[CatalogView, Depends(get_catalog)]
CartDep = Annotated[CartStore, Depends(get_cart_store)]
AdminBackendDep = Annotated[BackendClient, Depends(get_admin_backend)]
