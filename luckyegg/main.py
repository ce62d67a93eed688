from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from luckyegg.api import (
    admin_router,
    auth_router,
    cart_router,
    catalog_router,
    checkout_router,
    health_router,
    newsletter_router,
)
from luckyegg.backend import BackendClient
from luckyegg.config import settings
from luckyegg.db.database import dispose_db, init_db
from luckyegg.models.failure import KnownError
from luckyegg.services.catalog import CatalogView


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    app.state.backend = BackendClient.from_settings()
    app.state.catalog = CatalogView(app.state.backend)
    yield
    app.state.catalog.close()
    await app.state.backend.aclose()
    await dispose_db()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("luckyegg"),
    lifespan=lifespan,
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump(mode="json"))


app.include_router(admin_router)
app.include_router(auth_router)
app.include_router(cart_router)
app.include_router(catalog_router)
app.include_router(checkout_router)
app.include_router(health_router)
app.include_router(newsletter_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
