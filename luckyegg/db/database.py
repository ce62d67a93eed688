"""
Local cart store: engine, sessions, and lifecycle.

Visitor carts live in a small key-value table. Production points
LUCKYEGG_DATABASE_URL at Postgres (asyncpg); tests use in-memory SQLite.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from luckyegg.config import settings
from luckyegg.models.db import Base

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a cart-store session.

    The request's cart writes are committed together after the handler
    returns; a database error rolls all of them back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def check_connection(session: AsyncSession) -> bool:
    """Return True if the cart store answers a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Cart store unreachable: %s", e)
        return False
    return True


async def init_db() -> None:
    """Create the cart snapshot table if it does not exist. Run once at startup."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Cart store ready at %s", engine.url.render_as_string(hide_password=True))


async def dispose_db() -> None:
    """Close pooled connections. Run once at shutdown."""
    await engine.dispose()
