"""Database Connection and Session Management"""

import re
import ssl
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from billmate.config import settings

# Base class for declarative models
Base = declarative_base()


def normalize_database_url(url: str) -> tuple[str, Dict[str, Any]]:
    """
    Convert a libpq style URL into one usable by the async driver.

    asyncpg uses ssl=SSLContext rather than sslmode, so sslmode is stripped
    from the URL and turned into connect_args.
    """
    url = url.replace("postgresql://", "postgresql+asyncpg://")
    connect_args: Dict[str, Any] = {}
    if re.search(r"[?&]sslmode=(require|required|verify-full)", url, re.I):
        ssl_ctx = ssl.create_default_context()
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_ctx
        url = re.sub(r"[?&]sslmode=[^&]+", "", url, flags=re.I)
        url = re.sub(r"\?&", "?", url).rstrip("?")
    if "?&" in url:
        url = url.replace("?&", "?")
    return url, connect_args


class Database:
    """
    Owns the async engine and session factory for one process.

    The process entry point (FastAPI lifespan or a job script) calls
    ``init()`` once before serving and ``shutdown()`` once on exit.

    Example:
        ```python
        database = Database()
        database.init()
        async with database.session() as db:
            ...
        await database.shutdown()
        ```
    """

    def __init__(self, url: Optional[str] = None, **engine_kwargs: Any) -> None:
        self.url = url or settings.DATABASE_URL
        self.engine_kwargs = engine_kwargs
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def init(self) -> None:
        """Create the engine and session factory."""
        if self.is_initialized:
            raise RuntimeError("Database already initialized")

        url, connect_args = normalize_database_url(self.url)
        options: Dict[str, Any] = {
            "connect_args": connect_args,
            "echo": settings.DEBUG,
        }
        if not url.startswith("sqlite"):
            # pool_pre_ping detects stale connections after failover
            options.update(
                pool_pre_ping=True,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        options.update(self.engine_kwargs)

        self.engine = create_async_engine(url, **options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            raise RuntimeError("Database not initialized; call init() first")
        return self.session_factory()

    async def create_all(self) -> None:
        """Create database tables (development and tests only - use Alembic in production)"""
        # Imported for its side effect of registering every table on Base.metadata
        import billmate.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def shutdown(self) -> None:
        """Close database connections"""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get a database session.

    Yields:
        AsyncSession: Database session bound to the application's Database
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
