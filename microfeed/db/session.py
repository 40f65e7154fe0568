from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from microfeed.config import settings
from typing import AsyncGenerator
import logging

logger = logging.getLogger(__name__)

def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for a database URL"""
    if database_url.startswith("sqlite"):
        # One connection per checkout so concurrent sessions never share a transaction
        engine = create_async_engine(
            database_url,
            echo=settings.DEBUG,
            poolclass=NullPool,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # PostgreSQL configuration for production/development
    return create_async_engine(
        database_url,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
    )

engine = build_engine(settings.database_url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

def sibling_sessionmaker(db: AsyncSession) -> async_sessionmaker:
    """Session factory bound to the same engine as ``db``.

    An AsyncSession must not be shared between concurrently running
    coroutines, so work fanned out with asyncio.gather opens its own
    sessions from this factory.
    """
    return async_sessionmaker(
        db.bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise

async def init_db():
    """Initialize database (create tables, etc.)"""
    from microfeed.models import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized successfully")

async def close_db():
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
