# classroom_app/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy import text
import logging

from .config import settings

logger = logging.getLogger(__name__)

engine_options = {
    "echo": settings.database_echo,
    "pool_pre_ping": True,
}

# SQLite (local runs) uses its own pool; the sizing below is for PostgreSQL
if not settings.database_url.startswith("sqlite"):
    engine_options.update(
        pool_size=15,
        max_overflow=25,
        pool_timeout=60,
        pool_recycle=1800,
        connect_args={
            "command_timeout": 60,
            "server_settings": {
                "application_name": settings.app_name,
                "idle_in_transaction_session_timeout": "60s",  # Prevent hanging transactions
                "lock_timeout": "30s",  # Row locks taken by join/submit must not wait forever
            }
        },
    )

engine = create_async_engine(settings.database_url, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,  # Manual control over flushing
    autocommit=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()

async def health_check_db() -> bool:
    """Fast health check"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False

async def create_tables():
    """Create all tables from model metadata (development databases only)"""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")

async def close_db_connections():
    """Properly close all database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
