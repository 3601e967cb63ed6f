"""PostgreSQL Database Configuration"""
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from table_feedback.config import get_config
from table_feedback.db.base import Base

logger = logging.getLogger(__name__)

config = get_config()

# Create async engine
engine = create_async_engine(
    config.database_url,
    echo=config.db_echo,
    poolclass=NullPool,
)

# Create async session factory
async_session = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_models() -> None:
    """Create feedback tables if they do not exist yet."""
    # Import models so they register on Base.metadata
    from table_feedback.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
