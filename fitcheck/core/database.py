from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)

from fitcheck.core.config import settings

# Default pool size; pre-ping replaces connections dropped by the server
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Rows stay loaded after commit
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """Request-scoped session for the repository dependencies."""
    async with AsyncSessionLocal() as session:
        yield session
