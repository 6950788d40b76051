from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ladder.config import Settings

# ✅ Define Base for models
Base = declarative_base()


class Database:
    """Owns the async engine (and its bounded connection pool) for one process."""

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.sql_echo}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_pre_ping=True,
            )

        # ✅ Use create_async_engine for async operations
        self.engine = create_async_engine(settings.database_url, **engine_kwargs)

        # ✅ Create an async session
        self.session = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    async def create_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self):
        await self.engine.dispose()


# ✅ Dependency to get the async session
async def get_db(request: Request):
    async with request.app.state.db.session() as session:
        yield session
