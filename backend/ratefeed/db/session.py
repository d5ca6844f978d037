# backend/ratefeed/db/session.py

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from ratefeed.db.models import Base


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the tables that do not exist yet."""
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
