"""Async SQLAlchemy engine and session factory.

Both are built once at startup and handed to the metadata catalog:

    engine = build_engine(settings.DATABASE_URL)
    catalog = MetadataCatalog(build_session_factory(engine))
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine. SQLite gets its default pool, others a sized one."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
