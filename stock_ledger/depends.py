from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig

# Registers the tables on SQLModel.metadata
import stock_ledger.domain  # noqa: F401


def create_engine(db_uri: Optional[str] = None) -> AsyncEngine:
    return create_async_engine(
        db_uri or ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True
    )


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
