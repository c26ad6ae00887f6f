"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* One `key_value` table backing the KeyValueStore contract
* `SqlKeyValueStore` used by the profile store, ledgers and plan store
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import DateTime, String, Text, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.errors import StorageError

_LOG = logging.getLogger(__name__)

# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class KeyValue(Base):
    __tablename__ = "key_value"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


# ───────── store ─────────────────────────────────────────────────────
class SqlKeyValueStore:
    """KeyValueStore over a single SQL table; the table is created lazily."""

    def __init__(self, url: str | None = None, engine: AsyncEngine | None = None) -> None:
        self._engine = engine or create_async_engine(url or settings.database_url)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)
        self._ready = False

    async def _ensure_schema(self) -> None:
        if self._ready:
            return
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._ready = True

    async def get(self, key: str) -> str | None:
        try:
            await self._ensure_schema()
            async with self._sessions() as session:
                return (
                    await session.execute(select(KeyValue.value).where(KeyValue.key == key))
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            _LOG.error("Error reading %s: %s", key, exc)
            raise StorageError(key, "read failed") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await self._ensure_schema()
            async with self._sessions() as session:
                row = await session.get(KeyValue, key)
                if row is None:
                    session.add(KeyValue(key=key, value=value))
                else:
                    row.value = value
                await session.commit()
        except SQLAlchemyError as exc:
            _LOG.error("Error saving %s: %s", key, exc)
            raise StorageError(key, "write failed") from exc

    async def remove(self, key: str) -> None:
        try:
            await self._ensure_schema()
            async with self._sessions() as session:
                await session.execute(delete(KeyValue).where(KeyValue.key == key))
                await session.commit()
        except SQLAlchemyError as exc:
            _LOG.error("Error removing %s: %s", key, exc)
            raise StorageError(key, "remove failed") from exc

    async def dispose(self) -> None:
        await self._engine.dispose()
