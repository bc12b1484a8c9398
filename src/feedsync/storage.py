"""Blob storage for the subscription document.

The whole SubscriptionSet lives in a single row of the plugin key-value table,
addressed by a fixed (plugin id, key) pair. Writes replace the row atomically.
"""

from __future__ import annotations

from typing import Protocol

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from feedsync.db import NEVER_EXPIRES, PluginKeyValue
from feedsync.errors import DataIntegrityError, StorageError

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class BlobStore(Protocol):
    """Minimal storage capability needed by a sync run."""

    def load_blob(self) -> bytes | None:
        """Return the stored blob, or None if nothing has been stored yet."""
        ...

    def upsert_blob(self, blob: bytes) -> int:
        """Insert or replace the stored blob. Returns rows affected."""
        ...


class PluginKeyValueStore:
    """BlobStore backed by one row of ``pluginkeyvaluestore``."""

    def __init__(self, engine: sa.engine.Engine, plugin_id: str, key: str) -> None:
        self.engine = engine
        self.plugin_id = plugin_id
        self.key = key

    def _where(self) -> tuple[sa.ColumnElement[bool], ...]:
        return (PluginKeyValue.pluginid == self.plugin_id, PluginKeyValue.pkey == self.key)

    def load_blob(self) -> bytes | None:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(sa.select(PluginKeyValue.pvalue).where(*self._where())).fetchall()
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot read {self.plugin_id}/{self.key}: {exc}") from exc

        if len(rows) > 1:
            raise DataIntegrityError(f"expected at most one row for {self.plugin_id}/{self.key}, found {len(rows)}")
        if not rows or rows[0].pvalue is None:
            return None
        # psycopg2 hands bytea back as memoryview
        return bytes(rows[0].pvalue)

    def upsert_blob(self, blob: bytes) -> int:
        insert = _UPSERT_INSERTS.get(self.engine.dialect.name)
        if insert is None:
            raise StorageError(f"atomic upsert is not supported on {self.engine.dialect.name}")

        stmt = insert(PluginKeyValue).values(
            pluginid=self.plugin_id,
            pkey=self.key,
            pvalue=blob,
            expireat=NEVER_EXPIRES,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["pluginid", "pkey"],
            set_={"pvalue": stmt.excluded.pvalue, "expireat": NEVER_EXPIRES},
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot write {self.plugin_id}/{self.key}: {exc}") from exc
        return result.rowcount


class MemoryBlobStore:
    """In-process BlobStore, used for tests and local experiments."""

    def __init__(self, blob: bytes | None = None) -> None:
        self.blob = blob
        self.writes = 0

    def load_blob(self) -> bytes | None:
        return self.blob

    def upsert_blob(self, blob: bytes) -> int:
        self.blob = blob
        self.writes += 1
        return 1
