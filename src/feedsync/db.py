"""Mattermost plugin key-value table mapping and engine helpers."""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from feedsync.errors import ConfigError, StorageError

NEVER_EXPIRES = 0


class Base(DeclarativeBase):
    pass


class PluginKeyValue(Base):
    """Row of Mattermost's ``pluginkeyvaluestore``. The table is owned by Mattermost, not by us."""

    __tablename__ = "pluginkeyvaluestore"

    pluginid: Mapped[str] = mapped_column(sa.String(190), primary_key=True)
    pkey: Mapped[str] = mapped_column(sa.String(150), primary_key=True)
    pvalue: Mapped[bytes | None] = mapped_column(sa.LargeBinary, nullable=True)
    expireat: Mapped[int] = mapped_column(sa.BigInteger, nullable=False, default=NEVER_EXPIRES)


metadata = Base.metadata


def get_engine(database_url: str) -> sa.engine.Engine:
    """Create a SQLAlchemy engine for the given database URL."""
    try:
        return sa.create_engine(database_url, echo=False)
    except SQLAlchemyError as exc:
        raise ConfigError(f"invalid database url: {exc}") from exc


def ping(engine: sa.engine.Engine) -> None:
    """Open a connection and run a trivial query, raising StorageError if the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(sa.text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise StorageError(f"cannot connect to database: {exc}") from exc
