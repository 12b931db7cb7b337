"""
Settings store: a single key/value table holding the greeting suffix.

The SQL implementation opens a connection per operation and releases it on
every exit path; nothing is pooled or held between requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Protocol

from sqlalchemy import Column, Integer, String, create_engine, func, select, update
from sqlalchemy.engine import URL
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from greeter.config import StoreConfig
from greeter.errors import (
    SchemaSetupError,
    SeedDataError,
    SettingNotFoundError,
    StorageError,
    StorageUnavailableError,
    status_error_payload,
)

logger = logging.getLogger(__name__)

IN_MEMORY_PATH = ":memory:"


class SettingsStore(Protocol):
    """Operations the router needs from the settings storage."""

    def initialize(self) -> None:
        ...

    def get_suffix(self) -> str:
        ...

    def set_suffix(self, new_value: str) -> None:
        ...


class InMemorySettingsStore:
    """Dict-backed store for development and tests."""

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig(database_path=IN_MEMORY_PATH)
        self.values: Dict[str, str] = {}

    def initialize(self) -> None:
        self.values.setdefault(self.config.setting_key, self.config.default_value)

    def get_suffix(self) -> str:
        return self.values.get(self.config.setting_key, self.config.default_value)

    def set_suffix(self, new_value: str) -> None:
        if self.config.setting_key not in self.values:
            raise SettingNotFoundError("Name suffix key not found for update.")
        self.values[self.config.setting_key] = new_value

    def reset(self) -> None:
        """Drop all stored values (useful in tests)."""
        self.values.clear()


Base = declarative_base()


class SettingRow(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True)
    value = Column(String)


class SqlSettingsStore:
    """
    SQLAlchemy-backed store on an SQLite file.

    ``":memory:"`` keeps one shared connection alive instead, since every new
    connection to an in-memory database would see an empty schema.
    """

    def __init__(self, config: StoreConfig):
        self.config = config
        url = URL.create("sqlite+pysqlite", database=config.database_path)
        if self.is_in_memory:
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(url, poolclass=NullPool)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False
        )

    @property
    def is_in_memory(self) -> bool:
        return self.config.database_path == IN_MEMORY_PATH

    def initialize(self) -> None:
        self._ensure_location()
        self._ensure_schema()
        self._ensure_default_row()

    def _ensure_location(self) -> None:
        if not self.is_in_memory:
            try:
                Path(self.config.database_path).parent.mkdir(
                    parents=True, exist_ok=True
                )
            except OSError as exc:
                logger.exception(
                    "Cannot create database directory for %s: %s",
                    self.config.database_path,
                    exc,
                )
                raise StorageUnavailableError(
                    "Failed to connect to database."
                ) from exc
        try:
            with self.engine.connect():
                pass
        except SQLAlchemyError as exc:
            logger.exception("Database connection error: %s", exc)
            raise StorageUnavailableError("Failed to connect to database.") from exc
        logger.debug("Connected to SQLite database at %s", self.config.database_path)

    def _ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            logger.exception("Error creating settings table: %s", exc)
            raise SchemaSetupError("Failed to create settings table.") from exc

    def _ensure_default_row(self) -> None:
        key = self.config.setting_key
        with self.Session() as session:
            try:
                count = session.scalar(
                    select(func.count())
                    .select_from(SettingRow)
                    .where(SettingRow.key == key)
                )
            except SQLAlchemyError as exc:
                logger.exception("Error checking initial data: %s", exc)
                raise SeedDataError("Failed to check initial data.") from exc
            if count:
                return

            session.add(SettingRow(key=key, value=self.config.default_value))
            try:
                session.commit()
            except IntegrityError:
                # Another invocation seeded the same file between our check
                # and insert; the unique key already holds a row.
                session.rollback()
                logger.info("Initial %r row inserted concurrently", key)
                return
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Error inserting initial data: %s", exc)
                raise SeedDataError("Failed to insert initial data.") from exc
            logger.info("Initial %r row inserted", key)

    def get_suffix(self) -> str:
        try:
            with self.Session() as session:
                value = session.scalar(
                    select(SettingRow.value).where(
                        SettingRow.key == self.config.setting_key
                    )
                )
        except SQLAlchemyError as exc:
            logger.exception("Error retrieving %s: %s", self.config.setting_key, exc)
            raise StorageError("Failed to retrieve greeting.") from exc
        if value is None:
            return self.config.default_value
        return value

    def set_suffix(self, new_value: str) -> None:
        try:
            with self.Session() as session:
                result = session.execute(
                    update(SettingRow)
                    .where(SettingRow.key == self.config.setting_key)
                    .values(value=new_value)
                )
                session.commit()
                updated = result.rowcount
        except SQLAlchemyError as exc:
            logger.exception("Error updating %s: %s", self.config.setting_key, exc)
            message = "Failed to update name suffix."
            raise StorageError(
                message, payload=status_error_payload(message)
            ) from exc
        if updated == 0:
            raise SettingNotFoundError("Name suffix key not found for update.")
