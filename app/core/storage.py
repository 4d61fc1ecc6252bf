# app/core/storage.py
"""
Persistence layer for the planner's key/value stores.

Each logical store (notes, starred days, custom holidays, ...) is one JSON
entry in a backend. Reading never fails: a missing, unparsable or invalid
entry gives the store's default value.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.database import Setting

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageError(Exception):
    """General error type for problems reading or writing stored settings."""

    pass


class SettingsBackend(Protocol):
    def get_raw(self, key: str) -> str | None: ...

    def set_raw(self, key: str, raw: str) -> None: ...


class MemoryBackend:
    """Dict-backed backend for tests and previews."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get_raw(self, key: str) -> str | None:
        return self.data.get(key)

    def set_raw(self, key: str, raw: str) -> None:
        self.data[key] = raw


class DatabaseBackend:
    """Backend storing each key as a row in the settings table."""

    def __init__(self, session: Session):
        self.session = session

    def get_raw(self, key: str) -> str | None:
        try:
            row = self.session.get(Setting, key)
        except SQLAlchemyError as e:
            logger.exception("Failed to read setting %s", key)
            raise StorageError(f"Could not read setting {key}: {e}") from e
        return row.value if row is not None else None

    def set_raw(self, key: str, raw: str) -> None:
        try:
            row = self.session.get(Setting, key)
            if row is None:
                self.session.add(Setting(key=key, value=raw))
            else:
                row.value = raw
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to write setting %s", key)
            raise StorageError(f"Could not write setting {key}: {e}") from e


class JsonStore(Generic[T]):
    """
    One persisted value with get/set/subscribe.

    Args:
        backend: Where the JSON text lives
        key: Storage key
        type_: Type the stored JSON is validated against
        default: Factory for the value used when nothing valid is stored
    """

    def __init__(
        self,
        backend: SettingsBackend,
        key: str,
        type_: Any,
        default: Callable[[], T],
    ):
        self.backend = backend
        self.key = key
        self.default = default
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)
        self._subscribers: list[Callable[[T], None]] = []

    def get(self) -> T:
        raw = self.backend.get_raw(self.key)
        if raw is None:
            return self.default()

        try:
            return self._adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Stored value for %s is invalid, using default: %s", self.key, e)
            return self.default()

    def set(self, value: T) -> None:
        payload = self._adapter.dump_python(value, mode="json")
        self.backend.set_raw(self.key, json.dumps(payload, ensure_ascii=False))
        for callback in list(self._subscribers):
            callback(value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Read, transform and write back; returns the new value."""
        value = fn(self.get())
        self.set(value)
        return value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Call `callback` with every new value; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
