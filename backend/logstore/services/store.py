from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from logstore.core.config import STORE_NAME, Settings
from logstore.core.event_types import EventKind
from logstore.core.exceptions import MalformedEvent, StorageUnavailable
from logstore.crud import lastupdated_log as crud_lastupdated
from logstore.models.lastupdated_log import LastUpdatedLog
from logstore.schemas.event import ModuleEvent
from logstore.services import handlers

logger = logging.getLogger("logstore")

Handler = Callable[[Session, ModuleEvent, Settings], int]

# Kinds missing from this table (course_viewed included) are ignored.
EVENT_HANDLERS: dict[str, Handler] = {
    EventKind.COURSE_MODULE_CREATED: handlers.handle_module_upsert,
    EventKind.COURSE_MODULE_UPDATED: handlers.handle_module_upsert,
    EventKind.COURSE_MODULE_DELETED: handlers.handle_module_deleted,
    EventKind.COURSE_DELETED: handlers.handle_course_deleted,
}


class LastUpdatedStore:
    """Keeps one "last updated" record per course module.

    Writer side: ``handle`` receives committed host events and routes them to
    the upsert or deletion handlers. Reader side: ``get_record``,
    ``list_records`` and ``count_records``.
    """

    name = STORE_NAME

    def __init__(self, config: Settings, session_factory: sessionmaker[Session]) -> None:
        self._config = config
        self._session_factory = session_factory

    def is_logging(self) -> bool:
        return self._config.is_store_enabled(self.name)

    def handle(self, event: ModuleEvent | Mapping[str, Any]) -> bool:
        """Apply one event. Returns True when a handler ran."""
        if not self.is_logging():
            return False
        try:
            event = self._coerce(event)
            handler = EVENT_HANDLERS.get(event.kind)
            if handler is None:
                return False
            with self._session() as db:
                handler(db, event, self._config)
        except MalformedEvent as exc:
            logger.warning("[LogStore] Dropped malformed event: %s", exc)
            return False
        return True

    def get_record(self, module_id: int) -> LastUpdatedLog | None:
        with self._session() as db:
            return crud_lastupdated.get_record(db, module_id=module_id)

    def list_records(
        self,
        course_id: int | None = None,
        updated_since: datetime | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[LastUpdatedLog]:
        with self._session() as db:
            return crud_lastupdated.list_records(
                db,
                skip=skip,
                limit=limit,
                course_id=course_id,
                updated_since=updated_since,
            )

    def count_records(self, course_id: int | None = None) -> int:
        with self._session() as db:
            return crud_lastupdated.count_records(db, course_id=course_id)

    @staticmethod
    def _coerce(event: ModuleEvent | Mapping[str, Any]) -> ModuleEvent:
        if isinstance(event, ModuleEvent):
            return event
        try:
            return ModuleEvent.model_validate(dict(event))
        except (TypeError, ValueError, ValidationError) as exc:
            raise MalformedEvent(str(exc)) from exc

    def _session(self) -> "_StoreSession":
        return _StoreSession(self._session_factory)


class _StoreSession:
    """Session context that reports database outages as StorageUnavailable."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._db: Session | None = None

    def __enter__(self) -> Session:
        self._db = self._session_factory()
        return self._db

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc is not None:
                self._db.rollback()
        finally:
            self._db.close()
        if isinstance(exc, OperationalError):
            raise StorageUnavailable(str(exc.orig or exc)) from exc
        return False
