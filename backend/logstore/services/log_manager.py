from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import event as sa_event
from sqlalchemy.orm import Session, sessionmaker

from logstore.core.config import Settings
from logstore.schemas.event import ModuleEvent
from logstore.services.store import LastUpdatedStore

logger = logging.getLogger("logstore")

_PENDING_KEY = "logstore_pending_events"

# Store classes this manager knows how to build, keyed by their configured name.
AVAILABLE_STORES: dict[str, type[LastUpdatedStore]] = {
    LastUpdatedStore.name: LastUpdatedStore,
}


class LogManager:
    """Builds the enabled stores and delivers host events to them.

    Events raised inside a host transaction are held until that transaction
    commits and are discarded if it rolls back, so no store records a change
    that never happened.
    """

    def __init__(self, config: Settings, session_factory: sessionmaker[Session]) -> None:
        self._config = config
        self._stores: dict[str, LastUpdatedStore] = {}
        for name in config.enabled_store_names:
            store_cls = AVAILABLE_STORES.get(name)
            if store_cls is None:
                logger.warning("[LogStore] Unknown log store %r in ENABLED_STORES; skipped.", name)
                continue
            self._stores[name] = store_cls(config, session_factory)

    def get_readers(self) -> dict[str, LastUpdatedStore]:
        return dict(self._stores)

    def get_writers(self) -> dict[str, LastUpdatedStore]:
        return {name: store for name, store in self._stores.items() if store.is_logging()}

    def trigger(self, event: ModuleEvent | Mapping[str, Any], session: Session | None = None) -> None:
        """Deliver ``event`` now, or after ``session`` commits if it is inside a transaction."""
        if session is not None and session.in_transaction():
            self._defer(session, event)
            return
        self.dispatch(event)

    def dispatch(self, event: ModuleEvent | Mapping[str, Any]) -> bool:
        handled = False
        for store in self.get_writers().values():
            handled = store.handle(event) or handled
        return handled

    def _defer(self, session: Session, event: ModuleEvent | Mapping[str, Any]) -> None:
        if not sa_event.contains(session, "after_commit", self._flush_pending):
            sa_event.listen(session, "after_commit", self._flush_pending)
            sa_event.listen(session, "after_soft_rollback", self._discard_pending)
        transaction = session.get_nested_transaction() or session.get_transaction()
        session.info.setdefault(_PENDING_KEY, []).append((transaction, event))

    def _flush_pending(self, session: Session) -> None:
        failures: list[Exception] = []
        for _, queued in session.info.pop(_PENDING_KEY, []):
            try:
                self.dispatch(queued)
            except Exception as exc:
                logger.exception("[LogStore] Delivery of a committed event failed: %s", exc)
                failures.append(exc)
        if failures:
            raise failures[0]

    def _discard_pending(self, session: Session, previous_transaction) -> None:
        pending = session.info.get(_PENDING_KEY)
        if not pending:
            return
        kept = [
            (transaction, event)
            for transaction, event in pending
            if not _within(transaction, previous_transaction)
        ]
        session.info[_PENDING_KEY] = kept
        if len(kept) != len(pending):
            logger.info(
                "[LogStore] Discarded %s event(s) from a rolled back transaction.",
                len(pending) - len(kept),
            )


def _within(transaction, ancestor) -> bool:
    while transaction is not None:
        if transaction is ancestor:
            return True
        transaction = transaction.parent
    return False


def get_log_manager(config: Settings, session_factory: sessionmaker[Session]) -> LogManager:
    return LogManager(config, session_factory)
