"""
Scheduled retention cleanup for the last-updated course module log store.

Records whose ``last_updated`` is older than ``LOGSTORE_LOGLIFETIME`` days
are deleted. A lifetime of 0 keeps records forever.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from logstore.core.config import Settings
from logstore.core.exceptions import StorageUnavailable
from logstore.crud import lastupdated_log as crud_lastupdated

logger = logging.getLogger("cleanup")

COMPLETION_MESSAGE = " Deleted old log records from last_viewed_course_module log store."
FAILURE_MESSAGE = " Failed to delete old log records from last_viewed_course_module log store."


class CleanupTask:
    name = "Log table cleanup"

    def __init__(
        self,
        config: Settings,
        session_factory: sessionmaker[Session],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def cutoff(self) -> datetime | None:
        lifetime = self._config.LOGSTORE_LOGLIFETIME
        if not lifetime:
            return None
        return self._clock() - timedelta(days=lifetime)

    def execute(self) -> int:
        """Delete expired records and report on stdout. Returns the number deleted."""
        cutoff = self.cutoff()
        if cutoff is None:
            logger.info("[Cleanup] Log lifetime is 0; nothing to delete.")
            print(COMPLETION_MESSAGE)
            return 0

        db = self._session_factory()
        try:
            deleted = crud_lastupdated.delete_older_than(
                db,
                cutoff=cutoff,
                batch_size=self._config.CLEANUP_BATCH_SIZE,
            )
        except OperationalError as exc:
            db.rollback()
            logger.exception("[Cleanup] Storage unavailable: %s", exc)
            print(FAILURE_MESSAGE)
            raise StorageUnavailable(str(exc.orig or exc)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("[Cleanup] Cleanup failed: %s", exc)
            print(FAILURE_MESSAGE)
            return 0
        finally:
            db.close()

        logger.info("[Cleanup] Deleted %s record(s) last updated before %s.", deleted, cutoff.isoformat())
        print(COMPLETION_MESSAGE)
        return deleted
