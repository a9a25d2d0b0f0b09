from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from logstore.core.config import Settings
from logstore.core.exceptions import MalformedEvent
from logstore.crud import lastupdated_log as crud_lastupdated
from logstore.schemas.event import ModuleEvent
from logstore.services.payload import build_payload

logger = logging.getLogger("logstore")


def _require(event: ModuleEvent, *fields: str) -> None:
    missing = [name for name in fields if getattr(event, name) is None]
    if missing:
        raise MalformedEvent(f"{event.event_name} is missing {', '.join(missing)}")


def handle_module_upsert(db: Session, event: ModuleEvent, config: Settings) -> int:
    _require(event, "module_id", "course_id")
    payload = build_payload(event, config.LOGSTORE_JSONFORMAT)
    inserted = crud_lastupdated.upsert_record(
        db,
        module_id=event.module_id,
        course_id=event.course_id,
        last_updated=event.time_created,
        payload=payload.serialize(),
        user_id=event.user_id,
    )
    logger.debug(
        "[LogStore] %s record for course module %s.",
        "Inserted" if inserted else "Updated",
        event.module_id,
    )
    return 1


def handle_module_deleted(db: Session, event: ModuleEvent, config: Settings) -> int:
    _require(event, "module_id")
    deleted = crud_lastupdated.delete_by_module(db, module_id=event.module_id)
    logger.debug("[LogStore] Removed %s record(s) for course module %s.", deleted, event.module_id)
    return deleted


def handle_course_deleted(db: Session, event: ModuleEvent, config: Settings) -> int:
    _require(event, "course_id")
    deleted = crud_lastupdated.delete_by_course(db, course_id=event.course_id)
    logger.debug("[LogStore] Removed %s record(s) for course %s.", deleted, event.course_id)
    return deleted
