from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from logstore.core.exceptions import ConcurrentWriteConflict
from logstore.models.lastupdated_log import LastUpdatedLog


def get_record(db: Session, module_id: int) -> LastUpdatedLog | None:
    return db.query(LastUpdatedLog).filter(LastUpdatedLog.module_id == module_id).first()


def list_records(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    course_id: int | None = None,
    updated_since: datetime | None = None,
) -> list[LastUpdatedLog]:
    query = db.query(LastUpdatedLog)
    if course_id is not None:
        query = query.filter(LastUpdatedLog.course_id == course_id)
    if updated_since is not None:
        query = query.filter(LastUpdatedLog.last_updated >= updated_since)
    return query.order_by(LastUpdatedLog.id.asc()).offset(skip).limit(limit).all()


def count_records(db: Session, course_id: int | None = None) -> int:
    query = db.query(LastUpdatedLog)
    if course_id is not None:
        query = query.filter(LastUpdatedLog.course_id == course_id)
    return query.count()


def _record_exists(db: Session, module_id: int) -> bool:
    return db.query(LastUpdatedLog.id).filter(LastUpdatedLog.module_id == module_id).first() is not None


def _update_record(db: Session, module_id: int, values: dict) -> int:
    # Rows already holding a newer time are left alone.
    return (
        db.query(LastUpdatedLog)
        .filter(
            LastUpdatedLog.module_id == module_id,
            LastUpdatedLog.last_updated <= values["last_updated"],
        )
        .update(values, synchronize_session=False)
    )


def upsert_record(
    db: Session,
    module_id: int,
    course_id: int,
    last_updated: datetime,
    payload: str | None = None,
    user_id: int | None = None,
) -> bool:
    """Write the record for ``module_id``; returns True when a row was inserted.

    The update runs first. An event older than the stored time leaves the row
    as it is. When no row exists, an insert is attempted; if a concurrent
    writer inserted the same module in between, the unique constraint fires
    and the write is retried once as an update.
    """
    values = {
        "course_id": course_id,
        "last_updated": last_updated,
        "payload": payload,
        "user_id": user_id,
    }
    if _update_record(db, module_id, values) or _record_exists(db, module_id):
        db.commit()
        return False

    db.add(LastUpdatedLog(module_id=module_id, **values))
    try:
        db.commit()
        return True
    except IntegrityError as exc:
        db.rollback()
        if not (_update_record(db, module_id, values) or _record_exists(db, module_id)):
            db.rollback()
            raise ConcurrentWriteConflict(module_id) from exc
        db.commit()
        return False


def delete_by_module(db: Session, module_id: int) -> int:
    deleted = (
        db.query(LastUpdatedLog)
        .filter(LastUpdatedLog.module_id == module_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def delete_by_course(db: Session, course_id: int) -> int:
    deleted = (
        db.query(LastUpdatedLog)
        .filter(LastUpdatedLog.course_id == course_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def delete_older_than(db: Session, cutoff: datetime, batch_size: int = 1000) -> int:
    """Delete records last updated before ``cutoff`` in primary-key batches."""
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    total = 0
    while True:
        ids = [
            row_id
            for (row_id,) in db.query(LastUpdatedLog.id)
            .filter(LastUpdatedLog.last_updated < cutoff)
            .order_by(LastUpdatedLog.id.asc())
            .limit(batch_size)
            .all()
        ]
        if not ids:
            return total
        total += (
            db.query(LastUpdatedLog)
            .filter(LastUpdatedLog.id.in_(ids))
            .delete(synchronize_session=False)
        )
        db.commit()
