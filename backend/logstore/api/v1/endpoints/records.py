from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from logstore.api.v1.deps import get_store
from logstore.schemas.lastupdated_log import LastUpdatedRead
from logstore.services.store import LastUpdatedStore

router = APIRouter()


@router.get("/", response_model=list[LastUpdatedRead])
def list_records(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    course_id: int | None = None,
    updated_since: datetime | None = None,
    store: LastUpdatedStore = Depends(get_store),
):
    return store.list_records(
        course_id=course_id,
        updated_since=updated_since,
        skip=skip,
        limit=limit,
    )


@router.get("/{module_id}", response_model=LastUpdatedRead)
def get_record(module_id: int, store: LastUpdatedStore = Depends(get_store)):
    record = store.get_record(module_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return record
