from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from logstore.core.event_types import EventKind


class ModuleEvent(BaseModel):
    """A host event as delivered after its transaction committed.

    Field aliases follow the host's wire names (``eventname``, ``cmid``...).
    """

    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field(alias="eventname")
    module_id: Optional[int] = Field(default=None, alias="cmid")
    course_id: Optional[int] = Field(default=None, alias="courseid")
    user_id: Optional[int] = Field(default=None, alias="userid")
    time_created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="timecreated")
    other: Optional[Dict[str, Any]] = None

    @field_validator("event_name")
    @classmethod
    def validate_event_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("event_name must not be empty")
        return value.strip()

    @field_validator("time_created")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def kind(self) -> str:
        return EventKind.from_event_name(self.event_name)


class EventAccepted(BaseModel):
    event_name: str
    kind: str
    handled: bool
