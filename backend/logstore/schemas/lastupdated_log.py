import json
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class LastUpdatedRead(BaseModel):
    id: int
    module_id: int
    course_id: int
    last_updated: datetime
    user_id: int | None
    payload: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("payload", mode="before")
    @classmethod
    def decode_payload(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value) if value else None
        return value
