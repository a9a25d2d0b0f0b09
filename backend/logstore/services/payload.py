from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from logstore.schemas.event import ModuleEvent


@dataclass(frozen=True)
class JsonPayload:
    data: Dict[str, Any] = field(default_factory=dict)

    def serialize(self) -> str:
        return json.dumps(self.data, ensure_ascii=False, sort_keys=True, default=str)


@dataclass(frozen=True)
class NoPayload:
    def serialize(self) -> None:
        return None


Payload = Union[JsonPayload, NoPayload]


def build_payload(event: ModuleEvent, jsonformat: bool) -> Payload:
    if not jsonformat:
        return NoPayload()
    return JsonPayload(
        {
            "event_name": event.event_name,
            "user_id": event.user_id,
            "other": event.other or {},
        }
    )
