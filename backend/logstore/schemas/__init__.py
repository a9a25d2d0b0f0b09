from logstore.schemas.event import EventAccepted, ModuleEvent
from logstore.schemas.lastupdated_log import LastUpdatedRead

__all__ = [
    "EventAccepted",
    "ModuleEvent",
    "LastUpdatedRead",
]
