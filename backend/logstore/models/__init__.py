from logstore.models.lastupdated_log import LastUpdatedLog

__all__ = [
    "LastUpdatedLog",
]
