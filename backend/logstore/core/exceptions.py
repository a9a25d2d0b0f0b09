class LogStoreError(Exception):
    """Base class for log store failures."""


class StorageUnavailable(LogStoreError):
    """The database could not be reached or used."""


class ConcurrentWriteConflict(LogStoreError):
    def __init__(self, module_id: int) -> None:
        super().__init__(f"Concurrent write conflict for course module {module_id}")
        self.module_id = module_id


class MalformedEvent(LogStoreError):
    """An event is missing a field its handler needs."""
