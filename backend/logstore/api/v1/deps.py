from logstore.core.config import settings
from logstore.db.session import SessionLocal
from logstore.services.log_manager import LogManager, get_log_manager
from logstore.services.store import LastUpdatedStore


def get_manager() -> LogManager:
    return get_log_manager(settings, SessionLocal)


def get_store() -> LastUpdatedStore:
    return LastUpdatedStore(settings, SessionLocal)
