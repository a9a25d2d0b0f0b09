import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from logstore.core.config import STORE_NAME, Settings
from logstore.db.base import Base
from logstore.db.session import build_session_factory
from logstore.services.log_manager import get_log_manager
from logstore.services.store import LastUpdatedStore
from logstore import models  # noqa: F401


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def config():
    return Settings(
        ENABLED_STORES=STORE_NAME,
        LOGSTORE_JSONFORMAT=True,
        LOGSTORE_LOGLIFETIME=0,
        CLEANUP_BATCH_SIZE=2,
    )


@pytest.fixture
def store(config, session_factory):
    return LastUpdatedStore(config, session_factory)


@pytest.fixture
def manager(config, session_factory):
    return get_log_manager(config, session_factory)


@pytest.fixture
def unreachable_session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'logstore.db'}")
    yield build_session_factory(engine)
    engine.dispose()
