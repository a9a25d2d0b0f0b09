"""
Tests for store enabling and after-commit event delivery.
"""

import pytest
from sqlalchemy import text

from logstore.core.config import STORE_NAME, Settings
from logstore.core.exceptions import ConcurrentWriteConflict
from logstore.crud import lastupdated_log as crud_lastupdated
from logstore.models.lastupdated_log import LastUpdatedLog
from logstore.services.log_manager import get_log_manager
from logstore.services.store import LastUpdatedStore
from tests.factories import NOW, created, updated


class TestEnabling:
    """Test which stores the manager builds."""

    def test_no_readers_when_all_stores_disabled(self, session_factory):
        manager = get_log_manager(Settings(ENABLED_STORES=""), session_factory)

        assert manager.get_readers() == {}
        assert manager.get_writers() == {}

    def test_enabled_store_is_reader_and_writer(self, manager):
        readers = manager.get_readers()

        assert list(readers) == [STORE_NAME]
        store = readers[STORE_NAME]
        assert isinstance(store, LastUpdatedStore)
        assert store.is_logging()
        assert manager.get_writers() == readers

    def test_unknown_store_name_is_skipped(self, session_factory):
        manager = get_log_manager(Settings(ENABLED_STORES=f"logstore_standard, {STORE_NAME}"), session_factory)

        assert list(manager.get_readers()) == [STORE_NAME]

    def test_disabled_manager_records_nothing(self, session_factory, store):
        manager = get_log_manager(Settings(ENABLED_STORES=""), session_factory)

        assert manager.dispatch(created(1, 10)) is False
        assert store.count_records() == 0


class TestDelivery:
    """Test events wait for the host transaction."""

    def test_trigger_without_session_delivers_immediately(self, manager, store):
        manager.trigger(created(1, 10))

        assert store.count_records() == 1

    def test_events_wait_for_commit(self, manager, store, session_factory):
        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))

        manager.trigger(created(1, 10), session=host)
        manager.trigger(created(2, 20), session=host)
        assert store.count_records() == 0

        host.commit()
        host.close()

        assert [record.module_id for record in store.list_records()] == [1, 2]

    def test_events_discarded_on_rollback(self, manager, store, session_factory):
        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))
        manager.trigger(created(1, 10), session=host)
        host.rollback()

        host.begin()
        host.execute(text("SELECT 1"))
        manager.trigger(updated(2, 20), session=host)
        host.commit()
        host.close()

        assert [record.module_id for record in store.list_records()] == [2]

    def test_session_outside_transaction_delivers_immediately(self, manager, store, session_factory):
        host = session_factory()

        manager.trigger(created(1, 10), session=host)
        host.close()

        assert store.count_records() == 1

    def test_events_from_rolled_back_savepoint_are_discarded(self, manager, store, session_factory):
        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))
        savepoint = host.begin_nested()
        manager.trigger(created(1, 10), session=host)
        savepoint.rollback()
        manager.trigger(created(2, 20), session=host)
        host.commit()
        host.close()

        assert store.get_record(1) is None
        assert [record.module_id for record in store.list_records()] == [2]

    def test_events_from_released_savepoint_are_kept(self, manager, store, session_factory):
        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))
        savepoint = host.begin_nested()
        manager.trigger(created(1, 10), session=host)
        savepoint.commit()
        host.commit()
        host.close()

        assert store.count_records() == 1

    def test_outer_rollback_discards_released_savepoint_events(self, manager, store, session_factory):
        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))
        savepoint = host.begin_nested()
        manager.trigger(created(1, 10), session=host)
        savepoint.commit()
        host.rollback()
        host.close()

        assert store.count_records() == 0

    def test_failed_delivery_does_not_drop_later_events(self, manager, store, session_factory, monkeypatch):
        real_update = crud_lastupdated._update_record

        def conflicting_update(db, module_id, values):
            if module_id == 1:
                return 0
            return real_update(db, module_id, values)

        db = session_factory()
        db.add(LastUpdatedLog(module_id=1, course_id=10, last_updated=NOW))
        db.commit()
        db.close()
        monkeypatch.setattr(crud_lastupdated, "_update_record", conflicting_update)
        monkeypatch.setattr(crud_lastupdated, "_record_exists", lambda db, module_id: False)

        host = session_factory()
        host.begin()
        host.execute(text("SELECT 1"))
        manager.trigger(updated(1, 10), session=host)
        manager.trigger(created(2, 20), session=host)
        with pytest.raises(ConcurrentWriteConflict):
            host.commit()
        host.close()

        assert store.get_record(2) is not None
