"""
Tests for settings, event kinds, event schema and payload variants.
"""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from logstore.core.config import STORE_NAME, Settings
from logstore.core.event_types import EventKind
from logstore.schemas.event import ModuleEvent
from logstore.schemas.lastupdated_log import LastUpdatedRead
from logstore.services.payload import JsonPayload, NoPayload, build_payload
from tests.factories import make_event


class TestSettings:
    """Test settings normalization."""

    def test_enabled_stores_are_normalized(self):
        config = Settings(ENABLED_STORES=f" logstore_standard ,, {STORE_NAME} ")

        assert config.enabled_store_names == ["logstore_standard", STORE_NAME]
        assert config.is_store_enabled()

    def test_enabled_stores_accepts_a_list(self):
        config = Settings(ENABLED_STORES=[STORE_NAME])

        assert config.ENABLED_STORES == STORE_NAME

    def test_empty_enabled_stores_disables_everything(self):
        config = Settings(ENABLED_STORES="")

        assert config.enabled_store_names == []
        assert not config.is_store_enabled()

    def test_loglifetime_blank_or_negative_means_forever(self):
        assert Settings(LOGSTORE_LOGLIFETIME="").LOGSTORE_LOGLIFETIME == 0
        assert Settings(LOGSTORE_LOGLIFETIME=-5).LOGSTORE_LOGLIFETIME == 0
        assert Settings(LOGSTORE_LOGLIFETIME="30").LOGSTORE_LOGLIFETIME == 30

    def test_blank_timezone_falls_back_to_utc(self):
        assert Settings(APP_TIMEZONE="  ").APP_TIMEZONE == "UTC"

    def test_cleanup_batch_size_must_be_positive(self):
        for size in (0, -10):
            with pytest.raises(ValidationError):
                Settings(CLEANUP_BATCH_SIZE=size)

        assert Settings().CLEANUP_BATCH_SIZE == 1000


class TestEventKind:
    def test_from_event_name_strips_namespace(self):
        assert EventKind.from_event_name("\\core\\event\\course_module_deleted") == "course_module_deleted"
        assert EventKind.from_event_name("course_deleted") == "course_deleted"


class TestModuleEvent:
    """Test event parsing."""

    def test_naive_time_is_treated_as_utc(self):
        event = ModuleEvent(event_name="course_module_updated", time_created=datetime(2026, 1, 1, 8, 30))

        assert event.time_created == datetime(2026, 1, 1, 8, 30, tzinfo=timezone.utc)

    def test_wire_names_are_accepted(self):
        event = ModuleEvent.model_validate({"eventname": "course_module_created", "cmid": 4, "courseid": 9})

        assert (event.module_id, event.course_id, event.kind) == (4, 9, "course_module_created")

    def test_time_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        event = ModuleEvent(event_name="course_module_created")

        assert event.time_created >= before


class TestPayload:
    """Test the payload variant chosen at write time."""

    def test_json_payload(self):
        payload = build_payload(make_event("course_module_updated", 1, 2, other={"name": "Quiz 1"}), True)

        assert isinstance(payload, JsonPayload)
        assert json.loads(payload.serialize())["other"] == {"name": "Quiz 1"}

    def test_no_payload(self):
        payload = build_payload(make_event("course_module_updated", 1, 2), False)

        assert isinstance(payload, NoPayload)
        assert payload.serialize() is None

    def test_read_schema_decodes_payload(self):
        record = LastUpdatedRead(
            id=1,
            module_id=1,
            course_id=2,
            last_updated=datetime(2026, 1, 1, tzinfo=timezone.utc),
            user_id=None,
            payload='{"other": {}}',
        )

        assert record.payload == {"other": {}}
