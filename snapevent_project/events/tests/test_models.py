import datetime

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from events.models import Event, EventRecord, RecordType


# ──────────────────────────────────────────────
# Event
# ──────────────────────────────────────────────


@pytest.mark.django_db
class TestEventModel:
    def test_str_returns_title(self, event):
        assert str(event) == "Ana's Party"

    def test_custom_type_absent_by_default(self, event):
        assert event.custom_event_type is None

    def test_public_paths(self, event):
        assert event.get_upload_path() == f"/events/{event.id}/upload/"
        assert event.get_gallery_path() == f"/events/{event.id}/gallery/"

    def test_events_ordered_newest_first(self, event, user):
        newer = Event.objects.create(
            owner=user,
            title="Later",
            description="d",
            date=datetime.date(2025, 7, 1),
            location="Porto",
            event_type="Concert",
        )
        assert list(Event.objects.all()) == [newer, event]


# ──────────────────────────────────────────────
# EventRecord type invariant
# ──────────────────────────────────────────────


@pytest.mark.django_db
class TestEventRecordModel:
    def test_image_record(self, event):
        record = EventRecord.objects.create_image(
            event, url="https://s3.example.com/a.jpg", file_name="a.jpg"
        )
        assert record.type == RecordType.IMAGE
        assert record.has_image and not record.has_message

    def test_message_record(self, event):
        record = EventRecord.objects.create_message(event, message="Congrats!")
        assert record.type == RecordType.MESSAGE
        assert record.has_message and not record.has_image

    def test_combined_record(self, event):
        record = EventRecord.objects.create_combined(
            event, url="https://s3.example.com/a.jpg", file_name="a.jpg", message="Hi"
        )
        assert record.type == RecordType.COMBINED
        assert record.has_image and record.has_message

    @pytest.mark.parametrize(
        "fields",
        [
            {"type": RecordType.IMAGE, "url": "", "message": ""},
            {"type": RecordType.IMAGE, "url": "https://s3.example.com/a.jpg", "message": "x"},
            {"type": RecordType.MESSAGE, "url": "https://s3.example.com/a.jpg", "message": "x"},
            {"type": RecordType.MESSAGE, "url": "", "message": ""},
            {"type": RecordType.COMBINED, "url": "", "message": "x"},
            {"type": RecordType.COMBINED, "url": "https://s3.example.com/a.jpg", "message": ""},
        ],
    )
    def test_database_rejects_mismatched_fields(self, event, fields):
        with pytest.raises(IntegrityError), transaction.atomic():
            EventRecord.objects.create(event=event, **fields)

    def test_clean_rejects_mismatched_fields(self, event):
        record = EventRecord(event=event, type=RecordType.MESSAGE, url="https://s3.example.com/a.jpg")
        with pytest.raises(ValidationError):
            record.clean()

    def test_group_key_falls_back_to_id(self, event):
        record = EventRecord.objects.create_image(
            event, url="https://s3.example.com/a.jpg", file_name="a.jpg"
        )
        assert record.group_key == str(record.id)

    def test_str_includes_event_title(self, event):
        record = EventRecord.objects.create_message(event, message="Hey")
        assert "Ana's Party" in str(record)
