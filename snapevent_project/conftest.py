import datetime
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from events.models import Event

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def client():
    return Client()


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username="host@example.com",
        email="host@example.com",
        password="secret123",
        first_name="Ana",
    )


@pytest.fixture
def auth_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def event(db, user):
    return Event.objects.create(
        owner=user,
        title="Ana's Party",
        description="Birthday at the beach",
        date=datetime.date(2025, 6, 1),
        location="Lisbon",
        event_type="Birthday Party",
    )


@pytest.fixture
def make_jpeg():
    def _make(name="photo.jpg"):
        return SimpleUploadedFile(name, JPEG_BYTES, content_type="image/jpeg")
    return _make


@pytest.fixture
def fake_s3():
    """Stands in for the S3 put; the mock can be given a side_effect per test."""
    def _store(file, event_id, s3_client=None):
        key = f"events/{event_id}/{file.name}"
        return {"s3_key": key, "s3_url": f"https://s3.example.com/{key}"}

    with patch("events.uploads.upload_photo_to_s3", side_effect=_store) as mock_put:
        yield mock_put


@pytest.fixture(autouse=True)
def s3_client_factory():
    """Builds the client handed to every put in a batch; never talks to AWS."""
    with patch("events.uploads.get_s3_client", return_value=MagicMock(name="s3_client")) as factory:
        yield factory
