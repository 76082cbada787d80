from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone
import uuid

from .utils import get_download_url

EVENT_TYPES = [
    "Wedding",
    "Birthday Party",
    "Conference",
    "Concert",
    "Corporate Event",
    "Graduation",
    "Workshop",
    "Social Gathering",
    "Other",
]
OTHER_EVENT_TYPE = "Other"


class Event(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='events'
    )
    title = models.CharField(max_length=200)
    description = models.TextField()
    date = models.DateField()
    location = models.CharField(max_length=255)
    event_type = models.CharField(max_length=100)
    custom_event_type = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def get_upload_path(self):
        return reverse('upload_page', args=[self.id])

    def get_gallery_path(self):
        return reverse('gallery', args=[self.id])


class RecordType(models.TextChoices):
    IMAGE = "image", "Image"
    MESSAGE = "message", "Message"
    COMBINED = "combined", "Image with message"


class EventRecordManager(models.Manager):
    """Only way records get written: one constructor per record type."""

    def create_image(self, event, *, url, file_name, s3_key="", group_id=""):
        return self.create(
            event=event,
            type=RecordType.IMAGE,
            url=url,
            s3_key=s3_key,
            file_name=file_name,
            group_id=group_id,
        )

    def create_message(self, event, *, message):
        return self.create(event=event, type=RecordType.MESSAGE, message=message)

    def create_combined(self, event, *, url, file_name, message, s3_key="", group_id=""):
        return self.create(
            event=event,
            type=RecordType.COMBINED,
            url=url,
            s3_key=s3_key,
            file_name=file_name,
            message=message,
            group_id=group_id,
        )


class EventRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='records')
    type = models.CharField(max_length=10, choices=RecordType.choices)
    url = models.URLField(max_length=1000, blank=True, default="")
    s3_key = models.CharField(max_length=500, blank=True, default="")
    file_name = models.CharField(max_length=255, blank=True, default="")
    message = models.TextField(blank=True, default="")
    group_id = models.CharField(max_length=64, blank=True, default="")
    uploaded_at = models.DateTimeField(default=timezone.now)

    objects = EventRecordManager()

    class Meta:
        ordering = ['-uploaded_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(type=RecordType.IMAGE, message="") & ~Q(url="")
                    | Q(type=RecordType.MESSAGE, url="") & ~Q(message="")
                    | Q(type=RecordType.COMBINED) & ~Q(url="") & ~Q(message="")
                ),
                name="event_record_type_matches_fields",
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} for {self.event.title}"

    @property
    def has_image(self):
        return bool(self.url)

    @property
    def has_message(self):
        return bool(self.message)

    def get_download_url(self, s3_client=None):
        if self.s3_key:
            return get_download_url(self.s3_key, s3_client)
        return self.url

    @property
    def group_key(self):
        return self.group_id or str(self.id)

    def clean(self):
        expected = {
            RecordType.IMAGE: (True, False),
            RecordType.MESSAGE: (False, True),
            RecordType.COMBINED: (True, True),
        }.get(self.type)
        if expected is None:
            raise ValidationError({'type': "Unknown record type"})
        if (self.has_image, self.has_message) != expected:
            raise ValidationError(
                f"A {self.type} record needs "
                f"{'a' if expected[0] else 'no'} url and "
                f"{'a' if expected[1] else 'no'} message"
            )
