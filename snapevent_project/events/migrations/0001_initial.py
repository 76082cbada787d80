import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("date", models.DateField()),
                ("location", models.CharField(max_length=255)),
                ("event_type", models.CharField(max_length=100)),
                ("custom_event_type", models.CharField(blank=True, max_length=100, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="EventRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[("image", "Image"), ("message", "Message"), ("combined", "Image with message")],
                        max_length=10,
                    ),
                ),
                ("url", models.URLField(blank=True, default="", max_length=1000)),
                ("s3_key", models.CharField(blank=True, default="", max_length=500)),
                ("file_name", models.CharField(blank=True, default="", max_length=255)),
                ("message", models.TextField(blank=True, default="")),
                ("group_id", models.CharField(blank=True, default="", max_length=64)),
                ("uploaded_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="records",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-uploaded_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("message", ""), ("type", "image"), models.Q(("url", ""), _negated=True))
                            | models.Q(("type", "message"), ("url", ""), models.Q(("message", ""), _negated=True))
                            | models.Q(
                                ("type", "combined"),
                                models.Q(("url", ""), _negated=True),
                                models.Q(("message", ""), _negated=True),
                            )
                        ),
                        name="event_record_type_matches_fields",
                    ),
                ],
            },
        ),
    ]
