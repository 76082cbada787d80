import logging
import zipfile
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from .models import Event, EventRecord
from .utils import fetch_blob, get_s3_client

logger = logging.getLogger(__name__)

GRID = "grid"
FULLSCREEN = "fullscreen"

MIN_SWIPE_DISTANCE = 50

KEY_ACTIONS = {
    "ArrowLeft": "prev",
    "ArrowRight": "next",
    "Escape": "close",
}


@dataclass
class GalleryData:
    event: Optional[Event] = None
    records: List[EventRecord] = field(default_factory=list)


def load_gallery(event_id):
    """Event plus its records, newest first. Empty on any lookup failure."""
    try:
        event = Event.objects.get(id=event_id)
        records = list(event.records.order_by("-uploaded_at"))
    except (Event.DoesNotExist, ValidationError):
        logger.warning("Gallery requested for unknown event %s", event_id)
        return GalleryData()
    except DatabaseError:
        logger.exception("Error fetching gallery for event %s", event_id)
        return GalleryData()
    return GalleryData(event=event, records=records)


def partition_records(records):
    """Split into (image records, text-only records); captioned images count as images."""
    images, texts = [], []
    for record in records:
        if record.url:
            images.append(record)
        elif record.message:
            texts.append(record)
    return images, texts


def group_images(image_records):
    groups = {}
    for record in image_records:
        groups.setdefault(record.group_key, []).append(record)
    return groups


class Lightbox:
    """Grid/fullscreen navigation over a fixed number of images."""

    def __init__(self, count, state=GRID, index=0):
        self.count = count
        self.state = GRID
        self.index = 0
        if state == FULLSCREEN:
            self.open(index)

    @property
    def is_fullscreen(self):
        return self.state == FULLSCREEN

    def open(self, index):
        if self.count <= 0:
            return False
        self.index = min(max(index, 0), self.count - 1)
        self.state = FULLSCREEN
        return True

    def close(self):
        self.state = GRID

    def next(self):
        if self.is_fullscreen:
            self.index = (self.index + 1) % self.count

    def prev(self):
        if self.is_fullscreen:
            self.index = (self.index - 1) % self.count

    def peek(self, step):
        return (self.index + step) % self.count if self.count else 0

    def apply(self, action):
        handler = {"next": self.next, "prev": self.prev, "close": self.close}.get(action)
        if handler is None:
            return False
        handler()
        return True

    def navigate(self, nav):
        """Accepts either an action name or a key name."""
        if not self.is_fullscreen:
            return False
        return self.apply(KEY_ACTIONS.get(nav, nav))

    def handle_swipe(self, start_x, end_x):
        if not self.is_fullscreen:
            return False
        distance = end_x - start_x
        if abs(distance) <= MIN_SWIPE_DISTANCE:
            return False
        return self.apply("prev" if distance > 0 else "next")


class Selection:
    def __init__(self, ids=()):
        self._ids = set(str(i) for i in ids)

    def toggle(self, record_id):
        record_id = str(record_id)
        if record_id in self._ids:
            self._ids.discard(record_id)
            return False
        self._ids.add(record_id)
        return True

    def __contains__(self, record_id):
        return str(record_id) in self._ids

    def __iter__(self):
        return iter(sorted(self._ids))

    def __len__(self):
        return len(self._ids)

    @staticmethod
    def session_key(event_id):
        return f"gallery-selection-{event_id}"

    @classmethod
    def from_session(cls, session, event_id):
        return cls(session.get(cls.session_key(event_id), []))

    def save(self, session, event_id):
        session[self.session_key(event_id)] = list(self)


def signing_client():
    """One S3 client for signing a whole page or archive, when URLs need signing."""
    if getattr(settings, "AWS_QUERYSTRING_AUTH", False):
        return get_s3_client()
    return None


def attach_download_urls(records):
    s3_client = signing_client()
    for record in records:
        record.download_url = record.get_download_url(s3_client)
    return records


def archive_name(record, used):
    name = record.file_name or record.url.rsplit("/", 1)[-1].split("?", 1)[0] or str(record.id)
    candidate, n = name, 1
    while candidate in used:
        stem, dot, ext = name.rpartition(".")
        candidate = f"{stem}-{n}.{ext}" if dot else f"{name}-{n}"
        n += 1
    used.add(candidate)
    return candidate


def build_download_archive(records):
    """Zip every image; a blob that cannot be fetched is skipped."""
    buffer = BytesIO()
    saved, failed = [], []
    used = set()
    s3_client = signing_client()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
        for record in records:
            if not record.url:
                continue
            try:
                content = fetch_blob(record.get_download_url(s3_client))
            except Exception as e:
                logger.error("Error downloading record %s: %s", record.id, e)
                failed.append(record)
                continue
            zip_file.writestr(archive_name(record, used), content)
            saved.append(record)

    return buffer.getvalue(), saved, failed
