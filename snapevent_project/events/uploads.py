"""
Guest upload batches.

An ``UploadBatch`` lives for one upload request. It holds the files a guest
picked plus an optional pending message, pushes each file to S3 and writes
one ``EventRecord`` per stored file.
"""
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional

from .models import EventRecord
from .utils import UploadError, get_s3_client, upload_photo_to_s3, validate_image_file

logger = logging.getLogger(__name__)


@dataclass
class UploadTask:
    file: object
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    progress: int = 0
    uploading: bool = False
    completed: bool = False
    error: Optional[str] = None
    record: Optional[EventRecord] = None

    @property
    def is_terminal(self):
        return self.completed or self.error is not None

    @property
    def name(self):
        return getattr(self.file, "name", "")

    def release(self):
        close = getattr(self.file, "close", None)
        if close is not None:
            close()

    def as_dict(self):
        return {
            "id": self.id,
            "file_name": self.name,
            "progress": self.progress,
            "completed": self.completed,
            "error": self.error,
            "record_id": str(self.record.id) if self.record else None,
        }


@dataclass(frozen=True)
class UploadSummary:
    total: int
    successful: int
    failed: int

    def as_dict(self):
        return {"total": self.total, "successful": self.successful, "failed": self.failed}


class UploadBatch:
    def __init__(self, event, message=""):
        self.event = event
        self.message = message or ""
        self.tasks = []

    def submit_files(self, files):
        new_tasks = [UploadTask(file=f) for f in files]
        self.tasks.extend(new_tasks)
        return new_tasks

    def get(self, task_id):
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(task_id)

    def remove(self, task_id):
        task = self.get(task_id)
        self.tasks.remove(task)
        task.release()

    def upload_one(self, task_id):
        task = self.get(task_id)
        if not self._start(task):
            return task
        try:
            s3_data = self._store_blob(task, get_s3_client())
        except Exception as e:
            self._fail(task, e)
        else:
            self._write_record(task, s3_data)
        return task

    def upload_all(self):
        pending = [task for task in self.tasks if self._start(task)]
        if not pending:
            return

        # One worker per file: puts run side by side, records are written
        # here as each put finishes. boto3's default session is not
        # thread-safe, so workers share one client built on this thread.
        try:
            s3_client = get_s3_client()
        except Exception as e:
            for task in pending:
                self._fail(task, e)
            return
        with ThreadPoolExecutor(max_workers=len(pending)) as pool:
            futures = {
                pool.submit(self._store_blob, task, s3_client): task for task in pending
            }
            for future in as_completed(futures):
                task = futures[future]
                try:
                    s3_data = future.result()
                except Exception as e:
                    self._fail(task, e)
                else:
                    self._write_record(task, s3_data)

    def post_message(self, text=None):
        text = (self.message if text is None else text).strip()
        if not text:
            return None
        try:
            record = EventRecord.objects.create_message(self.event, message=text)
        except Exception as e:
            logger.exception("[upload] message for event %s failed", self.event.id)
            raise UploadError(str(e)) from e
        self.message = ""
        logger.info("[upload] saved message id=%s event=%s", record.id, self.event.id)
        return record

    @property
    def summary(self):
        if not self.tasks or not all(task.is_terminal for task in self.tasks):
            return None
        successful = sum(1 for task in self.tasks if task.completed)
        failed = sum(1 for task in self.tasks if task.error is not None)
        return UploadSummary(total=len(self.tasks), successful=successful, failed=failed)

    def _start(self, task):
        if task.uploading or task.completed:
            return False
        task.uploading = True
        task.error = None
        return True

    def _store_blob(self, task, s3_client):
        is_valid, error = validate_image_file(task.file)
        if not is_valid:
            raise UploadError(error)

        s3_data = upload_photo_to_s3(task.file, self.event.id, s3_client=s3_client)
        if not s3_data or not s3_data.get("s3_url"):
            raise UploadError("S3 upload returned no URL")
        return s3_data

    def _take_message(self):
        text = self.message.strip()
        self.message = ""
        return text

    def _write_record(self, task, s3_data):
        try:
            message = self._take_message()
            if message:
                record = EventRecord.objects.create_combined(
                    self.event,
                    url=s3_data["s3_url"],
                    s3_key=s3_data["s3_key"],
                    file_name=task.name,
                    message=message,
                )
            else:
                record = EventRecord.objects.create_image(
                    self.event,
                    url=s3_data["s3_url"],
                    s3_key=s3_data["s3_key"],
                    file_name=task.name,
                )
        except Exception as e:
            if message:
                self.message = message
            self._fail(task, e)
            return

        task.record = record
        task.uploading = False
        task.completed = True
        task.progress = 100
        logger.info("[upload] saved %s record id=%s url=%r", record.type, record.id, record.url)

    def _fail(self, task, error):
        logger.error("[upload] %r failed: %s", task.name, error)
        task.uploading = False
        task.error = str(error) or "Upload failed"
