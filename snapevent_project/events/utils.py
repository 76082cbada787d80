import qrcode
from io import BytesIO
import base64
import logging
import boto3
import requests
from django.conf import settings
from botocore.exceptions import ClientError
import uuid

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """Raised when a photo or message cannot be stored."""


def _qr_image(url):
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(url)
    qr.make(fit=True)

    return qr.make_image(fill_color="black", back_color="white")


def generate_qr_png(url):
    buffer = BytesIO()
    _qr_image(url).save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_code(url):
    img_str = base64.b64encode(generate_qr_png(url)).decode()
    return f"data:image/png;base64,{img_str}"


def public_url(request, path):
    """Absolute link for guests, preferring the configured public host."""
    base_url = getattr(settings, "PUBLIC_BASE_URL", "")
    if base_url:
        return base_url.rstrip("/") + path
    return request.build_absolute_uri(path)


def get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_S3_REGION_NAME,
    )


def object_url(s3_key):
    return f"https://{settings.AWS_STORAGE_BUCKET_NAME}.s3.{settings.AWS_S3_REGION_NAME}.amazonaws.com/{s3_key}"


def get_download_url(s3_key, s3_client=None):
    """Readable URL for a stored object, signed at call time when querystring auth is on."""
    if getattr(settings, "AWS_QUERYSTRING_AUTH", False):
        s3_client = s3_client or get_s3_client()
        return s3_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.AWS_STORAGE_BUCKET_NAME, "Key": s3_key},
            ExpiresIn=getattr(settings, "AWS_QUERYSTRING_EXPIRE", 3600),
        )
    return object_url(s3_key)


def upload_photo_to_s3(file, event_id, s3_client=None):
    # Clients are thread-safe, sessions are not: callers on worker threads
    # pass in a client built on their own thread.
    s3_client = s3_client or get_s3_client()

    file_extension = file.name.rsplit(".", 1)[-1].lower() if "." in file.name else "jpg"
    s3_key = f"events/{event_id}/{uuid.uuid4()}.{file_extension}"

    try:
        # New buckets reject ACLs, so objects go up without one.
        s3_client.upload_fileobj(
            file,
            settings.AWS_STORAGE_BUCKET_NAME,
            s3_key,
            ExtraArgs={
                "ContentType": getattr(file, "content_type", None) or "application/octet-stream"
            },
        )
    except ClientError as e:
        raise UploadError(f"S3 upload failed: {e}") from e

    return {"s3_key": s3_key, "s3_url": object_url(s3_key)}


def validate_image_file(file):
    max_size = getattr(settings, "MAX_UPLOAD_SIZE", 10 * 1024 * 1024)
    allowed_types = getattr(
        settings, "ALLOWED_IMAGE_TYPES", ["image/jpeg", "image/png", "image/jpg"]
    )

    if file.size > max_size:
        return False, f"File size exceeds {max_size / (1024 * 1024)} MB"

    content_type = getattr(file, "content_type", None)

    # Camera captures built with JS File() can arrive as
    # 'application/octet-stream'; sniff the magic bytes instead.
    if content_type not in allowed_types:
        header = file.read(12)
        file.seek(0)

        if header[:3] == b"\xff\xd8\xff":
            pass  # JPEG
        elif header[:8] == b"\x89PNG\r\n\x1a\n":
            pass
        elif header[:4] == b"RIFF" and header[8:12] == b"WEBP":
            pass
        else:
            return False, "Invalid file type"

    return True, None


def fetch_blob(url):
    response = requests.get(url, timeout=10)
    response.raise_for_status()
    return response.content
