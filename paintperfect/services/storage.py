# paintperfect/services/storage.py
import mimetypes
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from paintperfect.core.exceptions import StorageError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.core.settings import settings
from paintperfect.observability.metrics import upload_counter, upload_size_hist

# =========================
# Buckets
# =========================
DESIGNS_BUCKET = "designs"
DIMENSIONS_BUCKET = "dimensions"
JOB_UPDATES_BUCKET = "job-updates"
AVATARS_BUCKET = "avatars"

BUCKETS = frozenset({DESIGNS_BUCKET, DIMENSIONS_BUCKET, JOB_UPDATES_BUCKET, AVATARS_BUCKET})

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class StoredFile:
    bucket: str
    key: str
    url: str
    size_bytes: int
    content_type: str


# =========================
# Key helpers
# =========================
def key_join(*parts: str) -> str:
    cleaned = [str(p).strip("/ ") for p in parts if p is not None and str(p).strip("/ ")]
    return "/".join(cleaned)


def file_extension(content_type: Optional[str]) -> str:
    """Extension for an allowed content type; the client's filename is never used."""
    return _EXTENSIONS.get((content_type or "").lower(), "bin")


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def check_key(key: str) -> None:
    """Reject keys that could escape the bucket."""
    if not key:
        raise ValidationError("Empty storage key")
    if key.startswith("/") or key.endswith("/"):
        raise ValidationError("Storage key must not start or end with '/'")
    if ".." in PurePosixPath(key).parts:
        raise ValidationError("Storage key must not contain '..'")


def validate_upload(data: bytes, content_type: Optional[str]) -> str:
    ctype = (content_type or "").lower()
    if ctype not in settings.allowed_mimes:
        raise ValidationError(
            f"Content type not allowed: {ctype or 'unknown'}",
            details={"allowed": settings.allowed_mimes},
        )
    if not data:
        raise ValidationError("Uploaded file is empty")
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(data) > max_bytes:
        raise ValidationError(f"File exceeds {settings.max_upload_mb} MB")
    return ctype


# =========================
# Storage backends
# =========================
class Storage(ABC):
    """Bucketed object storage."""

    @abstractmethod
    def save_bytes(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        ...

    @abstractmethod
    def public_url(self, bucket: str, key: str) -> str:
        ...

    @abstractmethod
    def exists(self, bucket: str, key: str) -> bool:
        ...

    @abstractmethod
    def delete(self, bucket: str, key: str) -> bool:
        ...

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str],
    ) -> StoredFile:
        """Validate and store an uploaded file, returning its public URL."""
        if bucket not in BUCKETS:
            raise ValidationError(f"Unknown bucket: {bucket}")
        check_key(key)
        ctype = validate_upload(data, content_type)
        if PurePosixPath(key).suffix.lower() != "." + file_extension(ctype):
            raise ValidationError(f"Storage key must end in .{file_extension(ctype)} for {ctype}")

        try:
            self.save_bytes(bucket, key, data, ctype)
        except StorageError:
            upload_counter.labels(bucket=bucket, result="error").inc()
            raise

        upload_counter.labels(bucket=bucket, result="success").inc()
        upload_size_hist.observe(len(data))
        logger.info("file_uploaded", bucket=bucket, key=key, size_bytes=len(data))
        return StoredFile(
            bucket=bucket,
            key=key,
            url=self.public_url(bucket, key),
            size_bytes=len(data),
            content_type=ctype,
        )


class LocalStorage(Storage):
    """Filesystem storage; files are served by the /files static mount."""

    def __init__(self, base_path: str = "./.local_storage"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _full_path(self, bucket: str, key: str) -> Path:
        return self.base_path / bucket / key

    def save_bytes(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        file_path = self._full_path(bucket, key)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write {bucket}/{key}: {e}") from e
        return key

    def public_url(self, bucket: str, key: str) -> str:
        return f"/files/{bucket}/{key}"

    def exists(self, bucket: str, key: str) -> bool:
        return self._full_path(bucket, key).is_file()

    def delete(self, bucket: str, key: str) -> bool:
        p = self._full_path(bucket, key)
        if not p.is_file():
            return False
        try:
            p.unlink()
        except OSError as e:
            logger.warning("file_delete_failed", bucket=bucket, key=key, error=str(e))
            return False
        logger.info("file_deleted", bucket=bucket, key=key)
        return True


class S3Storage(Storage):
    """One S3 bucket per PaintPerfect bucket: <prefix>-<bucket>."""

    def __init__(self, bucket_prefix: str, region: str = "eu-west-1", client=None):
        self.bucket_prefix = bucket_prefix
        self.region = region
        self.s3_client = client or boto3.client("s3", region_name=region)

    def _bucket_name(self, bucket: str) -> str:
        return f"{self.bucket_prefix}-{bucket}"

    def save_bytes(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        try:
            self.s3_client.put_object(
                Bucket=self._bucket_name(bucket),
                Key=key,
                Body=data,
                ContentType=content_type or self._guess_content_type(key),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("s3_upload_failed", bucket=bucket, key=key, error=str(e))
            raise StorageError(f"S3 upload failed: {e}") from e
        return key

    def public_url(self, bucket: str, key: str) -> str:
        return f"https://{self._bucket_name(bucket)}.s3.{self.region}.amazonaws.com/{key}"

    def exists(self, bucket: str, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self._bucket_name(bucket), Key=key)
            return True
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"S3 head_object failed: {e}") from e

    def delete(self, bucket: str, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self._bucket_name(bucket), Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.warning("s3_delete_failed", bucket=bucket, key=key, error=str(e))
            return False
        logger.info("file_deleted", bucket=bucket, key=key)
        return True

    @staticmethod
    def _guess_content_type(key: str) -> str:
        ctype, _ = mimetypes.guess_type(key)
        return ctype or "application/octet-stream"


# =========================
# Factory
# =========================
@lru_cache(maxsize=1)
def get_storage() -> Storage:
    """Storage backend selected by STORAGE_BACKEND (local | s3)."""
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "s3":
        return S3Storage(bucket_prefix=settings.S3_BUCKET_PREFIX, region=settings.S3_REGION)
    if backend == "local":
        return LocalStorage(base_path=settings.LOCAL_STORAGE_ROOT)

    raise ValueError(f"Unknown storage backend: {backend}")


@dataclass
class IncomingFile:
    """An uploaded file already read into memory."""

    filename: Optional[str]
    content_type: Optional[str]
    data: bytes
