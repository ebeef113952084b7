"""
Picture storage abstraction supporting both local filesystem and AWS S3.

Every backend takes the raw bytes of an uploaded picture and returns a publicly
readable URL, so the API layer never needs to know where the file ended up.
"""

import logging
import os
import time
from functools import lru_cache
from io import BytesIO
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from jobportal.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage provider rejects or fails an upload"""
    pass


def build_object_key(folder: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build a collision-resistant object key: {folder}/{epoch_ms}-{filename}.

    Any directory part of the client supplied filename is dropped.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    safe_name = os.path.basename(filename.replace("\\", "/")) or "upload"
    return f"{folder.strip('/')}/{timestamp_ms}-{safe_name}"


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, data: bytes, filename: str, content_type: Optional[str] = None,
                    folder: Optional[str] = None) -> str:
        """Store the blob and return its public URL"""
        raise NotImplementedError

    def check_health(self) -> None:
        """Raise if the backend is not reachable"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend, served by the app under /uploads"""

    def __init__(self, base_dir: Optional[str] = None, base_url: Optional[str] = None):
        self.base_dir = base_dir or settings.UPLOAD_DIR
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, data: bytes, filename: str, content_type: Optional[str] = None,
                    folder: Optional[str] = None) -> str:
        key = build_object_key(folder or settings.PICTURE_FOLDER, filename)
        file_path = os.path.join(self.base_dir, *key.split("/"))

        try:
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "wb") as buffer:
                buffer.write(data)
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            raise StorageError(f"Failed to store file locally: {e}") from e

        return f"{self.base_url}/uploads/{key}"

    def check_health(self) -> None:
        if not os.access(self.base_dir, os.W_OK):
            raise StorageError(f"Upload directory {self.base_dir} is not writable")


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self, s3_client=None, bucket_name: Optional[str] = None, region: Optional[str] = None):
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.region = region or settings.AWS_REGION

        if s3_client is not None:
            self.s3_client = s3_client
        elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=self.region
            )
        else:
            # Use IAM roles or instance profile
            self.s3_client = boto3.client('s3', region_name=self.region)

    def upload_file(self, data: bytes, filename: str, content_type: Optional[str] = None,
                    folder: Optional[str] = None) -> str:
        """Upload picture to S3 as public-read and return its URL"""
        s3_key = build_object_key(folder or settings.PICTURE_FOLDER, filename)

        try:
            self.s3_client.upload_fileobj(
                BytesIO(data),
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': content_type or 'application/octet-stream',
                    'ACL': 'public-read'
                }
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e

        return self.public_url(s3_key)

    def public_url(self, s3_key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{s3_key}"

    def check_health(self) -> None:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"S3 bucket {self.bucket_name} is not accessible: {e}") from e


@lru_cache
def get_storage() -> StorageBackend:
    """
    Get storage backend based on USE_S3 setting.

    Also used as a FastAPI dependency so tests can swap the backend out.
    """
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage()
