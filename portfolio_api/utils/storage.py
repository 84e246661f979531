"""
Object storage for blog bodies (markdown) and images.

Two backends share the ObjectStorage interface:

* S3Storage talks to an S3 bucket through boto3. Transport failures (endpoint
  unreachable, no credentials) are absorbed by writing to / reading from the
  local fallback instead.
* LocalStorage keeps objects in a FallbackCache (process memory, or a directory
  when STORAGE_FALLBACK_DIR is set) and hands out URLs served by /api/uploads.

Fallback content is per process and is never copied back to the bucket.
"""
import logging
import mimetypes
import re
from pathlib import Path
from typing import Dict, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from .errors import (
    StorageAccessDenied,
    StorageConfigError,
    StorageError,
    StorageNotFound,
)

logger = logging.getLogger(__name__)

BLOG_PREFIX = "blog/"
IMAGE_PREFIX = "blog/images/"
MARKDOWN_CONTENT_TYPE = "text/markdown"
LOCAL_URL_PATH = "/api/uploads/"

BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}
ACCESS_DENIED_CODES = {"AccessDenied", "403", "InvalidAccessKeyId", "SignatureDoesNotMatch", "AllAccessDisabled"}
CONFIG_ERROR_CODES = {"NoSuchBucket", "InvalidBucketName", "PermanentRedirect", "AuthorizationHeaderMalformed"}


def normalize_text_key(key: str) -> str:
    key = key.lstrip("/")
    return key if key.startswith(BLOG_PREFIX) else f"{BLOG_PREFIX}{key}"


def normalize_image_key(key: str) -> str:
    key = key.lstrip("/")
    if key.startswith(BLOG_PREFIX):
        return key
    if key.startswith("images/"):
        return f"{BLOG_PREFIX}{key}"
    return f"{IMAGE_PREFIX}{key}"


def mask(value: Optional[str]) -> str:
    if not value:
        return "Not set"
    return "****" + value[-4:]


# ==============================================
# Fallback caches
# ==============================================

class FallbackCache:
    """In-memory object store. Starts empty; reset() clears it."""

    def __init__(self):
        self._objects: Dict[str, Tuple[bytes, str]] = {}

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self._objects[key] = (data, content_type)

    def get(self, key: str) -> Optional[Tuple[bytes, str]]:
        return self._objects.get(key)

    def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    def reset(self) -> None:
        self._objects.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._objects

    def __len__(self) -> int:
        return len(self._objects)


class DiskFallbackCache(FallbackCache):
    """Same interface, objects written under a local directory.

    Each object's content type is kept in a sidecar file next to it.
    """

    TYPE_SUFFIX = ".content-type"

    def __init__(self, directory):
        super().__init__()
        self.root = Path(directory).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents or path.name.endswith(self.TYPE_SUFFIX):
            raise StorageNotFound(f"Invalid storage key: {key}")
        return path

    def _type_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.TYPE_SUFFIX)

    def put(self, key, data, content_type):
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self._type_path(path).write_text(content_type, encoding="utf-8")

    def get(self, key):
        path = self._path(key)
        if not path.is_file():
            return None
        type_path = self._type_path(path)
        if type_path.is_file():
            content_type = type_path.read_text(encoding="utf-8")
        elif path.suffix == ".md":
            content_type = MARKDOWN_CONTENT_TYPE
        else:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return path.read_bytes(), content_type

    def delete(self, key):
        path = self._path(key)
        if path.is_file():
            path.unlink()
        self._type_path(path).unlink(missing_ok=True)

    def reset(self):
        for path in sorted(self.root.rglob("*"), reverse=True):
            if path.is_file():
                path.unlink()
            elif path.is_dir():
                path.rmdir()

    def __contains__(self, key):
        return self._path(key).is_file()

    def __len__(self):
        return sum(1 for p in self.root.rglob("*") if p.is_file() and not p.name.endswith(self.TYPE_SUFFIX))


# ==============================================
# Backends
# ==============================================

class ObjectStorage:
    """Capabilities shared by every backend."""

    backend = "base"

    def upload_text(self, key: str, content: str) -> str:
        raise NotImplementedError

    def get_text(self, key: str) -> str:
        raise NotImplementedError

    def delete_text(self, key: str) -> None:
        raise NotImplementedError

    def upload_binary(self, key: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError

    def get_binary(self, key: str) -> Tuple[bytes, str]:
        raise NotImplementedError

    def delete_object(self, key: str) -> None:
        raise NotImplementedError

    def key_for_url(self, url: str) -> Optional[str]:
        raise NotImplementedError

    @property
    def local_backend(self) -> "LocalStorage":
        """The backend whose objects /api/uploads may serve."""
        raise NotImplementedError


class LocalStorage(ObjectStorage):
    backend = "local"

    def __init__(self, cache: Optional[FallbackCache] = None, public_base_url: str = ""):
        self.cache = cache if cache is not None else FallbackCache()
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def local_backend(self):
        return self

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}{LOCAL_URL_PATH}{key}"

    def key_for_url(self, url):
        prefix = self.url_for("")
        if url and url.startswith(prefix):
            return url[len(prefix):] or None
        return None

    def upload_text(self, key, content):
        key = normalize_text_key(key)
        self.cache.put(key, content.encode("utf-8"), MARKDOWN_CONTENT_TYPE)
        logger.info("Stored %s in local storage (%d bytes)", key, len(content))
        return self.url_for(key)

    def get_text(self, key):
        data, _ = self._get(normalize_text_key(key))
        return data.decode("utf-8")

    def delete_text(self, key):
        self.delete_object(normalize_text_key(key))

    def upload_binary(self, key, data, content_type):
        key = normalize_image_key(key)
        self.cache.put(key, data, content_type)
        logger.info("Stored %s in local storage (%d bytes, %s)", key, len(data), content_type)
        return self.url_for(key)

    def get_binary(self, key):
        return self._get(key.lstrip("/"))

    def delete_object(self, key):
        self.cache.delete(key.lstrip("/"))

    def _get(self, key):
        found = self.cache.get(key)
        if found is None:
            raise StorageNotFound(f"Object not found: {key}")
        return found


class S3Storage(ObjectStorage):
    backend = "s3"

    def __init__(self, client, bucket: str, region: str, fallback: LocalStorage, endpoint_url: Optional[str] = None):
        self.client = client
        self.bucket = bucket
        self.region = region
        self.fallback = fallback
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None

    @property
    def local_backend(self):
        return self.fallback

    @property
    def base_url(self) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/"

    def url_for(self, key: str) -> str:
        return f"{self.base_url}{key}"

    def key_for_url(self, url):
        if url and url.startswith(self.base_url):
            return url[len(self.base_url):] or None
        return self.fallback.key_for_url(url)

    def upload_text(self, key, content):
        key = normalize_text_key(key)
        return self._put(key, content.encode("utf-8"), MARKDOWN_CONTENT_TYPE)

    def get_text(self, key):
        data, _ = self.get_binary(normalize_text_key(key))
        return data.decode("utf-8")

    def delete_text(self, key):
        self.delete_object(normalize_text_key(key))

    def upload_binary(self, key, data, content_type):
        return self._put(normalize_image_key(key), data, content_type)

    def get_binary(self, key):
        key = key.lstrip("/")
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"].read()
            return body, response.get("ContentType") or "application/octet-stream"
        except BotoCoreError as exc:
            logger.warning("S3 unreachable while reading %s, trying local fallback: %s", key, exc)
            return self.fallback.get_binary(key)
        except ClientError as exc:
            error = self._translate(exc, key)
            if isinstance(error, StorageNotFound) and key in self.fallback.cache:
                return self.fallback.get_binary(key)
            raise error from exc

    def delete_object(self, key):
        key = key.lstrip("/")
        self.fallback.delete_object(key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            logger.info("Deleted s3://%s/%s", self.bucket, key)
        except BotoCoreError as exc:
            logger.warning("S3 unreachable while deleting %s: %s", key, exc)
        except ClientError as exc:
            error = self._translate(exc, key)
            if not isinstance(error, StorageNotFound):
                raise error from exc

    def _put(self, key, data, content_type):
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except BotoCoreError as exc:
            logger.warning("S3 unreachable while uploading %s, using local fallback: %s", key, exc)
            self.fallback.cache.put(key, data, content_type)
            return self.fallback.url_for(key)
        except ClientError as exc:
            raise self._translate(exc, key) from exc
        logger.info("Uploaded s3://%s/%s (%d bytes, %s)", self.bucket, key, len(data), content_type)
        return self.url_for(key)

    def _translate(self, exc: ClientError, key: str) -> StorageError:
        code = str(exc.response.get("Error", {}).get("Code", ""))
        logger.error("S3 error %s on %s/%s: %s", code or "unknown", self.bucket, key, exc)
        if code in NOT_FOUND_CODES:
            return StorageNotFound(f"Object not found: {key}")
        if code in ACCESS_DENIED_CODES:
            return StorageAccessDenied()
        if code in CONFIG_ERROR_CODES:
            return StorageConfigError(f"Object storage is misconfigured ({code})")
        return StorageError(f"Object storage request failed ({code or 'unknown'})")


def build_storage(config) -> ObjectStorage:
    """Pick the backend from configuration: S3 when fully configured, local otherwise."""
    if config.STORAGE_FALLBACK_DIR:
        cache = DiskFallbackCache(config.STORAGE_FALLBACK_DIR)
    else:
        cache = FallbackCache()
    local = LocalStorage(cache, config.PUBLIC_BASE_URL)

    logger.info(
        "S3 configuration: region=%s bucket=%s access_key_id=%s secret_access_key=%s",
        config.AWS_REGION or "Not set",
        config.AWS_S3_BUCKET or "Not set",
        mask(config.AWS_ACCESS_KEY_ID),
        "****" if config.AWS_SECRET_ACCESS_KEY else "Not set",
    )
    if not config.s3_configured:
        logger.warning("S3 is not fully configured; blog content is kept in local fallback storage")
        return local

    if not BUCKET_NAME_RE.match(config.AWS_S3_BUCKET):
        logger.warning("Invalid bucket name format: %r", config.AWS_S3_BUCKET)

    client = boto3.client(
        "s3",
        region_name=config.AWS_REGION,
        aws_access_key_id=config.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=config.AWS_SECRET_ACCESS_KEY,
        endpoint_url=config.AWS_S3_ENDPOINT or None,
    )
    return S3Storage(client, config.AWS_S3_BUCKET, config.AWS_REGION, local, config.AWS_S3_ENDPOINT)


# Dependency pour FastAPI
def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage
