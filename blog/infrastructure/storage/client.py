"""
Asset writers for uploaded files.

Two implementations of the same write(relative_path, data) -> url contract:
- RemoteStorageWriter: Aliyun OSS through its S3-compatible API, with
  bounded exponential-backoff retry
- LocalStorageWriter: files under a local directory, served back by the
  app's static mount

Which one is used is decided once at startup by create_asset_writer,
based on whether the storage credentials are complete.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass(frozen=True)
class StorageConfig:
    """
    Configuration for OSS (S3-compatible) storage.

    Every field may be empty; the config is only usable when region,
    credentials and bucket are all present. base_path is an optional key
    prefix and may be empty.
    """
    region: str = ""
    access_key_id: str = ""
    access_key_secret: str = ""
    bucket: str = ""
    base_path: str = ""
    endpoint_url: Optional[str] = None

    @property
    def missing_fields(self) -> list[str]:
        required = {
            "region": self.region,
            "access_key_id": self.access_key_id,
            "access_key_secret": self.access_key_secret,
            "bucket": self.bucket,
        }
        return [name for name, value in required.items() if not value]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    @property
    def endpoint(self) -> str:
        """
        OSS endpoint URL.

        OSS endpoints follow the pattern: https://{region}.aliyuncs.com
        where region already carries the "oss-" prefix (oss-cn-hangzhou).
        """
        if self.endpoint_url:
            return self.endpoint_url
        return f"https://{self.region}.aliyuncs.com"

    def object_key(self, relative_path: str) -> str:
        """Prefix a relative path with base_path, omitting it when empty."""
        base = self.base_path.strip("/")
        if base:
            return f"{base}/{relative_path}"
        return relative_path

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.{self.region}.aliyuncs.com/{key}"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff.

    The wait after failed attempt n (starting at 1) is
    min(initial_delay * 2**(n-1), max_delay) seconds. With the defaults
    the waits are 1s then 2s, and the third failure is final.
    """
    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 5.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays cannot be negative")

    def delay_for(self, attempt: int) -> float:
        return min(self.initial_delay * (2 ** (attempt - 1)), self.max_delay)


class RemoteStorageWriter:
    """
    OSS object storage writer.

    Uses boto3 because OSS speaks the S3 API. Every failed put is retried
    the same way regardless of the error; after the last attempt the
    original exception propagates unchanged.

    The boto3 call is synchronous, so it runs in a worker thread; the
    backoff wait is an asyncio sleep so a retrying request doesn't hold
    the event loop.
    """

    def __init__(
        self,
        config: StorageConfig,
        retry_policy: Optional[RetryPolicy] = None,
        s3_client: Any = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the writer, building a boto3 client unless one is given.

        We import boto3 here (not at module level) because:
        - Local storage mode doesn't need it
        - Tests can inject a fake client instead
        """
        self._config = config
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

        if s3_client is None:
            s3_client = self._build_s3_client(config)
        self._s3_client = s3_client

        logger.info(
            "Initialized OSS storage writer",
            extra={
                "bucket": config.bucket,
                "endpoint": config.endpoint,
                "base_path": config.base_path,
            }
        )

    @staticmethod
    def _build_s3_client(config: StorageConfig) -> Any:
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for OSS storage. Install with: pip install boto3"
            )

        # OSS only accepts virtual-hosted style requests, and rejects the
        # CRC32 checksum headers newer botocore adds to every put_object
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'virtual'},
            request_checksum_calculation='when_required',
            response_checksum_validation='when_required',
        )

        return boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.access_key_secret,
            region_name=config.region,
            config=boto_config,
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    async def put_with_retry(self, key: str, data: bytes, content_type: str) -> dict:
        """
        Put an object, retrying failures with exponential backoff.

        Returns the put_object response. Raises whatever the final attempt
        raised.
        """
        policy = self._retry_policy

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await asyncio.to_thread(
                    self._s3_client.put_object,
                    Bucket=self._config.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type or 'application/octet-stream',
                )
            except Exception as e:
                if attempt >= policy.max_attempts:
                    logger.error(
                        "Upload to OSS failed, giving up",
                        extra={"key": key, "attempts": attempt, "error": str(e)}
                    )
                    raise

                delay = policy.delay_for(attempt)
                logger.warning(
                    "Upload to OSS failed, retrying",
                    extra={
                        "key": key,
                        "attempt": attempt,
                        "delay_seconds": delay,
                        "error": str(e),
                    }
                )
                await self._sleep(delay)

        raise StorageError(f"Upload failed: {key}")  # pragma: no cover

    async def write(self, relative_path: str, data: bytes, content_type: str = "") -> str:
        """Upload bytes under base_path/relative_path and return the public URL."""
        key = self._config.object_key(relative_path)

        await self.put_with_retry(key, data, content_type)

        url = self._config.public_url(key)
        logger.info(
            "Uploaded asset to OSS",
            extra={"key": key, "size_bytes": len(data), "url": url}
        )

        return url


class LocalStorageWriter:
    """
    Local filesystem writer.

    Files land under root/relative_path and are served by the app's static
    mount at url_prefix/relative_path. Directories are created on demand
    and never removed. There is no retry: filesystem errors propagate
    immediately.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self._root = Path(root)
        self._url_prefix = "/" + url_prefix.strip("/")
        logger.info(
            "Initialized local storage writer",
            extra={"root": str(self._root), "url_prefix": self._url_prefix}
        )

    @property
    def root(self) -> Path:
        return self._root

    def _write_file(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def write(self, relative_path: str, data: bytes, content_type: str = "") -> str:
        """Write bytes to disk and return a URL relative to the site root."""
        path = self._root / relative_path

        await asyncio.to_thread(self._write_file, path, data)

        url = f"{self._url_prefix}/{relative_path}"
        logger.info(
            "Saved asset to local storage",
            extra={"path": str(path), "size_bytes": len(data), "url": url}
        )

        return url


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_asset_writer(
    config: StorageConfig,
    upload_root: str | Path,
    url_prefix: str = "/uploads",
    retry_policy: Optional[RetryPolicy] = None,
) -> RemoteStorageWriter | LocalStorageWriter:
    """
    Create the writer for this process.

    Factory function pattern because:
    - Centralizes the remote vs local decision
    - Runs once at startup, so the choice never changes mid-process
    - Missing credentials are not an error, just a different backend

    Args:
        config: Resolved storage configuration (may be incomplete)
        upload_root: Local directory used when falling back
        url_prefix: URL prefix the local directory is served under
        retry_policy: Backoff policy for the remote writer

    Returns:
        RemoteStorageWriter when config is complete, else LocalStorageWriter
    """
    if config.is_complete:
        return RemoteStorageWriter(config, retry_policy=retry_policy)

    logger.warning(
        "OSS configuration incomplete, falling back to local file storage",
        extra={"missing_fields": config.missing_fields}
    )
    return LocalStorageWriter(upload_root, url_prefix=url_prefix)
