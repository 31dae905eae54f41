"""
Asset storage for uploaded files.

Writes to Aliyun OSS via the S3-compatible API when credentials are
complete, otherwise to a local directory served under /uploads.
"""

from .client import (
    LocalStorageWriter,
    RemoteStorageWriter,
    RetryPolicy,
    StorageConfig,
    StorageError,
    create_asset_writer,
)

__all__ = [
    "LocalStorageWriter",
    "RemoteStorageWriter",
    "RetryPolicy",
    "StorageConfig",
    "StorageError",
    "create_asset_writer",
]
