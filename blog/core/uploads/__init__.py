"""
Upload validation, classification and dispatch.
"""

from .dispatcher import AssetWriter, UploadDispatcher
from .models import (
    DEFAULT_DIRECTORY,
    StoredAsset,
    UploadCategory,
    UploadRequest,
    UploadValidationError,
)

__all__ = [
    "AssetWriter",
    "DEFAULT_DIRECTORY",
    "StoredAsset",
    "UploadCategory",
    "UploadDispatcher",
    "UploadRequest",
    "UploadValidationError",
]
