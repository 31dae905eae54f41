"""
Upload dispatcher.

Turns an UploadRequest into a StoredAsset:
1. Validate the file (presence, type, extension, size, directory)
2. Classify it into a category by content type
3. Build the destination path with a fresh UUID
4. Hand the bytes to whichever writer was chosen at startup

The dispatcher never catches storage errors. The API layer decides how
they are reported.
"""

import logging
from typing import Callable, Optional, Protocol
from uuid import UUID, uuid4

from .models import (
    StoredAsset,
    UploadCategory,
    UploadRequest,
    UploadValidationError,
    build_relative_path,
    extract_extension,
    is_allowed_type,
    normalize_directory,
)

logger = logging.getLogger(__name__)


class AssetWriter(Protocol):
    """
    Protocol for persisting uploaded bytes.

    Implementations receive the path relative to their storage root and
    return the public URL of the written object. Using a protocol means
    tests can substitute an in-memory writer.
    """

    async def write(
        self,
        relative_path: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """Persist bytes and return the public URL."""
        ...


class UploadDispatcher:
    """
    Validates uploads and routes them to a single AssetWriter.

    The writer is injected once and shared by every request; the
    dispatcher itself holds no per-request state.
    """

    def __init__(
        self,
        writer: AssetWriter,
        max_size_bytes: Optional[int] = None,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._writer = writer
        self._max_size_bytes = max_size_bytes
        self._id_factory = id_factory

    @property
    def writer(self) -> AssetWriter:
        return self._writer

    def validate(self, upload: Optional[UploadRequest]) -> tuple[str, str]:
        """
        Check an upload without side effects.

        Returns (extension, directory) for a valid upload, raises
        UploadValidationError otherwise.
        """
        if upload is None or not upload.filename:
            raise UploadValidationError("No file provided")

        if not is_allowed_type(upload.content_type, upload.filename):
            raise UploadValidationError(
                "Only markdown, image and video files are allowed"
            )

        extension = extract_extension(upload.filename)
        if not extension:
            raise UploadValidationError("Invalid file extension")

        if self._max_size_bytes is not None and upload.size_bytes > self._max_size_bytes:
            raise UploadValidationError(
                f"File exceeds {self._max_size_bytes // (1024 * 1024)}MB limit",
                status_code=413,
            )

        directory = normalize_directory(upload.directory)

        return extension, directory

    async def dispatch(self, upload: Optional[UploadRequest]) -> StoredAsset:
        """Validate, classify and store an upload."""
        extension, directory = self.validate(upload)

        category = UploadCategory.for_content_type(upload.content_type)
        generated_id = self._id_factory()
        relative_path = build_relative_path(category, directory, generated_id, extension)

        logger.debug(
            "Dispatching upload",
            extra={
                "upload_filename": upload.filename,
                "content_type": upload.content_type,
                "size_bytes": upload.size_bytes,
                "relative_path": relative_path,
            }
        )

        url = await self._writer.write(relative_path, upload.data, upload.content_type)

        return StoredAsset(
            category=category,
            directory=directory,
            generated_id=generated_id,
            extension=extension,
            url=url,
        )
