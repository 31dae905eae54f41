"""
Domain models for uploaded assets.

These models represent what an upload is before and after it is stored.
They know nothing about HTTP, object storage or the filesystem; the
dispatcher turns an UploadRequest into a StoredAsset by way of a writer.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

DEFAULT_DIRECTORY = "articles"

# Prefixes of declared content types that may be uploaded.
# A name ending in ".md" is accepted regardless of its declared type,
# because browsers often send markdown as application/octet-stream.
ALLOWED_TYPE_PREFIXES = ("text/markdown", "text/plain", "image/", "video/")
MARKDOWN_SUFFIX = ".md"
EXTENSION_PATTERN = re.compile(r"[a-z0-9]+")


class UploadCategory(Enum):
    """Top-level folder an asset is filed under."""
    ARTICLES = "articles"
    IMAGES = "images"
    VIDEOS = "videos"

    @classmethod
    def for_content_type(cls, content_type: str) -> "UploadCategory":
        """Images and videos get their own folder; everything else is an article."""
        if content_type.startswith("image/"):
            return cls.IMAGES
        if content_type.startswith("video/"):
            return cls.VIDEOS
        return cls.ARTICLES


class UploadValidationError(Exception):
    """
    Raised when an upload is rejected before anything is stored.

    Carries the HTTP status the API layer should answer with so the
    route doesn't need to know every rejection reason.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class UploadRequest:
    """
    A single file submitted for upload.

    Exists only for the duration of one HTTP call.
    """
    data: bytes
    content_type: str
    filename: str
    directory: str = DEFAULT_DIRECTORY

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredAsset:
    """
    An asset after it has been persisted.

    Frozen because a stored asset is never mutated. The generated id is a
    UUID4, so two uploads never share a storage key.
    """
    category: UploadCategory
    directory: str
    generated_id: UUID
    extension: str
    url: str

    @property
    def filename(self) -> str:
        return f"{self.generated_id}.{self.extension}"

    @property
    def relative_path(self) -> str:
        return build_relative_path(
            self.category, self.directory, self.generated_id, self.extension
        )


def is_allowed_type(content_type: str, filename: str) -> bool:
    """Accept markdown, plain text, images and videos, or any *.md file."""
    if filename.endswith(MARKDOWN_SUFFIX):
        return True
    return any(content_type.startswith(prefix) for prefix in ALLOWED_TYPE_PREFIXES)


def extract_extension(filename: str) -> Optional[str]:
    """
    Lowercased text after the last dot, or None when there isn't one.

    "notes.MD" -> "md", "archive.tar.gz" -> "gz", "README" -> None,
    "broken." -> None, "x.png/evil" -> None.
    """
    if "." not in filename:
        return None
    extension = filename.rsplit(".", 1)[-1].strip().lower()
    if not EXTENSION_PATTERN.fullmatch(extension):
        return None
    return extension


def normalize_directory(directory: Optional[str]) -> str:
    """
    Clean the caller-supplied target directory.

    Blank means the default. Paths that could escape the upload root are
    rejected because the local writer joins this onto a real directory.
    """
    if directory is None or not directory.strip():
        return DEFAULT_DIRECTORY

    directory = directory.strip()

    if "\\" in directory or directory.startswith("/"):
        raise UploadValidationError("Invalid directory")

    segments = [segment for segment in directory.split("/") if segment]
    if any(segment in (".", "..") for segment in segments):
        raise UploadValidationError("Invalid directory")

    return "/".join(segments)


def build_relative_path(
    category: UploadCategory,
    directory: str,
    generated_id: UUID,
    extension: str,
) -> str:
    """Path of an asset below the storage root: category/directory/id.ext"""
    return f"{category.value}/{directory}/{generated_id}.{extension}"
