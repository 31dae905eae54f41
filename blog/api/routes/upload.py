"""
File upload endpoint.

Accepts one multipart file (markdown, plain text, image or video) plus an
optional target directory, stores it through the writer chosen at startup
and answers with its public URL.

Errors are reported as {"error": message}:
- 400/413 for rejected input, with nothing written
- 500 for anything that fails while storing, after logging it
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...core.uploads.models import DEFAULT_DIRECTORY, UploadRequest, UploadValidationError
from ..dependencies import UploadDispatcherDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class UploadResponse(BaseModel):
    """Response after storing a file."""
    url: str = Field(description="Public URL of the stored file")


class UploadErrorResponse(BaseModel):
    """Response when an upload is rejected or fails."""
    error: str = Field(description="What went wrong")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a file",
    description="Store a markdown, image or video file and return its URL",
    responses={
        400: {"model": UploadErrorResponse, "description": "Invalid upload"},
        413: {"model": UploadErrorResponse, "description": "File too large"},
        500: {"model": UploadErrorResponse, "description": "Storage failed"},
    },
)
async def upload_file(
    dispatcher: UploadDispatcherDep,
    file: Annotated[Optional[UploadFile], File(description="File to store")] = None,
    directory: Annotated[Optional[str], Form(description="Target directory")] = None,
):
    """
    Upload a single file.

    Files are filed by content type: images/, videos/, or articles/ for
    everything else, then under the requested directory (default
    "articles"), with a fresh UUID as the file name.
    """
    try:
        upload = None
        if file is not None and file.filename:
            upload = UploadRequest(
                data=await file.read(),
                content_type=file.content_type or "",
                filename=file.filename,
                directory=directory or DEFAULT_DIRECTORY,
            )

        asset = await dispatcher.dispatch(upload)

    except UploadValidationError as e:
        logger.info(
            "Rejected upload",
            extra={
                "upload_filename": file.filename if file else None,
                "reason": e.message,
            }
        )
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message},
        )

    except Exception as e:
        logger.error(
            "Upload error",
            extra={
                "upload_filename": file.filename if file else None,
                "error": str(e),
            },
            exc_info=e,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Upload failed"},
        )

    logger.info(
        "Stored upload",
        extra={
            "category": asset.category.value,
            "directory": asset.directory,
            "url": asset.url,
        }
    )

    return UploadResponse(url=asset.url)
