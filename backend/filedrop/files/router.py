"""FastAPI router for file upload endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..config import UploadSettings, get_config
from ..envelope import Envelope, error_json, write_json
from .download import download_static_file
from .errors import UploadError
from .service import ingest, ingest_one

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


def get_upload_settings() -> UploadSettings:
    return get_config().uploads


@router.post("/upload")
async def upload_files(
    request: Request,
    rename: Optional[bool] = None,
    settings: UploadSettings = Depends(get_upload_settings),
) -> Response:
    """Upload every file in a multipart request.

    Args:
        rename: Store files under random names (defaults to the configured value)

    Returns:
        Envelope whose data is the list of stored files, in request order.
        On failure the error envelope's data lists the files stored before
        the failing one; those files are not removed.
    """
    if rename is None:
        rename = settings.rename

    try:
        records = await ingest(request, settings.upload_dir, settings.to_upload_configuration(), rename)
    except UploadError as e:
        return error_json(e.message, status_code=e.status_code, data=e.records)
    except Exception as e:
        logger.error(f"File upload failed: {e}")
        return error_json(f"Upload failed: {e}", status_code=500)

    logger.info(f"Uploaded {len(records)} file(s) to {settings.upload_dir}")
    return write_json(Envelope(message=f"{len(records)} file(s) uploaded", data=records))


@router.post("/upload-one")
async def upload_one_file(
    request: Request,
    rename: Optional[bool] = None,
    settings: UploadSettings = Depends(get_upload_settings),
) -> Response:
    """Upload a multipart request that carries exactly one file.

    Returns:
        Envelope whose data is the stored file's record.
    """
    if rename is None:
        rename = settings.rename

    try:
        record = await ingest_one(request, settings.upload_dir, settings.to_upload_configuration(), rename)
    except UploadError as e:
        return error_json(e.message, status_code=e.status_code, data=e.records)
    except Exception as e:
        logger.error(f"File upload failed: {e}")
        return error_json(f"Upload failed: {e}", status_code=500)

    return write_json(Envelope(message="file uploaded", data=record))


@router.get("/download/{file_name}")
async def download_file(
    file_name: str,
    display_name: Optional[str] = None,
    settings: UploadSettings = Depends(get_upload_settings),
) -> Response:
    """Download a stored file as an attachment.

    Args:
        file_name: Name of the file inside the upload directory
        display_name: Name offered to the client (defaults to file_name)

    Returns:
        The file content, or a 404 error envelope
    """
    try:
        return download_static_file(settings.upload_dir, file_name, display_name)
    except FileNotFoundError:
        return error_json("File not found", status_code=404)
