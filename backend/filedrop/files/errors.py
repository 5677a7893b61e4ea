"""Error kinds raised by the upload pipeline.

Every error carries the HTTP status the router should answer with and the
list of records that were fully written before the failure, so a caller can
clean up partially-applied uploads.
"""
from typing import List, Optional


class UploadError(Exception):
    """Base class for all upload pipeline failures."""
    status_code: int = 400

    def __init__(self, message: str, records: Optional[List] = None):
        super().__init__(message)
        self.message = message
        self.records = list(records or [])


class PayloadTooLarge(UploadError):
    """Request body exceeds the configured total size limit."""
    status_code = 413


class MalformedMultipart(UploadError):
    """The request body could not be parsed as multipart form data."""
    status_code = 400


class TruncatedStream(UploadError):
    """A file part yielded no bytes when its prefix was read."""
    status_code = 400


class UnsupportedMediaType(UploadError):
    """The sniffed content type is not on the allow-list."""
    status_code = 415

    def __init__(self, mime_type: str, filename: str, records: Optional[List] = None):
        super().__init__(
            f"The uploaded file type is not permitted: {mime_type} ({filename})",
            records,
        )
        self.mime_type = mime_type
        self.filename = filename


class DirectoryCreateError(UploadError):
    status_code = 500


class WriteError(UploadError):
    status_code = 500
