"""Data models for the upload pipeline.

- UploadConfiguration: Immutable per-request limits (size, content types)
- IncomingFilePart: One file stream taken from a multipart request
- FileRecord: Result for a file that has been fully written to disk
"""
from dataclasses import dataclass
from typing import BinaryIO, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .sniffer import essence

# Default total request size limit: 1 GiB
DEFAULT_MAX_TOTAL_BYTES = 1024 * 1024 * 1024


class UploadConfiguration(BaseModel):
    """Limits applied to a single ingest call.

    An empty ``allowed_content_types`` accepts every content type. A missing
    or non-positive ``max_total_bytes`` falls back to 1 GiB.
    """
    model_config = ConfigDict(frozen=True)

    max_total_bytes: int = Field(default=DEFAULT_MAX_TOTAL_BYTES, description="Request body limit in bytes")
    allowed_content_types: FrozenSet[str] = Field(default_factory=frozenset, description="Permitted MIME types")

    @field_validator("max_total_bytes", mode="before")
    @classmethod
    def _default_max_total_bytes(cls, value):
        if value is None or int(value) <= 0:
            return DEFAULT_MAX_TOTAL_BYTES
        return value

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def _normalize_content_types(cls, value):
        if value is None:
            return frozenset()
        return frozenset(t.strip().lower() for t in value if t and t.strip())

    def allows(self, mime_type: str) -> bool:
        """Check a sniffed MIME type against the allow-list, ignoring case.

        ``text/plain; charset=utf-8`` is accepted by either the full value
        or its ``text/plain`` essence.
        """
        if not self.allowed_content_types:
            return True
        return (
            mime_type.strip().lower() in self.allowed_content_types
            or essence(mime_type) in self.allowed_content_types
        )


@dataclass
class IncomingFilePart:
    """An open file stream plus the name the client declared for it."""
    stream: BinaryIO
    original_name: str

    def close(self) -> None:
        self.stream.close()


class FileRecord(BaseModel):
    """A file stored by the pipeline."""
    assigned_name: str = Field(..., description="File name on disk")
    original_name: str = Field(..., description="File name declared by the client")
    byte_size: int = Field(..., description="Bytes written to disk")
    mime_type: str = Field(..., description="Sniffed MIME type")
