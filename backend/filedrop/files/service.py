"""Upload ingestion service for filedrop.

Coordinates the pipeline for every file part of a multipart request:
read prefix -> sniff -> check allow-list -> rewind -> name -> write -> record.

Parts are processed strictly in request order. The first failing part aborts
the whole call; files already written stay on disk and the records for them
are attached to the raised error (``error.records``) so the caller can clean
up if it needs all-or-nothing behaviour.
"""
import logging
from typing import AsyncIterator, BinaryIO, Iterable, List

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from .errors import MalformedMultipart, PayloadTooLarge, UnsupportedMediaType, UploadError
from .naming import decide_name
from .schemas import FileRecord, IncomingFilePart, UploadConfiguration
from .sniffer import SNIFF_LEN, sniff
from .writer import PathLike, ensure_directory, write_stream

logger = logging.getLogger(__name__)


class _PrefixReplay:
    """Read wrapper that returns an already consumed prefix before the rest."""

    def __init__(self, prefix: bytes, rest: BinaryIO):
        self._prefix = prefix
        self._rest = rest

    def read(self, size: int = -1) -> bytes:
        if not self._prefix:
            return self._rest.read(size)
        if size is None or size < 0:
            data, self._prefix = self._prefix + self._rest.read(), b""
            return data
        data, self._prefix = self._prefix[:size], self._prefix[size:]
        return data


def _rewind(stream: BinaryIO, prefix: bytes) -> BinaryIO:
    try:
        stream.seek(0)
        return stream
    except (AttributeError, OSError):
        return _PrefixReplay(prefix, stream)


def _process_part(
    part: IncomingFilePart,
    directory: PathLike,
    config: UploadConfiguration,
    rename: bool,
) -> FileRecord:
    if not rename and not part.original_name:
        raise MalformedMultipart("File part has no file name to store it under")

    prefix = part.stream.read(SNIFF_LEN)
    mime_type = sniff(prefix)

    if not config.allows(mime_type):
        raise UnsupportedMediaType(mime_type, part.original_name)

    stream = _rewind(part.stream, prefix)
    final_name = decide_name(part.original_name, rename)
    size = write_stream(stream, directory, final_name)

    return FileRecord(
        assigned_name=final_name,
        original_name=part.original_name,
        byte_size=size,
        mime_type=mime_type,
    )


def ingest_parts(
    parts: Iterable[IncomingFilePart],
    directory: PathLike,
    config: UploadConfiguration,
    rename: bool = True,
) -> List[FileRecord]:
    """Sniff, validate and store each part in order.

    Every part is closed once processed. On failure the remaining parts are
    closed unread.

    Args:
        parts: File parts in request order
        directory: Destination directory, created if missing
        config: Size and content type limits for this call
        rename: Replace declared names with random ones

    Returns:
        One FileRecord per stored part, in request order

    Raises:
        UploadError: The first failure. ``error.records`` holds the records
            of the parts stored before it.
    """
    records: List[FileRecord] = []
    pending = iter(parts)

    try:
        for part in pending:
            try:
                record = _process_part(part, directory, config, rename)
            except UploadError as e:
                logger.warning(
                    "Upload aborted at %r after %d stored file(s): %s",
                    part.original_name, len(records), e,
                )
                e.records = list(records)
                raise
            finally:
                part.close()

            logger.info(
                f"Stored upload: {record.original_name} -> {record.assigned_name} "
                f"({record.byte_size} bytes, {record.mime_type})"
            )
            records.append(record)
    finally:
        # Parts left unread after a failure
        for rest in pending:
            rest.close()

    return records


class _BodyTooLarge(MultiPartException):
    """Raised inside the parser so it closes the spooled files it already opened."""


async def _bounded(stream: AsyncIterator[bytes], limit: int) -> AsyncIterator[bytes]:
    received = 0
    async for chunk in stream:
        received += len(chunk)
        if received > limit:
            raise _BodyTooLarge(f"Request body exceeds limit of {limit} bytes")
        yield chunk


async def parse_multipart(request: Request, config: UploadConfiguration) -> List[IncomingFilePart]:
    """Parse a multipart request into file parts, bounded by the size limit.

    The whole body is parsed before any part is returned, so a body over
    the limit never leads to a file being written. Non-file form fields are
    ignored; file parts from every field name are kept in request order.

    Raises:
        PayloadTooLarge: Declared or streamed body exceeds the limit
        MalformedMultipart: Wrong content type or unparseable body
    """
    content_type = request.headers.get("content-type", "")
    lowered = content_type.lower()
    if not lowered.startswith("multipart/form-data") or "boundary=" not in lowered:
        raise MalformedMultipart(f"Expected multipart/form-data with a boundary, got {content_type!r}")

    limit = config.max_total_bytes
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge(f"Request body of {declared} bytes exceeds limit of {limit} bytes")

    parser = MultiPartParser(request.headers, _bounded(request.stream(), limit))
    try:
        form = await parser.parse()
    except _BodyTooLarge as e:
        raise PayloadTooLarge(e.message) from e
    except (MultiPartException, ValueError) as e:
        raise MalformedMultipart(f"Could not parse multipart body: {e}") from e

    return [
        IncomingFilePart(stream=value.file, original_name=value.filename or "")
        for _, value in form.multi_items()
        if isinstance(value, UploadFile)
    ]


async def ingest(
    request: Request,
    directory: PathLike,
    config: UploadConfiguration,
    rename: bool = True,
) -> List[FileRecord]:
    """Store every file part of a multipart request in ``directory``."""
    await run_in_threadpool(ensure_directory, directory)
    parts = await parse_multipart(request, config)
    return await run_in_threadpool(ingest_parts, parts, directory, config, rename)


async def ingest_one(
    request: Request,
    directory: PathLike,
    config: UploadConfiguration,
    rename: bool = True,
) -> FileRecord:
    """Store the single file part of a multipart request.

    Raises:
        MalformedMultipart: If the request does not hold exactly one file.
    """
    await run_in_threadpool(ensure_directory, directory)
    parts = await parse_multipart(request, config)
    if len(parts) != 1:
        for part in parts:
            part.close()
        raise MalformedMultipart(f"Expected exactly one file, received {len(parts)}")

    records = await run_in_threadpool(ingest_parts, parts, directory, config, rename)
    return records[0]
