"""Destination writer: directory creation and streaming file bodies to disk."""
import logging
import os
from pathlib import Path
from typing import BinaryIO, Union

from .errors import DirectoryCreateError, WriteError

logger = logging.getLogger(__name__)

DIRECTORY_MODE = 0o755
CHUNK_SIZE = 64 * 1024

PathLike = Union[str, "os.PathLike[str]"]


def ensure_directory(directory: PathLike) -> Path:
    """Create ``directory`` and any missing parents.

    An already existing directory is left untouched.

    Raises:
        DirectoryCreateError: If the directory cannot be created, or the
            path exists and is not a directory.
    """
    path = Path(directory)
    try:
        os.makedirs(path, mode=DIRECTORY_MODE, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(f"Could not create directory {path}: {e}") from e
    return path


def write_stream(stream: BinaryIO, directory: PathLike, final_name: str) -> int:
    """Write the remainder of ``stream`` to ``directory/final_name``.

    The target file is created or truncated. Data is flushed and fsynced
    before returning, so the returned count matches the size on disk.
    A file left half-written by a failure is not removed.

    Returns:
        Number of bytes written.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
        WriteError: On any I/O failure while writing.
    """
    target = ensure_directory(directory) / final_name
    written = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                written += len(chunk)
            out.flush()
            os.fsync(out.fileno())
    except OSError as e:
        raise WriteError(f"Could not write {target}: {e}") from e

    logger.debug("Wrote %d bytes to %s", written, target)
    return written
