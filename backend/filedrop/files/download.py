"""Forced downloads of stored files."""
from pathlib import Path
from typing import Optional

from fastapi.responses import FileResponse

from .writer import PathLike


def resolve_stored_file(directory: PathLike, file_name: str) -> Path:
    """Locate ``file_name`` directly inside ``directory``.

    Raises:
        FileNotFoundError: If the name has path components or no such file exists.
    """
    if not file_name or file_name in (".", "..") or Path(file_name).name != file_name or "\\" in file_name:
        raise FileNotFoundError(file_name)

    file_path = Path(directory) / file_name
    if not file_path.is_file():
        raise FileNotFoundError(file_name)
    return file_path


def download_static_file(directory: PathLike, file_name: str, display_name: Optional[str] = None) -> FileResponse:
    """Serve a stored file as an attachment so browsers save it instead of displaying it.

    The client sees ``display_name`` (falling back to ``file_name``) in the
    ``Content-Disposition`` header.
    """
    file_path = resolve_stored_file(directory, file_name)
    return FileResponse(
        path=file_path,
        filename=display_name or file_name,
        content_disposition_type="attachment",
    )
