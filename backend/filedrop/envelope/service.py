"""Reading and writing JSON envelopes.

``read_json`` decodes a bounded request body into a pydantic model and turns
every failure into an ``InvalidJSON`` error with a message that can be shown
to the client as-is. ``write_json`` and ``error_json`` build the responses.
"""
import json
import logging
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar, Union

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .schemas import Envelope

logger = logging.getLogger(__name__)

# Default request body limit for JSON: 1MB
DEFAULT_MAX_JSON_BYTES = 1024 * 1024

M = TypeVar("M", bound=BaseModel)

HeaderValues = Union[str, Sequence[str]]


class InvalidJSON(ValueError):
    """Request body is not acceptable JSON for the target model."""


def _known_keys(model: Type[BaseModel]) -> set:
    keys = set()
    for name, field in model.model_fields.items():
        keys.add(name)
        if field.alias:
            keys.add(field.alias)
    return keys


def decode_json(
    body: bytes,
    model: Type[M],
    max_bytes: int = DEFAULT_MAX_JSON_BYTES,
    allow_unknown_fields: bool = False,
) -> M:
    """Decode exactly one JSON value from ``body`` into ``model``.

    Raises:
        InvalidJSON: With a client-facing message describing the problem.
    """
    if len(body) > max_bytes:
        raise InvalidJSON(f"JSON too big! must be limited to {max_bytes} bytes")

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidJSON(f"Syntax error: (at character: {e.start})") from e

    stripped = text.lstrip()
    if not stripped:
        raise InvalidJSON("Empty body")

    try:
        value, end = json.JSONDecoder().raw_decode(text, len(text) - len(stripped))
    except json.JSONDecodeError as e:
        if e.pos >= len(text.rstrip()):
            raise InvalidJSON("JSON ended unexpectedly, badly-formed JSON") from e
        raise InvalidJSON(f"Syntax error: (at character: {e.pos})") from e

    if text[end:].strip():
        raise InvalidJSON("Body must contain only one JSON value")

    if not allow_unknown_fields and isinstance(value, dict):
        known = _known_keys(model)
        for key in value:
            if key not in known:
                raise InvalidJSON(f'JSON contains unknown key: "{key}"')

    try:
        return model.model_validate(value)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        if first["type"] == "missing":
            raise InvalidJSON(f'Missing JSON field: "{field}"') from e
        if field:
            raise InvalidJSON(f'Invalid JSON type for the field: "{field}"') from e
        raise InvalidJSON(f"Invalid JSON type: {first['msg']}") from e


async def read_json(
    request: Request,
    model: Type[M],
    max_bytes: int = DEFAULT_MAX_JSON_BYTES,
    allow_unknown_fields: bool = False,
) -> M:
    """Read the request body, stopping once it grows past ``max_bytes``."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise InvalidJSON(f"JSON too big! must be limited to {max_bytes} bytes")
    return decode_json(bytes(body), model, max_bytes, allow_unknown_fields)


def write_json(
    data: Any,
    status_code: int = 200,
    headers: Optional[Mapping[str, HeaderValues]] = None,
) -> JSONResponse:
    """Serialize ``data`` into a JSON response, adding any extra headers.

    A header given as a list is sent once per value.
    """
    if isinstance(data, Envelope):
        content = data.to_payload()
    else:
        content = jsonable_encoder(data)

    response = JSONResponse(content=content, status_code=status_code)
    for key, value in (headers or {}).items():
        values = [value] if isinstance(value, str) else list(value)
        for item in values:
            response.headers.append(key, item)
    return response


def error_json(error: Union[Exception, str], status_code: int = 400, data: Any = None) -> JSONResponse:
    """Write an error envelope. Defaults to 400 Bad Request."""
    envelope = Envelope(error=True, message=str(error), data=data)
    return write_json(envelope, status_code=status_code)
