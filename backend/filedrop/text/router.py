"""FastAPI router for text helpers."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import JSONSettings, get_config
from ..envelope import Envelope, InvalidJSON, error_json, read_json, write_json
from .schemas import SlugRequest, SlugResult
from .slug import SlugError, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/text", tags=["text"])


def get_json_settings() -> JSONSettings:
    return get_config().json_io


@router.post("/slug")
async def create_slug(
    request: Request,
    settings: JSONSettings = Depends(get_json_settings),
) -> JSONResponse:
    """Turn the ``text`` of a JSON body into a URL slug.

    Returns:
        Envelope with ``data.slug``, or a 400 error envelope when the body
        is not valid JSON or holds no letters or digits.
    """
    try:
        body = await read_json(
            request,
            SlugRequest,
            max_bytes=settings.max_bytes,
            allow_unknown_fields=settings.allow_unknown_fields,
        )
        slug = slugify(body.text)
    except (InvalidJSON, SlugError) as e:
        logger.info("Rejected slug request: %s", e)
        return error_json(e)

    return write_json(Envelope(message="slug created", data=SlugResult(slug=slug)))
