"""JSON envelope helpers shared by all routers."""

from .schemas import Envelope
from .service import DEFAULT_MAX_JSON_BYTES, InvalidJSON, decode_json, error_json, read_json, write_json

__all__ = [
    "DEFAULT_MAX_JSON_BYTES",
    "Envelope",
    "InvalidJSON",
    "decode_json",
    "error_json",
    "read_json",
    "write_json",
]
