"""Pydantic schema for the JSON response envelope."""
from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Wire shape shared by every JSON response: ``{error, message, data?}``.

    ``data`` is left out of the serialized payload when it is None.
    """
    error: bool = Field(default=False, description="True when the request failed")
    message: str = Field(default="", description="Human readable outcome")
    data: Optional[T] = Field(default=None, description="Response payload")

    def to_payload(self) -> Dict[str, Any]:
        payload = jsonable_encoder(self)
        if self.data is None:
            payload.pop("data", None)
        return payload
