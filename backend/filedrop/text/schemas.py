"""Pydantic schemas for the text helpers."""
from pydantic import BaseModel, Field


class SlugRequest(BaseModel):
    """Request body for slug generation."""
    text: str = Field(..., description="Text to turn into a slug")


class SlugResult(BaseModel):
    slug: str = Field(..., description="Lowercase, dash separated slug")
