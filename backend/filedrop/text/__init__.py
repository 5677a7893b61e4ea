"""Text helpers: URL slug generation."""

from .slug import SlugError, slugify

__all__ = ["SlugError", "slugify"]
