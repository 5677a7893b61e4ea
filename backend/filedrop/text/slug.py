"""URL slug generation."""
import re

_NON_ALNUM = re.compile(r"[^a-z\d]+", re.ASCII)


class SlugError(ValueError):
    """Input cannot be turned into a slug."""


def slugify(text: str) -> str:
    """Lowercase ``text`` and join its ASCII letter/digit runs with ``-``.

    >>> slugify("now is the time!")
    'now-is-the-time'

    Raises:
        SlugError: If ``text`` is empty or holds no ASCII letters or digits.
    """
    if text == "":
        raise SlugError("Empty string not permitted")

    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    if not slug:
        raise SlugError("String contains no letters or digits, slug length is zero")
    return slug
