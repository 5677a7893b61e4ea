"""Naming policy for stored uploads."""
import secrets
import string

# Length of generated file names, extension excluded
RANDOM_NAME_LENGTH = 25

RANDOM_ALPHABET = string.ascii_letters + string.digits + "_+"


def random_string(length: int, alphabet: str = RANDOM_ALPHABET) -> str:
    """Generate a random string sampled uniformly from ``alphabet``.

    Uses the ``secrets`` CSPRNG so generated names cannot be predicted.
    """
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def file_extension(name: str) -> str:
    """Return the extension of ``name`` including the leading dot.

    The extension is everything from the last ``.`` in the final path
    segment, so ``archive.tar.gz`` gives ``.gz`` and ``.env`` gives ``.env``.
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot == -1:
        return ""
    return base[dot:]


def decide_name(original_name: str, rename: bool) -> str:
    """Decide the on-disk name for an uploaded file.

    Args:
        original_name: File name declared by the client.
        rename: When False the declared name is used as-is and the caller
            accepts collision and path traversal risks.

    Returns:
        The final file name.
    """
    if not rename:
        return original_name
    return random_string(RANDOM_NAME_LENGTH) + file_extension(original_name)
