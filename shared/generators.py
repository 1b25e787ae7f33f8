"""
Short code generator — pure, side-effect-free.

Uniqueness is not guaranteed here; the repository's unique index rejects
collisions and the link service retries with a fresh code.
"""

from __future__ import annotations

import secrets
import string

SHORT_CODE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def generate_short_code(length: int = 7) -> str:
    """Generate an alphanumeric short code of configurable length.

    Args:
        length: Number of characters (default 7).

    Returns:
        Random alphanumeric string of the requested length.
    """
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(length))
