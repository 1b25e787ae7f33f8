"""
Bot detection utilities — framework-agnostic.

A visit is flagged as automated when its raw ``User-Agent`` contains one of a
small fixed vocabulary (``bot``, ``crawler``, ``spider``), case-insensitively.
"""

from __future__ import annotations

import re
from typing import Optional

BOT_PATTERN = re.compile(r"bot|crawler|spider", re.IGNORECASE)


def is_bot_request(user_agent: Optional[str]) -> bool:
    """Return True if *user_agent* looks like an automated crawler or bot.

    Args:
        user_agent: The raw ``User-Agent`` header value, or ``None``.

    Returns:
        ``False`` for a missing or empty user agent.
    """
    if not user_agent:
        return False
    return BOT_PATTERN.search(user_agent) is not None


def get_bot_name(user_agent: Optional[str]) -> Optional[str]:
    """Return the matched vocabulary word (lower-cased), or ``None`` for humans."""
    if not user_agent:
        return None
    match = BOT_PATTERN.search(user_agent)
    return match.group(0).lower() if match else None
