"""
User-agent classification on top of ``ua-parser``.

Reduces a raw ``User-Agent`` header to the three categorical labels the
analytics breakdowns use. Labels the parser cannot determine become
``"Unknown"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ua_parser import parse

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class UserAgentInfo:
    device: str
    browser: str
    os: str


def _family(component) -> str:
    family = getattr(component, "family", None) if component is not None else None
    return family or UNKNOWN


def classify(user_agent: Optional[str]) -> UserAgentInfo:
    """Classify a raw user-agent string into device / browser / OS families.

    Args:
        user_agent: The ``User-Agent`` header value; ``None`` or empty is allowed.

    Returns:
        A ``UserAgentInfo`` whose fields are never empty.
    """
    if not user_agent:
        return UserAgentInfo(device=UNKNOWN, browser=UNKNOWN, os=UNKNOWN)

    result = parse(user_agent)
    return UserAgentInfo(
        device=_family(result.device),
        browser=_family(result.user_agent),
        os=_family(result.os),
    )
