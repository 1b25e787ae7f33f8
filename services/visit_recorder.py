"""
Visit record construction from raw request metadata.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.link import VisitRecord
from shared.bot_detection import is_bot_request
from shared.datetime_utils import utcnow
from shared.user_agent import classify


def build_visit_record(
    user_agent: Optional[str],
    ip: str,
    *,
    now: Optional[datetime] = None,
) -> VisitRecord:
    """Build the record stored for one redirect.

    A missing user agent still yields a complete record with ``"Unknown"``
    labels and ``is_bot=False``. ``country`` is left unset and
    ``app_opened`` starts (and stays) ``False``.
    """
    info = classify(user_agent)
    return VisitRecord(
        timestamp=now or utcnow(),
        user_agent=user_agent or None,
        ip=ip or "",
        device=info.device,
        browser=info.browser,
        os=info.os,
        is_bot=is_bot_request(user_agent),
        app_opened=False,
    )
