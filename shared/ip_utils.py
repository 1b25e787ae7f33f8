"""
Client IP resolution for visit records.
"""

from __future__ import annotations

from typing import Iterable

from fastapi import Request

# Checked in order; the first non-empty value wins.
PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(
    request: Request, proxy_headers: Iterable[str] = PROXY_HEADERS
) -> str:
    """Return the visitor's IP address for a FastAPI ``Request``.

    ``X-Forwarded-For`` may carry a chain (``client, proxy1, proxy2``); only
    the first entry is used. Without proxy headers the direct peer address is
    returned, or ``""`` when the transport exposes none.
    """
    for header in proxy_headers:
        value = request.headers.get(header)
        if not value:
            continue
        client_ip = value.split(",")[0].strip()
        if client_ip:
            return client_ip

    return request.client.host if request.client else ""
