"""
Short-code redirect.

GET /{short_code} records the visit, then serves the intermediate page that
tries the native app before falling back to the web URL. If the stored URL no
longer matches any registered platform, the visitor gets a plain 302 to it.

Errors render HTML pages rather than the JSON error body used by /api.
"""

from __future__ import annotations


from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from dependencies import get_link_service, get_page_renderer
from errors import NotFoundError
from infrastructure.pages import PageRenderer
from services.link_service import LinkService
from shared.ip_utils import get_client_ip
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}", response_class=HTMLResponse)
async def redirect_short_code(
    short_code: str,
    request: Request,
    service: LinkService = Depends(get_link_service),
    pages: PageRenderer = Depends(get_page_renderer),
) -> Response:
    try:
        outcome = await service.record_visit(
            short_code,
            request.headers.get("User-Agent"),
            get_client_ip(request),
        )
    except NotFoundError:
        return HTMLResponse(pages.not_found(), status_code=404)
    except Exception as e:
        log.error(
            "redirect_failed",
            short_code=short_code,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=e,
        )
        return HTMLResponse(pages.error(), status_code=500)

    resolved = outcome.resolved
    if resolved is None:
        log.info(
            "redirect_platform_unresolved",
            short_code=short_code,
            platform=outcome.link.platform,
        )
        return RedirectResponse(outcome.link.original_url, status_code=302)

    return HTMLResponse(
        pages.intermediate(resolved.deep_link, resolved.fallback_url, resolved.platform)
    )
