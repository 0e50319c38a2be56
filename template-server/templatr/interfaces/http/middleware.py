"""ASGI middleware that answers every request from a prepared Template."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from templatr.modules.templates import Template

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def _request_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url += "?" + request.url.query
    return url


async def handle_request(template: Template, request: Request, *, ready_timeout: Optional[float] = None) -> Response:
    """Serve a bundle or render the template for ``request``.

    Requests arriving while the scripts are still loading are held until the
    template is ready; they get a 503 once ``ready_timeout`` expires.
    """
    if not template.is_ready:
        template.start()
        try:
            await template.wait_prepared(ready_timeout)
        except asyncio.TimeoutError:
            logger.warning("Template %s not ready after %ss, rejecting %s", template.name, ready_timeout, request.url.path)
            return JSONResponse(
                {"detail": "Template is still loading"},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

    resource = await template.dispatch(_request_url(request), request)
    if resource.is_bundle:
        return Response(content=resource.body, media_type=resource.media_type)
    return HTMLResponse(content=resource.body)


def template_middleware(template: Template, *, ready_timeout: Optional[float] = None):
    """Function middleware for ``app.middleware("http")``; never calls ``call_next``."""

    async def middleware(request: Request, call_next: CallNext) -> Response:
        return await handle_request(template, request, ready_timeout=ready_timeout)

    return middleware


class TemplateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, template: Template, ready_timeout: Optional[float] = None) -> None:
        super().__init__(app)
        self.template = template
        self.ready_timeout = ready_timeout

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        return await handle_request(self.template, request, ready_timeout=self.ready_timeout)
