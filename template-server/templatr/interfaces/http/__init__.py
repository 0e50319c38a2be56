"""HTTP adapters serving a Template through Starlette/FastAPI."""

from .middleware import TemplateMiddleware, handle_request, template_middleware

__all__ = [
    "TemplateMiddleware",
    "handle_request",
    "template_middleware",
]
