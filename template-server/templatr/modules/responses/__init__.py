"""Public exports for request-scoped responses."""

from .counter import RequestWaitCounter
from .models import PageContext, PageResponse

__all__ = [
    "PageContext",
    "PageResponse",
    "RequestWaitCounter",
]
