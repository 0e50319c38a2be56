"""Templatr: precompiled HTML templates served through an ASGI middleware."""

__version__ = "0.3.0"

from templatr.modules.templates import (  # noqa: E402
    INSTANCE_READY_EVENT,
    TEMPLATE_PREPARED_EVENT,
    Template,
    TemplateOption,
)

__all__ = [
    "__version__",
    "INSTANCE_READY_EVENT",
    "TEMPLATE_PREPARED_EVENT",
    "Template",
    "TemplateOption",
]
