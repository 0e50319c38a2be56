"""Public exports for the template domain."""

from .engine import CallbackScriptEngine, PassiveScriptEngine, ScriptEngine
from .exceptions import (
    ScriptExecutionError,
    TemplateError,
    TemplateNotFoundError,
    TemplateNotReadyError,
    TemplateParseError,
)
from .models import RenderedResource
from .options import INSTANCE_READY_EVENT, TEMPLATE_PREPARED_EVENT, TemplateOption, TemplateState
from .service import Template

__all__ = [
    "CallbackScriptEngine",
    "INSTANCE_READY_EVENT",
    "PassiveScriptEngine",
    "RenderedResource",
    "ScriptEngine",
    "ScriptExecutionError",
    "TEMPLATE_PREPARED_EVENT",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateNotReadyError",
    "TemplateOption",
    "TemplateParseError",
    "TemplateState",
]
