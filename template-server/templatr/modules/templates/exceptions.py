"""Template domain specific exceptions."""

from templatr.exceptions import ScriptExecutionError, TemplatrError


class TemplateError(TemplatrError):
    """Base class for template related errors."""


class TemplateNotFoundError(TemplateError):
    """Raised when the template file cannot be read at construction time."""


class TemplateParseError(TemplateError):
    """Raised when the template markup cannot be parsed into a document."""


class TemplateNotReadyError(TemplateError):
    """Raised when a request is rendered before every script has loaded."""


__all__ = [
    "ScriptExecutionError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateNotReadyError",
    "TemplateParseError",
]
