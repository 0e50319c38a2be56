"""Script source specific exceptions."""

from templatr.exceptions import TemplatrError


class ScriptError(TemplatrError):
    """Base class for script source errors."""


class ScriptAlreadyLoadedError(ScriptError):
    """Raised when a script source is resolved or given content a second time."""
