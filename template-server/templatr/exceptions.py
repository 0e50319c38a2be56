"""Root of the templatr exception hierarchy."""

from typing import Optional


class TemplatrError(Exception):
    """Base class for every error raised by templatr."""


class ScriptExecutionError(TemplatrError):
    """Raised when running a script against a request document fails."""

    def __init__(self, message: str, *, script: Optional[str] = None) -> None:
        super().__init__(message)
        self.script = script
