"""Public exports for script loading."""

from .barrier import ScriptLoadBarrier
from .exceptions import ScriptAlreadyLoadedError, ScriptError
from .models import ScriptOrigin, ScriptSource

__all__ = [
    "ScriptAlreadyLoadedError",
    "ScriptError",
    "ScriptLoadBarrier",
    "ScriptOrigin",
    "ScriptSource",
]
