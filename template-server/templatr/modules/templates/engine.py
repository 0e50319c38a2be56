"""Script execution collaborators.

Templatr does not interpret JavaScript. Each request's scripts are handed to a
``ScriptEngine`` which decides what running a script means for the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from templatr.modules.responses import PageContext
from templatr.modules.scripts import ScriptSource

logger = logging.getLogger(__name__)

ScriptHandler = Callable[[PageContext, Optional[ScriptSource]], Any]


class ScriptEngine(Protocol):
    def execute(self, page: PageContext, script: ScriptSource) -> None:
        ...

    def evaluate(self, page: PageContext, text: str) -> None:
        ...


class PassiveScriptEngine:
    """Leaves the document untouched."""

    def execute(self, page: PageContext, script: ScriptSource) -> None:
        logger.debug("Not executing %s script %s for %s", script.origin.value, script.label, page.location)

    def evaluate(self, page: PageContext, text: str) -> None:
        logger.debug("Not evaluating %d characters for %s", len(text), page.location)


@dataclass(slots=True)
class CallbackScriptEngine:
    """Runs Python callables registered against a script's ``id`` or ``src``.

    Scripts without a registered handler are skipped. ``evaluate`` treats the
    text as a handler name.
    """

    handlers: dict[str, ScriptHandler] = field(default_factory=dict)

    def register(self, identifier: str, handler: Optional[ScriptHandler] = None):
        if handler is not None:
            self.handlers[identifier] = handler
            return handler

        def decorator(func: ScriptHandler) -> ScriptHandler:
            self.handlers[identifier] = func
            return func

        return decorator

    def execute(self, page: PageContext, script: ScriptSource) -> None:
        handler = self.handlers.get(script.identifier or "")
        if handler is None:
            return
        handler(page, script)

    def evaluate(self, page: PageContext, text: str) -> None:
        handler = self.handlers.get(text.strip())
        if handler is None:
            logger.debug("No handler registered for %r", text.strip())
            return
        handler(page, None)
