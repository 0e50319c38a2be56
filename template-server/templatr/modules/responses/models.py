"""Request-scoped page wrapper handed to instance-ready listeners."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from templatr.exceptions import ScriptExecutionError
from templatr.infrastructure.html import HtmlElement, serialize_document

from .counter import RequestWaitCounter

if TYPE_CHECKING:
    from templatr.modules.templates.engine import ScriptEngine

logger = logging.getLogger(__name__)

PageScript = Union[str, Callable[[HtmlElement], Any]]


@dataclass(slots=True)
class PageContext:
    """A private document instantiated for one request plus its location."""

    document: HtmlElement
    location: str
    request: Any = None

    @property
    def html(self) -> str:
        return serialize_document(self.document)


class PageResponse:
    """Wraps the document produced for a request until it is sent.

    Listeners can hold the response open for asynchronous work with ``wait`` and
    ``done``; the HTML is emitted once the number of pending tasks returns to zero.
    ``run_script`` applies a callable or a script body to the document on the next
    loop tick.
    """

    def __init__(self, page: PageContext, engine: "ScriptEngine") -> None:
        self.page = page
        self._engine = engine
        self._result: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._counter = RequestWaitCounter(self._emit)
        self._tasks: set[asyncio.Future] = set()

    @property
    def document(self) -> HtmlElement:
        return self.page.document

    @property
    def location(self) -> str:
        return self.page.location

    @property
    def request(self) -> Any:
        return self.page.request

    @property
    def html(self) -> str:
        return self.page.html

    @property
    def waiting(self) -> int:
        return self._counter.count

    @property
    def sent(self) -> bool:
        return self._counter.sent

    def wait(self) -> None:
        """Hold the response open until a matching ``done`` call."""
        self._counter.wait()

    def done(self) -> None:
        """Mark one asynchronous task complete; sends when none remain."""
        self._counter.done()

    def send(self) -> bool:
        """Send now, whether or not tasks are still pending."""
        return self._counter.send()

    def settle(self) -> None:
        self._counter.settle()

    def watch(self, awaitable: Awaitable[Any]) -> None:
        """Keep the response open until ``awaitable`` finishes."""
        self.wait()
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._on_watched_done)

    def run_script(self, script: PageScript) -> None:
        self.wait()
        asyncio.get_running_loop().call_soon(self._run_script, script)

    def fail(self, exc: BaseException) -> None:
        """Abort the request with ``exc``; later sends become no-ops."""
        self._counter.sent = True
        if self._result.done():
            logger.warning("Error after response for %s was sent: %s", self.location, exc)
            return
        self._result.set_exception(exc)

    async def result(self) -> str:
        return await self._result

    def _emit(self) -> None:
        if not self._result.done():
            self._result.set_result(self.html)

    def _run_script(self, script: PageScript) -> None:
        try:
            if callable(script):
                outcome = script(self.document)
                if inspect.isawaitable(outcome):
                    self.watch(outcome)
            else:
                self._engine.evaluate(self.page, str(script))
        except Exception as exc:  # pylint: disable=broad-except
            name = getattr(script, "__name__", None) or "<inline>"
            error = ScriptExecutionError(f"script {name} failed: {exc}", script=name)
            error.__cause__ = exc
            self.fail(error)
            return
        self.done()

    def _on_watched_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Watched task cancelled for %s", self.location)
        elif task.exception() is not None:
            exc = task.exception()
            error = ScriptExecutionError(f"handler failed for {self.location}: {exc}")
            error.__cause__ = exc
            self.fail(error)
            return
        self.done()
