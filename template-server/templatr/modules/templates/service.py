"""The Template: precaches the scripts of an HTML file and renders it per request."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urlsplit

from templatr.infrastructure.html import (
    HtmlElement,
    compact_whitespace,
    parse_document,
    script_elements,
    serialize_document,
)
from templatr.infrastructure.loaders import Fetcher, Reader, read_local_file
from templatr.modules.bundles import BundlePlan, BundlePlanner, match_bundle_index
from templatr.modules.bundles.planner import remove_server_only
from templatr.modules.responses import PageContext, PageResponse
from templatr.modules.scripts import ScriptLoadBarrier, ScriptSource

from .engine import PassiveScriptEngine, ScriptEngine
from .exceptions import (
    ScriptExecutionError,
    TemplateNotFoundError,
    TemplateNotReadyError,
    TemplateParseError,
)
from .models import SCRIPT_MEDIA_TYPE, RenderedResource
from .options import (
    DEFAULT_LOCATION_ORIGIN,
    DEFAULT_TEMPLATE_NAME,
    INSTANCE_READY_EVENT,
    TEMPLATE_PREPARED_EVENT,
    TemplateOption,
    TemplateState,
)

module_logger = logging.getLogger(__name__)

PreparedHandler = Callable[["Template"], Any]
InstanceReadyHandler = Callable[[PageResponse], Union[None, Awaitable[Any]]]


class Template:
    """Stores a template and precaches the JavaScript it references.

    The template file is read and parsed synchronously. ``start`` issues the loads
    for every script tag; once all of them have resolved adjacent scripts are merged
    (with ``MERGE_SCRIPTS``), the markup is frozen and the template turns ``READY``.
    From then on each request gets its own copy of the document, the scripts are run
    against it and the HTML is sent once every listener is done with it.
    """

    INSTANCE_READY_EVENT = INSTANCE_READY_EVENT
    TEMPLATE_PREPARED_EVENT = TEMPLATE_PREPARED_EVENT

    REMOVE_WHITE_SPACE = TemplateOption.REMOVE_WHITE_SPACE
    MERGE_SCRIPTS = TemplateOption.MERGE_SCRIPTS
    VERBOSE = TemplateOption.VERBOSE

    def __init__(
        self,
        template_dir: Union[str, Path],
        template_name: Optional[str] = None,
        options: Union[int, TemplateOption] = TemplateOption.NONE,
        *,
        engine: Optional[ScriptEngine] = None,
        reader: Optional[Reader] = None,
        fetcher: Optional[Fetcher] = None,
        location_origin: str = DEFAULT_LOCATION_ORIGIN,
        encoding: str = "utf-8",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.options = TemplateOption(options)
        self.directory = Path(template_dir)
        self.name = template_name or DEFAULT_TEMPLATE_NAME
        self.location_origin = location_origin.rstrip("/")
        self._engine: ScriptEngine = engine or PassiveScriptEngine()
        self._logger = logger or module_logger

        path = self.directory / self.name
        try:
            raw_text = path.read_text(encoding=encoding)
        except OSError as exc:
            raise TemplateNotFoundError(f"template {path} could not be read: {exc}") from exc

        if self.options & TemplateOption.REMOVE_WHITE_SPACE:
            raw_text = compact_whitespace(raw_text)
        self.raw_text = raw_text

        try:
            self._document: Optional[HtmlElement] = parse_document(raw_text)
        except ValueError as exc:
            raise TemplateParseError(str(exc)) from exc

        reader = reader or functools.partial(read_local_file, encoding=encoding)
        self.scripts: list[ScriptSource] = [
            ScriptSource(node, self.directory, reader=reader, fetcher=fetcher)
            for node in list(script_elements(self._document))
        ]
        remove_server_only(self.scripts)

        self.state = TemplateState.LOADING
        self.prepared_markup: Optional[str] = None
        self.bundles = BundlePlan()

        self._barrier: Optional[ScriptLoadBarrier] = None
        self._prepared = asyncio.Event()
        self._on_prepared: Optional[PreparedHandler] = None
        self._on_instance_ready: Optional[InstanceReadyHandler] = None

    def __repr__(self) -> str:
        return f"Template(path={str(self.directory / self.name)!r}, state={self.state.value!r})"

    @property
    def is_ready(self) -> bool:
        return self.state is TemplateState.READY

    def on_prepared(self, handler: PreparedHandler) -> PreparedHandler:
        """Register the listener called once when the template becomes ready."""
        self._on_prepared = handler
        return handler

    def on_instance_ready(self, handler: InstanceReadyHandler) -> InstanceReadyHandler:
        """Register the listener called for every request before it is sent.

        The listener receives the ``PageResponse``; long running work should call
        ``wait`` and later ``done``, or the listener can simply be a coroutine.
        """
        self._on_instance_ready = handler
        return handler

    def start(self) -> None:
        """Begin loading every script. Must run inside the event loop."""
        if self._barrier is not None:
            return
        for script in self.scripts:
            script.resolve()
        self._barrier = ScriptLoadBarrier(self.scripts, self._finalise, on_loaded=self._on_script_loaded)

    async def prepare(self) -> "Template":
        """Start loading and wait until the template is ready."""
        self.start()
        await self.wait_prepared()
        return self

    async def wait_prepared(self, timeout: Optional[float] = None) -> None:
        if timeout is None:
            await self._prepared.wait()
            return
        await asyncio.wait_for(self._prepared.wait(), timeout)

    def serve_bundle(self, path: str) -> Optional[str]:
        """Content of the bundle addressed by ``path``, or None to fall through."""
        self._ensure_ready()
        index = match_bundle_index(path)
        if index is None:
            return None
        bundle = self.bundles.get(index)
        if bundle is None or not bundle.content:
            return None
        self._log("Serving bundle %d for %s", index, path)
        return bundle.content

    async def dispatch(self, url: str, request: Any = None) -> RenderedResource:
        """Serve a bundle when ``url`` names one, otherwise render the document."""
        path = urlsplit(url).path
        content = self.serve_bundle(path)
        if content is not None:
            return RenderedResource(body=content, media_type=SCRIPT_MEDIA_TYPE, bundle_index=match_bundle_index(path))
        return RenderedResource(body=await self.render(url, request))

    async def render(self, url: str, request: Any = None) -> str:
        response = await self.instantiate(url, request)
        return await response.result()

    async def instantiate(self, url: str, request: Any = None) -> PageResponse:
        """Build the request document, run the scripts and notify the listener."""
        self._ensure_ready()
        page = PageContext(
            document=parse_document(self.prepared_markup),
            location=self.location_for(url),
            request=request,
        )

        for script in self.scripts:
            try:
                self._engine.execute(page, script)
            except Exception as exc:  # pylint: disable=broad-except
                raise ScriptExecutionError(
                    f"script {script.label} failed for {page.location}: {exc}",
                    script=script.label,
                ) from exc

        response = PageResponse(page, self._engine)
        if self._on_instance_ready is not None:
            outcome = self._on_instance_ready(response)
            if inspect.isawaitable(outcome):
                response.watch(outcome)

        response.settle()
        return response

    def location_for(self, url: str) -> str:
        if not url.startswith("/"):
            url = "/" + url
        return self.location_origin + url

    def _ensure_ready(self) -> None:
        if not self.is_ready:
            raise TemplateNotReadyError(f"template {self.name} is still loading its scripts")

    def _log(self, message: str, *args: Any) -> None:
        level = logging.INFO if self.options & TemplateOption.VERBOSE else logging.DEBUG
        self._logger.log(level, message, *args)

    def _on_script_loaded(self, script: ScriptSource, content: str) -> None:
        self._log("Script loaded: %s (%d characters)", script.label, len(content))

    def _finalise(self) -> None:
        planner = BundlePlanner(merge=bool(self.options & TemplateOption.MERGE_SCRIPTS))
        bundles = planner.plan(self.scripts)
        prepared_markup = serialize_document(self._document)

        self.bundles = bundles
        self.prepared_markup = prepared_markup
        self._document = None
        self.state = TemplateState.READY
        self._prepared.set()

        self._log("Template ready for use: %d scripts, %d bundles", len(self.scripts), len(bundles))
        if self._on_prepared is not None:
            self._on_prepared(self)

    def middleware(self, *, ready_timeout: Optional[float] = None):
        """Return an ``@app.middleware("http")`` compatible callable for this template."""
        from templatr.interfaces.http.middleware import template_middleware

        return template_middleware(self, ready_timeout=ready_timeout)
