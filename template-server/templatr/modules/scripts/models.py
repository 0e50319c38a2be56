"""Script sources discovered in a template document."""

from __future__ import annotations

import asyncio
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlsplit

from templatr.infrastructure.html import HtmlElement, first_text
from templatr.infrastructure.loaders import Fetcher, Reader, RemoteFetcher, read_local_file

from .exceptions import ScriptAlreadyLoadedError

logger = logging.getLogger(__name__)

SERVER_ONLY_PATTERN = re.compile(r"server", re.IGNORECASE)
REMOTE_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

LoadedCallback = Callable[["ScriptSource", str], None]


class ScriptOrigin(str, Enum):
    INLINE = "inline"
    LOCAL_FILE = "local_file"
    REMOTE = "remote"


class ScriptSource:
    """One ``<script>`` element of a template and the text it resolves to.

    Local ``src`` values are resolved against ``base_dir`` on the assumption that
    the template directory is the root of the site and that the file system
    layout mirrors the URLs. Absolute HTTP(S) URLs are fetched remotely and
    inline scripts are read straight from the parsed element.
    """

    def __init__(
        self,
        node: HtmlElement,
        base_dir: Path,
        *,
        reader: Reader = read_local_file,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.node = node
        self.src: str = (node.get("src") or "").strip()
        self.server_only = bool(SERVER_ONLY_PATTERN.search(node.get("runat") or ""))
        self.identifier: Optional[str] = node.get("id") or self.src or None
        self.content = ""
        self.loaded = False

        self._reader = reader
        self._fetcher = fetcher
        self._subscriber: Optional[LoadedCallback] = None
        self._resolving = False
        self._task: Optional[asyncio.Task] = None

        if not self.src:
            self.origin = ScriptOrigin.INLINE
            self.locator = first_text(node)
        elif REMOTE_PATTERN.match(self.src):
            self.origin = ScriptOrigin.REMOTE
            self.locator = self.src
        else:
            self.origin = ScriptOrigin.LOCAL_FILE
            parts = urlsplit(self.src)
            relative = unquote(parts.netloc + parts.path).lstrip("/")
            self.locator = str(Path(base_dir) / relative)

    def __repr__(self) -> str:
        return (
            f"ScriptSource(origin={self.origin.value!r}, src={self.src!r}, "
            f"server_only={self.server_only}, loaded={self.loaded})"
        )

    def __str__(self) -> str:
        return self.content

    @property
    def label(self) -> str:
        return self.src or self.identifier or "<inline>"

    def subscribe(self, callback: LoadedCallback) -> None:
        """Register the single listener told when the content arrives."""
        self._subscriber = callback

    def resolve(self) -> None:
        """Start loading the content; must be called from a running event loop."""
        if self._resolving or self.loaded:
            raise ScriptAlreadyLoadedError(f"script {self.label} is already resolving")
        self._resolving = True
        loop = asyncio.get_running_loop()

        if self.origin is ScriptOrigin.INLINE:
            loop.call_soon(self.set_content, self.locator)
            return

        self._task = loop.create_task(self._load(), name=f"load-script:{self.label}")

    def set_content(self, content: Optional[str]) -> "ScriptSource":
        if self.loaded:
            raise ScriptAlreadyLoadedError(f"script {self.label} already has content")
        self.content = content or ""
        self.loaded = True
        if self._subscriber is not None:
            self._subscriber(self, self.content)
        return self

    async def _load(self) -> None:
        try:
            if self.origin is ScriptOrigin.LOCAL_FILE:
                content = await self._reader(Path(self.locator))
            else:
                fetcher = self._fetcher or RemoteFetcher()
                content = await fetcher(self.locator)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to load script %s: %s", self.locator, exc)
            content = ""
        self.set_content(content)
