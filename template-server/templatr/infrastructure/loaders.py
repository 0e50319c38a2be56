"""Default read/fetch collaborators used to load script content."""

from __future__ import annotations

import asyncio
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

import aiofiles

Reader = Callable[[Path], Awaitable[str]]
Fetcher = Callable[[str], Awaitable[str]]

USER_AGENT = "templatr/0.3"


async def read_local_file(path: Path, encoding: str = "utf-8") -> str:
    async with aiofiles.open(path, "r", encoding=encoding) as stream:
        return await stream.read()


@dataclass(slots=True)
class RemoteFetcher:
    """HTTP GET through ``urllib.request``, executed in a worker thread."""

    timeout: float = 30.0
    user_agent: str = USER_AGENT

    async def __call__(self, url: str) -> str:
        return await asyncio.to_thread(self._fetch, url)

    def _fetch(self, url: str) -> str:
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent}, method="GET")
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            body = resp.read()
            charset = resp.headers.get_content_charset() or "utf-8"
        try:
            return body.decode(charset, errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")
