"""Shared fixtures: an on-disk site, fake fetchers and a recording script engine."""
from __future__ import annotations

import asyncio
import urllib.error
from pathlib import Path

import pytest

TEMPLATE_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>Templatr</title>
    <script src="/js/first.js"></script>
    <script src="js/second.js"></script>
  </head>
  <body>
    <div id="content"></div>
    <script runat="server" id="server-logic">document.title = 'server';</script>
    <script>var inline = 3;</script>
  </body>
</html>
"""

FIRST_JS = "var first = 1;\n"
SECOND_JS = "var second = 2;\n"


def run(coro):
    """Run async test."""
    return asyncio.run(coro)


class FakeFetcher:
    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    async def __call__(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.sleep(0)
        value = self.responses.get(url)
        if value is None:
            raise urllib.error.URLError(f"unreachable: {url}")
        if isinstance(value, Exception):
            raise value
        return value


class StalledFetcher:
    """Never completes, keeps a template in the loading state."""

    def __init__(self):
        self.calls: list[str] = []

    async def __call__(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.Event().wait()
        return ""


class RecordingEngine:
    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.executed: list[tuple[str, str]] = []
        self.evaluated: list[str] = []

    def execute(self, page, script) -> None:
        if self.fail_on is not None and script.label == self.fail_on:
            raise RuntimeError(f"boom in {script.label}")
        self.executed.append((page.location, script.label))

    def evaluate(self, page, text: str) -> None:
        self.evaluated.append(text)


def write_site(root: Path, html: str = TEMPLATE_HTML, name: str = "template.htm") -> Path:
    (root / "js").mkdir(parents=True, exist_ok=True)
    (root / "js" / "first.js").write_text(FIRST_JS, encoding="utf-8")
    (root / "js" / "second.js").write_text(SECOND_JS, encoding="utf-8")
    (root / name).write_text(html, encoding="utf-8")
    return root


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    return write_site(tmp_path)


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
