"""Tests for script sources: origin detection and non-fatal loading."""
from __future__ import annotations

import asyncio
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
from lxml import html as lxml_html

from templatr.infrastructure.loaders import RemoteFetcher
from templatr.modules.scripts import ScriptAlreadyLoadedError, ScriptOrigin, ScriptSource
from tests.conftest import FakeFetcher, run

SERVED_SCRIPTS = {
    "/lib.js": ("application/javascript; charset=utf-8", "var lib = 'é';"),
    "/odd-charset.js": ("application/javascript; charset=no-such-codec", "var odd = 1;"),
}


class ScriptRequestHandler(BaseHTTPRequestHandler):
    def do_GET(self):  # noqa: N802
        entry = SERVED_SCRIPTS.get(self.path)
        if entry is None:
            self.send_error(404)
            return
        content_type, body = entry
        payload = body.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):  # pylint: disable=redefined-builtin
        pass


@pytest.fixture
def script_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), ScriptRequestHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        host, port = server.server_address[:2]
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(5)


def load_remote(url: str, fetcher) -> ScriptSource:
    async def scenario():
        source = make_source(f'<script src="{url}"></script>', fetcher=fetcher)
        done = asyncio.Event()
        source.subscribe(lambda script, content: done.set())
        source.resolve()
        await asyncio.wait_for(done.wait(), 5)
        return source

    return run(scenario())


def make_source(markup: str, base_dir: Path = Path("/site"), **kwargs) -> ScriptSource:
    return ScriptSource(lxml_html.fragment_fromstring(markup), base_dir, **kwargs)


def test_inline_origin_reads_first_text_child():
    source = make_source("<script>var a = 1;</script>")
    assert source.origin is ScriptOrigin.INLINE
    assert source.locator == "var a = 1;"
    assert not source.loaded
    assert source.content == ""


def test_local_origin_resolves_against_site_root():
    source = make_source('<script src="/js/app.js?v=3"></script>', Path("/srv/site"))
    assert source.origin is ScriptOrigin.LOCAL_FILE
    assert source.locator == str(Path("/srv/site/js/app.js"))

    relative = make_source('<script src="./js/app.js"></script>', Path("/srv/site"))
    assert relative.locator == str(Path("/srv/site/js/app.js"))


@pytest.mark.parametrize(
    "src, expected",
    [
        ("http://cdn.example.com/lib.js", "http://cdn.example.com/lib.js"),
        ("HTTPS://cdn.example.com/lib.js", "HTTPS://cdn.example.com/lib.js"),
    ],
)
def test_remote_origin(src, expected):
    source = make_source(f'<script src="{src}"></script>')
    assert source.origin is ScriptOrigin.REMOTE
    assert source.locator == expected


def test_protocol_relative_src_is_a_local_file():
    source = make_source('<script src="//cdn.example.com/lib.js"></script>', Path("/srv/site"))
    assert source.origin is ScriptOrigin.LOCAL_FILE
    assert source.locator == str(Path("/srv/site/cdn.example.com/lib.js"))


@pytest.mark.parametrize(
    "attribute, expected",
    [
        ('runat="server"', True),
        ('runat="SERVER"', True),
        ('runat="server-side"', True),
        ('runat="client"', False),
        ("", False),
    ],
)
def test_server_only_detection(attribute, expected):
    source = make_source(f"<script {attribute}>var a;</script>")
    assert source.server_only is expected


def test_inline_content_is_delivered_on_next_tick():
    async def scenario():
        source = make_source("<script>var a = 1;</script>")
        seen = []
        source.subscribe(lambda script, content: seen.append(content))
        source.resolve()
        assert not source.loaded
        assert seen == []
        await asyncio.sleep(0)
        return source, seen

    source, seen = run(scenario())
    assert source.loaded
    assert source.content == "var a = 1;"
    assert seen == ["var a = 1;"]
    assert str(source) == "var a = 1;"


def test_empty_inline_script_resolves_to_empty_content():
    async def scenario():
        source = make_source("<script></script>")
        source.resolve()
        await asyncio.sleep(0)
        return source

    source = run(scenario())
    assert source.loaded
    assert source.content == ""


def test_local_file_is_read(tmp_path):
    (tmp_path / "app.js").write_text("console.log('hi');", encoding="utf-8")

    async def scenario():
        source = make_source('<script src="app.js"></script>', tmp_path)
        done = asyncio.Event()
        source.subscribe(lambda script, content: done.set())
        source.resolve()
        await asyncio.wait_for(done.wait(), 5)
        return source

    source = run(scenario())
    assert source.content == "console.log('hi');"


def test_missing_local_file_resolves_empty(tmp_path):
    async def scenario():
        source = make_source('<script src="missing.js"></script>', tmp_path)
        done = asyncio.Event()
        source.subscribe(lambda script, content: done.set())
        source.resolve()
        await asyncio.wait_for(done.wait(), 5)
        return source

    source = run(scenario())
    assert source.loaded
    assert source.content == ""


def test_remote_script_uses_fetcher():
    fetcher = FakeFetcher({"https://cdn.example.com/lib.js": "var lib;"})

    async def scenario():
        source = make_source('<script src="https://cdn.example.com/lib.js"></script>', fetcher=fetcher)
        done = asyncio.Event()
        source.subscribe(lambda script, content: done.set())
        source.resolve()
        await asyncio.wait_for(done.wait(), 5)
        return source

    source = run(scenario())
    assert source.content == "var lib;"
    assert fetcher.calls == ["https://cdn.example.com/lib.js"]


def test_failed_remote_fetch_resolves_empty():
    fetcher = FakeFetcher()

    async def scenario():
        source = make_source('<script src="https://down.example.com/lib.js"></script>', fetcher=fetcher)
        done = asyncio.Event()
        source.subscribe(lambda script, content: done.set())
        source.resolve()
        await asyncio.wait_for(done.wait(), 5)
        return source

    source = run(scenario())
    assert source.loaded
    assert source.content == ""


def test_unexpected_fetcher_error_resolves_empty():
    fetcher = FakeFetcher({"https://proxy.example.com/lib.js": RuntimeError("proxy blew up")})
    source = load_remote("https://proxy.example.com/lib.js", fetcher)
    assert source.loaded
    assert source.content == ""


def test_remote_fetcher_returns_body(script_server):
    source = load_remote(f"{script_server}/lib.js", RemoteFetcher(timeout=2))
    assert source.content == "var lib = 'é';"


def test_remote_fetcher_http_error_resolves_empty(script_server):
    source = load_remote(f"{script_server}/missing.js", RemoteFetcher(timeout=2))
    assert source.loaded
    assert source.content == ""


def test_remote_fetcher_unknown_charset_falls_back_to_utf8(script_server):
    fetcher = RemoteFetcher(timeout=2)
    assert run(fetcher(f"{script_server}/odd-charset.js")) == "var odd = 1;"

    source = load_remote(f"{script_server}/odd-charset.js", fetcher)
    assert source.content == "var odd = 1;"


def test_content_is_set_only_once():
    source = make_source("<script>var a;</script>")
    source.set_content("var a;")
    with pytest.raises(ScriptAlreadyLoadedError):
        source.set_content("var b;")
    assert source.content == "var a;"


def test_resolve_twice_is_rejected():
    async def scenario():
        source = make_source("<script>var a;</script>")
        source.resolve()
        with pytest.raises(ScriptAlreadyLoadedError):
            source.resolve()
        await asyncio.sleep(0)

    run(scenario())
