"""Shared test fixtures for the message info tests."""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from msginfo.config import PipelineConfig
from msginfo.models import UrlInfo


SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Test Page Title</title>
    <meta name="description" content="This is a test meta description.">
</head>
<body>
    <h1>Main Heading</h1>
    <svg><title>Icon title</title></svg>
    <p>This is the main content of the page.</p>
</body>
</html>"""


SAMPLE_HTML_NO_TITLE = """<html><body><p>Hello World</p></body></html>"""


SAMPLE_HTML_BODY_TITLE = """<html><body><div><span>x</span></div>
<div><title>Late Title</title></div></body></html>"""


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def sample_html_no_title() -> str:
    return SAMPLE_HTML_NO_TITLE


@pytest.fixture
def sample_html_body_title() -> str:
    return SAMPLE_HTML_BODY_TITLE


@pytest.fixture
def fast_config() -> PipelineConfig:
    """Short timeouts so timeout paths finish quickly."""
    return PipelineConfig(fetch_timeout=0.5, request_timeout=1.0)


# ── local page server ─────────────────────────────────────────────────


async def _page(request: web.Request) -> web.Response:
    return web.Response(text=SAMPLE_HTML, content_type="text/html")


async def _no_title(request: web.Request) -> web.Response:
    return web.Response(text=SAMPLE_HTML_NO_TITLE, content_type="text/html")


async def _latin1(request: web.Request) -> web.Response:
    body = "<html><head><title>Café Olé</title></head></html>".encode("latin-1")
    return web.Response(body=body, headers={"Content-Type": "text/html; charset=iso-8859-1"})


async def _missing(request: web.Request) -> web.Response:
    return web.Response(
        status=404,
        text="<html><head><title>Not Found</title></head></html>",
        content_type="text/html",
    )


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.Response(text=SAMPLE_HTML, content_type="text/html")


async def _redirect(request: web.Request) -> web.Response:
    raise web.HTTPFound("/page")


LARGE_HTML = (
    "<html><head><title>Large Page</title></head><body>"
    + "".join(f"<div class=\"row\"><p>paragraph {i} caf\u00e9</p></div>" for i in range(12000))
    + "</body></html>"
)


async def _large(request: web.Request) -> web.Response:
    # no charset so the client has to detect the encoding
    return web.Response(body=LARGE_HTML.encode("utf-8"), headers={"Content-Type": "text/html"})


@pytest_asyncio.fixture
async def page_server():
    """A local aiohttp server; yields a function mapping a path to a full URL."""
    app = web.Application()
    app.router.add_get("/page", _page)
    app.router.add_get("/no-title", _no_title)
    app.router.add_get("/latin1", _latin1)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/redirect", _redirect)
    app.router.add_get("/large", _large)

    server = TestServer(app)
    await server.start_server()
    try:
        yield lambda path: str(server.make_url(path))
    finally:
        await server.close()


# ── stub fetcher ──────────────────────────────────────────────────────


class StubFetcher:
    """Stands in for :class:`msginfo.fetcher.UrlFetcher` without the network.

    URLs listed in *titles* resolve to that title; anything else behaves
    like an unreachable host and yields ``None``.
    """

    def __init__(self, titles: Optional[dict[str, str]] = None, delay: float = 0.0) -> None:
        self.titles = titles or {}
        self.delay = delay
        self.requested: list[str] = []
        self.closed = False

    async def __aenter__(self) -> "StubFetcher":
        return self

    async def __aexit__(self, *exc) -> None:
        self.closed = True

    async def fetch_title(self, url: str) -> Optional[UrlInfo]:
        self.requested.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url not in self.titles:
            return None
        return UrlInfo(url=url, title=self.titles[url])


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher(titles={"http://cnn.com": "CNN - Breaking News"})


@pytest.fixture
def stub_fetcher_cls() -> type[StubFetcher]:
    return StubFetcher
