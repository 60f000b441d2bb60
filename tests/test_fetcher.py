"""Tests for UrlFetcher against a local aiohttp server."""

from __future__ import annotations

import asyncio
import time

import pytest

from msginfo.config import PipelineConfig
from msginfo.fetcher import UrlFetcher
from msginfo.models import UrlInfo


class TestUrlFetcher:
    """Tests for UrlFetcher.fetch_title()."""

    @pytest.mark.asyncio
    async def test_title_found(self, page_server, fast_config):
        url = page_server("/page")
        async with UrlFetcher(fast_config) as fetcher:
            info = await fetcher.fetch_title(url)
        assert info == UrlInfo(url=url, title="Test Page Title")

    @pytest.mark.asyncio
    async def test_missing_title_is_empty_string(self, page_server, fast_config):
        url = page_server("/no-title")
        async with UrlFetcher(fast_config) as fetcher:
            info = await fetcher.fetch_title(url)
        assert info is not None
        assert info.title == ""

    @pytest.mark.asyncio
    async def test_declared_charset(self, page_server, fast_config):
        async with UrlFetcher(fast_config) as fetcher:
            info = await fetcher.fetch_title(page_server("/latin1"))
        assert info is not None
        assert info.title == "Café Olé"

    @pytest.mark.asyncio
    async def test_error_status_still_parsed(self, page_server, fast_config):
        async with UrlFetcher(fast_config) as fetcher:
            info = await fetcher.fetch_title(page_server("/missing"))
        assert info is not None
        assert info.title == "Not Found"

    @pytest.mark.asyncio
    async def test_follows_redirect(self, page_server, fast_config):
        url = page_server("/redirect")
        async with UrlFetcher(fast_config) as fetcher:
            info = await fetcher.fetch_title(url)
        assert info == UrlInfo(url=url, title="Test Page Title")

    @pytest.mark.asyncio
    async def test_slow_page_times_out(self, page_server):
        config = PipelineConfig(fetch_timeout=0.3, request_timeout=1.0)
        start = time.monotonic()
        async with UrlFetcher(config) as fetcher:
            info = await fetcher.fetch_title(page_server("/slow"))
        assert info is None
        assert time.monotonic() - start < 2.0

    @pytest.mark.asyncio
    async def test_connection_refused(self, fast_config):
        async with UrlFetcher(fast_config) as fetcher:
            assert await fetcher.fetch_title("http://127.0.0.1:1/") is None

    @pytest.mark.asyncio
    async def test_invalid_url(self, fast_config):
        async with UrlFetcher(fast_config) as fetcher:
            assert await fetcher.fetch_title("http://") is None

    @pytest.mark.asyncio
    async def test_session_closed_on_exit(self, fast_config):
        fetcher = UrlFetcher(fast_config)
        async with fetcher:
            session = fetcher._session
            assert session is not None
        assert session.closed

    @pytest.mark.asyncio
    async def test_requires_context_manager(self, fast_config):
        with pytest.raises(RuntimeError):
            await UrlFetcher(fast_config).fetch_title("http://127.0.0.1:1/")


class TestEventLoopResponsiveness:
    """Decoding and parsing a page must not block other tasks."""

    @pytest.mark.asyncio
    async def test_large_page_keeps_loop_free(self, page_server):
        config = PipelineConfig(fetch_timeout=5.0, request_timeout=5.0)
        loop = asyncio.get_running_loop()
        gaps: list[float] = []
        stop = asyncio.Event()

        async def ticker():
            last = loop.time()
            while not stop.is_set():
                await asyncio.sleep(0.01)
                now = loop.time()
                gaps.append(now - last)
                last = now

        ticking = asyncio.create_task(ticker())
        async with UrlFetcher(config) as fetcher:
            info = await fetcher.fetch_title(page_server("/large"))
        stop.set()
        await ticking

        assert info is not None
        assert info.title == "Large Page"
        assert max(gaps) < 0.25
