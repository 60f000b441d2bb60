"""URL Fetcher — bounded-time async GET that resolves a URL to its page title."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

import aiohttp
import structlog

from msginfo.config import PipelineConfig
from msginfo.models import UrlInfo
from msginfo.parser import HtmlParser

logger = structlog.get_logger(__name__)


class UrlFetcher:
    """Async title fetcher sharing one aiohttp session across URLs.

    Every GET is capped by ``config.fetch_timeout`` (connect + read). Failures
    never propagate: :meth:`fetch_title` returns ``None`` and the URL is
    simply left out of the response.

    Usage::

        async with UrlFetcher(config) as fetcher:
            info = await fetcher.fetch_title(url)
    """

    def __init__(self, config: PipelineConfig) -> None:
        self.config = config
        self.parser = HtmlParser()
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "UrlFetcher":
        timeout = aiohttp.ClientTimeout(total=self.config.fetch_timeout)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
        )
        return self

    async def __aexit__(self, *exc) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    # ── public API ────────────────────────────────────────────────────

    async def fetch_title(self, url: str) -> Optional[UrlInfo]:
        """GET *url* and return its :class:`UrlInfo`, or ``None`` on any failure."""
        try:
            body, charset = await self._get(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.debug("url_fetch_failed", url=url, error=repr(exc))
            return None

        try:
            # chardet, tree building and the title walk are CPU-bound
            title, encoding = await asyncio.to_thread(self._parse_title, body, charset)
        except ValueError as exc:
            logger.debug("url_parse_failed", url=url, error=str(exc))
            return None

        logger.debug("url_title_found", url=url, title=title, encoding=encoding)
        return UrlInfo(url=url, title=title or "")

    # ── internals ─────────────────────────────────────────────────────

    def _parse_title(self, body: bytes, charset: Optional[str]) -> tuple[Optional[str], str]:
        """Runs in a worker thread so a large page does not stall the event loop."""
        page = self.parser.parse(body, declared_encoding=charset)
        return page.title, page.encoding

    async def _get(self, url: str) -> tuple[bytes, Optional[str]]:
        """Single GET; any HTTP status with a body counts as fetched."""
        if self._session is None:
            raise RuntimeError("UrlFetcher used outside of 'async with'")
        start = time.monotonic()
        async with self._session.get(url, allow_redirects=True) as resp:
            body = await resp.read()
            elapsed = time.monotonic() - start
            logger.debug(
                "url_fetch_ok", url=url, status=resp.status,
                bytes=len(body), time=f"{elapsed:.2f}s",
            )
            return body, resp.charset
