"""Extraction coordinator — runs every extractor on a message concurrently."""

from __future__ import annotations

import asyncio
from typing import Callable

import structlog

from msginfo.aggregator import Aggregator
from msginfo.channel import ResultChannel
from msginfo.config import PipelineConfig
from msginfo.extractors.base import BaseExtractor
from msginfo.extractors.emoticon import EmoticonExtractor
from msginfo.extractors.mention import MentionExtractor
from msginfo.extractors.url import UrlExtractor
from msginfo.fetcher import UrlFetcher
from msginfo.models import ResultSet

logger = structlog.get_logger(__name__)

__all__ = [
    "BaseExtractor",
    "EmoticonExtractor",
    "ExtractionCoordinator",
    "MentionExtractor",
    "UrlExtractor",
]


class ExtractionCoordinator:
    """Fans a message out to the mention, emoticon and URL extractors and
    fans their results back in through one :class:`Aggregator`.

    Join order matters: each extractor waits for its own per-match tasks
    (including URL fetches), the coordinator waits for all extractors, and
    only then is the channel closed. Closing earlier would let the
    aggregator finish while fetches are still sending.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        fetcher_factory: Callable[[PipelineConfig], UrlFetcher] = UrlFetcher,
    ) -> None:
        self.config = config or PipelineConfig()
        self.fetcher_factory = fetcher_factory

    async def run(self, message: str) -> ResultSet:
        """Extract all entities from *message* and return the ResultSet."""
        channel = ResultChannel()
        aggregator = Aggregator(channel)
        collecting = asyncio.create_task(aggregator.collect())

        try:
            async with self.fetcher_factory(self.config) as fetcher:
                extractors: list[BaseExtractor] = [
                    MentionExtractor(),
                    EmoticonExtractor(length=self.config.emoticon_length),
                    UrlExtractor(fetcher),
                ]
                await asyncio.gather(*(e.extract(message, channel) for e in extractors))
        finally:
            channel.close()

        return await collecting
