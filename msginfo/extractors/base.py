"""Base class shared by the regex-driven extractors."""

from __future__ import annotations

import asyncio
import re
from typing import Optional

import structlog

from msginfo.channel import ResultChannel
from msginfo.models import ExtractedResult

logger = structlog.get_logger(__name__)


class BaseExtractor:
    """Find every match of :attr:`pattern` and handle each one concurrently.

    Subclasses implement :meth:`process`, which turns one match into a result
    or ``None`` when the match should be dropped. :meth:`extract` only
    returns after every per-match task has finished, so by then all of this
    extractor's results are already on the channel.
    """

    name: str = "base"
    pattern: re.Pattern[str]

    async def extract(self, text: str, channel: ResultChannel) -> int:
        """Process all matches in *text*, sending results to *channel*.

        Returns the number of results sent.
        """
        # off the loop so a long message cannot hold up the request deadline
        matches = await asyncio.to_thread(self._find_all, text)
        sent = await asyncio.gather(*(self._handle(m, channel) for m in matches))
        count = sum(sent)
        logger.debug("extractor_done", extractor=self.name, matches=len(matches), sent=count)
        return count

    def _find_all(self, text: str) -> list[re.Match[str]]:
        return list(self.pattern.finditer(text))

    async def _handle(self, match: re.Match[str], channel: ResultChannel) -> bool:
        result = await self.process(match)
        if result is None:
            return False
        await channel.send(result)
        return True

    async def process(self, match: re.Match[str]) -> Optional[ExtractedResult]:
        raise NotImplementedError
