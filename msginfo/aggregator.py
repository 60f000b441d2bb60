"""Aggregator — fans extracted results in to a single ResultSet."""

from __future__ import annotations

import structlog

from msginfo.channel import ResultChannel
from msginfo.models import ResultSet

logger = structlog.get_logger(__name__)


class Aggregator:
    """Sole consumer of a :class:`ResultChannel`.

    Builds the category → results mapping in arrival order. The mapping is
    owned here until :meth:`collect` returns; categories are created on
    their first result, never up front.
    """

    def __init__(self, channel: ResultChannel) -> None:
        self.channel = channel
        self._results: ResultSet = {}

    async def collect(self) -> ResultSet:
        """Drain the channel until it is closed and return the ResultSet."""
        async for result in self.channel:
            self._results.setdefault(result.category.value, []).append(result)

        logger.debug(
            "aggregation_complete",
            counts={key: len(items) for key, items in self._results.items()},
        )
        return self._results
