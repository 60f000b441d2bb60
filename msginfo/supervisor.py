"""Request Supervisor — validates a message and runs the pipeline under a deadline."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

import structlog

from msginfo.config import PipelineConfig
from msginfo.extractors import ExtractionCoordinator
from msginfo.logger import bind_request
from msginfo.models import ClientError, Outcome, ServerError, Success, Timeout

logger = structlog.get_logger(__name__)

EMPTY_MESSAGE = "Empty Body in the Request"


class RequestSupervisor:
    """Entry point that turns one message into one :data:`Outcome`.

    1. Reject empty messages → ``ClientError`` (pipeline never starts).
    2. Start the coordinator as its own task.
    3. Race it against ``config.request_timeout``.
    4. Pipeline first → ``Success``; deadline first → ``Timeout``;
       pipeline raised → ``ServerError``.

    A timed-out pipeline is not cancelled. It keeps running in the
    background (its fetches are still capped by ``fetch_timeout``) and its
    result is dropped when it finishes.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        coordinator: Optional[ExtractionCoordinator] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.coordinator = coordinator or ExtractionCoordinator(self.config)
        self._abandoned: set[asyncio.Task] = set()

    @property
    def abandoned_count(self) -> int:
        """Timed-out pipelines that are still running."""
        return len(self._abandoned)

    def process(self, message: Optional[str]) -> Outcome:
        """Synchronous entry — runs :meth:`handle` in a fresh event loop.

        Pipelines abandoned on timeout are cancelled when the loop closes.
        """
        return asyncio.run(self.handle(message))

    async def handle(self, message: Optional[str]) -> Outcome:
        """Async entry — validate, run, and time-bound one message."""
        bind_request(message)

        if not message:
            logger.info("message_rejected", reason=EMPTY_MESSAGE)
            return ClientError(reason=EMPTY_MESSAGE)

        start = time.monotonic()
        try:
            pipeline = asyncio.create_task(self.coordinator.run(message))
        except Exception as exc:
            logger.error("pipeline_start_failed", error=str(exc))
            return ServerError()

        logger.info("pipeline_started")

        try:
            done, _ = await asyncio.wait({pipeline}, timeout=self.config.request_timeout)
        except asyncio.CancelledError:
            # caller went away; the pipeline still needs an owner
            self._abandon(pipeline)
            raise

        elapsed = time.monotonic() - start
        if not done:
            self._abandon(pipeline)
            logger.warning(
                "pipeline_timed_out",
                timeout=self.config.request_timeout,
                time=f"{elapsed:.2f}s",
            )
            return Timeout()

        exc = pipeline.exception()
        if exc is not None:
            logger.error("pipeline_failed", error=repr(exc), time=f"{elapsed:.2f}s")
            return ServerError()

        data = pipeline.result()
        logger.info(
            "pipeline_completed",
            counts={key: len(items) for key, items in data.items()},
            time=f"{elapsed:.2f}s",
        )
        return Success(data=data)

    # ── helpers ───────────────────────────────────────────────────────

    def _abandon(self, task: asyncio.Task) -> None:
        """Keep a reference to *task* until it finishes, then drop its result."""
        self._abandoned.add(task)
        task.add_done_callback(self._reap)

    def _reap(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("abandoned_pipeline_failed", error=repr(exc))
        else:
            logger.debug("abandoned_pipeline_finished")
