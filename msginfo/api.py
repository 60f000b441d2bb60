"""FastAPI REST API for the message info service.

Provides endpoints for:
- Health check
- Extracting mentions, emoticons and URL titles from a message

Run with:  uvicorn msginfo.api:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from msginfo import __version__
from msginfo.config import PipelineConfig
from msginfo.logger import setup_logging
from msginfo.models import ClientError, Success, Timeout, result_set_to_json
from msginfo.supervisor import RequestSupervisor

# ── setup ─────────────────────────────────────────────────────────────

setup_logging(level="INFO")
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Message Info API",
    description="Extract @mentions, emoticons and linked page titles from chat messages.",
    version=__version__,
)

config = PipelineConfig.from_env()
supervisor = RequestSupervisor(config)


# ── models ────────────────────────────────────────────────────────────

class MessageRequest(BaseModel):
    """Request body for message extraction."""
    message: str = Field(default="", description="The chat message to inspect.")


# ── endpoints ─────────────────────────────────────────────────────────

@app.get("/", tags=["Health"])
async def root():
    """Health check."""
    return {
        "service": "Message Info",
        "status": "running",
        "version": __version__,
        "docs": "/docs",
    }


@app.post("/v1/getInfo", tags=["Extract"])
async def get_info(request: Optional[MessageRequest] = None) -> dict[str, Any]:
    """Extract entities from a message.

    Returns ``{"mentions": [...], "emoticons": [...], "urls": [{url, title}]}``
    with only the non-empty categories present. Always answers within the
    configured request timeout.
    """
    message = request.message if request is not None else ""
    outcome = await supervisor.handle(message)

    if isinstance(outcome, Success):
        return result_set_to_json(outcome.data)
    if isinstance(outcome, ClientError):
        raise HTTPException(status_code=400, detail=outcome.reason)
    if isinstance(outcome, Timeout):
        raise HTTPException(status_code=408, detail="Timed out")
    raise HTTPException(status_code=500, detail="Server Error")
