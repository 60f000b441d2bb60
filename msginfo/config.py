"""Pydantic configuration model for the message pipeline."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


BOT_USER_AGENT = "MessageInfoBot/1.0 (+https://github.com/msginfo)"

# Environment variable → config field
ENV_VARS: dict[str, str] = {
    "MSGINFO_FETCH_TIMEOUT": "fetch_timeout",
    "MSGINFO_REQUEST_TIMEOUT": "request_timeout",
    "MSGINFO_EMOTICON_LENGTH": "emoticon_length",
    "MSGINFO_USER_AGENT": "user_agent",
}


class PipelineConfig(BaseModel):
    """Validated configuration for the extraction pipeline."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    fetch_timeout: float = Field(
        default=3.0, gt=0, alias="fetchTimeout",
        description="Per-URL network deadline in seconds.",
    )
    request_timeout: float = Field(
        default=5.0, gt=0, alias="requestTimeout",
        description="Overall pipeline deadline in seconds.",
    )
    emoticon_length: int = Field(
        default=15, ge=1, alias="emoticonLength",
        description="Exact inner length an emoticon must have to be kept.",
    )
    user_agent: str = Field(default=BOT_USER_AGENT, alias="userAgent")

    # ── validators ────────────────────────────────────────────────────

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user_agent must not be empty")
        return v

    @model_validator(mode="after")
    def check_timeouts(self) -> "PipelineConfig":
        """A single fetch must never outlive the request that started it."""
        if self.fetch_timeout > self.request_timeout:
            raise ValueError(
                f"fetch_timeout ({self.fetch_timeout}s) must not exceed "
                f"request_timeout ({self.request_timeout}s)"
            )
        return self

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Build a config from ``MSGINFO_*`` environment variables.

        Explicit keyword *overrides* win over the environment; ``None`` values
        are ignored so CLI options can be passed through unconditionally.
        """
        values: dict[str, object] = {}
        for var, name in ENV_VARS.items():
            raw = os.environ.get(var)
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
