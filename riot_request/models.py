"""Internal data models for riot-request.

All models use Pydantic v2. Records forbid unknown fields so typos in config
files or test fixtures fail loudly.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Lifecycle
# =============================================================================


class RequestState(str, Enum):
    """Lifecycle state of a single Request.

    NOT_SENT -> WAITING -> {SUCCEEDED | FAILED | TIMED_OUT}, and
    NOT_SENT/WAITING -> CANCELLED at any time before a terminal state.
    """

    NOT_SENT = "not_sent"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (RequestState.NOT_SENT, RequestState.WAITING)


class RequestMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


# =============================================================================
# Configuration
# =============================================================================


class ApiConfig(BaseModel):
    """Credentials and defaults shared by requests.

    Frozen: requests read it at execution time, possibly from several threads.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str | None = Field(default=None, description="API key sent as the api_key query parameter")
    tournament_key: str | None = Field(
        default=None, description="Elevated token sent in the X-Riot-Token header"
    )
    timeout: int = Field(
        default=0,
        ge=0,
        description="Connect and read timeout in milliseconds (0 = no explicit timeout)",
    )


# =============================================================================
# Transport / Classification Models
# =============================================================================


class RawResponse(BaseModel):
    """One HTTP response as returned by the transport adapter.

    Header keys are lowercase. Repeated headers are comma-joined.
    """

    model_config = ConfigDict(extra="forbid")

    status_code: int = Field(description="HTTP status code")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Response headers (lowercase keys)"
    )
    content: bytes = Field(default=b"", description="Raw response body")
    elapsed_ms: float = Field(default=0.0, description="Round-trip time in milliseconds")


class RateLimitSignal(BaseModel):
    """Backoff hint extracted from a 429 response."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    retry_after: int = Field(default=0, description="Seconds to wait (0 if the header was absent)")
    rate_limit_type: str | None = Field(
        default=None, description="Quota bucket that was exceeded, e.g. 'service' or 'application'"
    )


class RawResult(BaseModel):
    """Outcome of a succeeded request: status code and decoded body text."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_code: int
    body: str


class RequestEvent(BaseModel):
    """Structured event emitted by a Request to its observability hook."""

    model_config = ConfigDict(extra="forbid")

    event: str = Field(description="Event name, e.g. 'sent', 'succeeded', 'timed_out'")
    state: RequestState = Field(description="Request state after the event")
    method: RequestMethod
    url: str
    status_code: int | None = Field(default=None, description="HTTP status, when one was received")
    error_code: int | None = Field(default=None, description="RiotApiError code, on failure")
    detail: str | None = Field(default=None, description="Free-form diagnostic text")
    elapsed_ms: float | None = Field(
        default=None, description="Round-trip time in milliseconds, when a response was received"
    )
