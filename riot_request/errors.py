"""Error taxonomy for riot-request.

Two unrelated trees:

- RiotApiError and RateLimitError describe what the remote API (or the
  network in front of it) did. Callers branch on ``code``.
- RequestStateError describes a caller bug: executing twice, reading a
  result that does not exist, mutating a request that was already sent.

Transport errors are internal to the engine. Request.execute translates them
into RiotApiError(IOEXCEPTION) and chains the original.
"""

from __future__ import annotations

from riot_request.models import RateLimitSignal


class RiotApiError(Exception):
    """An API call did not produce a usable response.

    ``code`` is the literal HTTP status for API errors, or one of the
    sentinels IOEXCEPTION / PARSE_FAILURE.
    """

    IOEXCEPTION = 0
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    DATA_NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422
    RATE_LIMITED = 429
    SERVER_ERROR = 500
    UNAVAILABLE = 503
    PARSE_FAILURE = 600

    _MESSAGES = {
        IOEXCEPTION: "I/O Exception thrown",
        BAD_REQUEST: "Bad request",
        UNAUTHORIZED: "Unauthorized",
        FORBIDDEN: "Forbidden",
        DATA_NOT_FOUND: "Not found",
        UNPROCESSABLE_ENTITY: "Unprocessable entity",
        RATE_LIMITED: "Rate limit exceeded",
        SERVER_ERROR: "Internal server error",
        UNAVAILABLE: "Service unavailable",
        PARSE_FAILURE: "Failed to parse the response",
    }

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(self._MESSAGES.get(code, f"Error code {code}"))

    @property
    def is_io_error(self) -> bool:
        return self.code == self.IOEXCEPTION

    @property
    def is_parse_failure(self) -> bool:
        return self.code == self.PARSE_FAILURE


class RateLimitError(RiotApiError):
    """The server rejected the call with 429. Back off ``retry_after`` seconds."""

    def __init__(self, retry_after: int = 0, rate_limit_type: str | None = None) -> None:
        super().__init__(self.RATE_LIMITED)
        self.retry_after = retry_after
        self.rate_limit_type = rate_limit_type

    @property
    def signal(self) -> RateLimitSignal:
        return RateLimitSignal(retry_after=self.retry_after, rate_limit_type=self.rate_limit_type)

    def __str__(self) -> str:
        suffix = f" ({self.rate_limit_type})" if self.rate_limit_type else ""
        return f"Rate limit exceeded{suffix}, retry after {self.retry_after}s"


class RequestStateError(RuntimeError):
    """A Request was used in a way its lifecycle does not allow.

    This is a programming error, never a runtime condition worth retrying.
    """


class TransportError(Exception):
    """The HTTP round-trip failed before a status code was received."""


class TransportTimeoutError(TransportError):
    """The HTTP round-trip exceeded the configured timeout."""


class ConfigError(Exception):
    """Raised when configuration loading fails."""
