"""Response classifier - maps a status code and headers to an outcome.

Success is any status in [200, 300). 204 means the server accepted the call
and explicitly sent nothing. 429 carries backoff metadata and is raised as a
RateLimitError. Anything else outside [200, 300), including 3xx since
redirects are never followed, becomes a RiotApiError with the literal code.
"""

from __future__ import annotations

from typing import Mapping

from riot_request.errors import RateLimitError, RiotApiError
from riot_request.models import RateLimitSignal

CODE_SUCCESS_OK = 200
CODE_SUCCESS_NO_CONTENT = 204
CODE_ERROR_BAD_REQUEST = 400
CODE_ERROR_UNAUTHORIZED = 401
CODE_ERROR_FORBIDDEN = 403
CODE_ERROR_NOT_FOUND = 404
CODE_ERROR_UNPROCESSABLE_ENTITY = 422
CODE_ERROR_RATE_LIMITED = 429
CODE_ERROR_SERVER_ERROR = 500
CODE_ERROR_SERVICE_UNAVAILABLE = 503

RETRY_AFTER_HEADER = "retry-after"
RATE_LIMIT_TYPE_HEADER = "x-rate-limit-type"


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def parse_rate_limit(headers: Mapping[str, str]) -> RateLimitSignal:
    """Extract Retry-After and X-Rate-Limit-Type from lowercase-keyed headers.

    A missing or non-integer Retry-After yields 0.
    """
    retry_after = 0
    raw_retry_after = headers.get(RETRY_AFTER_HEADER)
    if raw_retry_after is not None:
        try:
            retry_after = max(int(raw_retry_after.strip()), 0)
        except ValueError:
            retry_after = 0
    return RateLimitSignal(
        retry_after=retry_after,
        rate_limit_type=headers.get(RATE_LIMIT_TYPE_HEADER) or None,
    )


def classify_response(status_code: int, headers: Mapping[str, str]) -> bool:
    """Classify a completed round-trip.

    Args:
        status_code: HTTP status code.
        headers: Response headers with lowercase keys.

    Returns:
        True if the body should be read, False for 204 No Content.

    Raises:
        RateLimitError: On 429, with retry-after and limit type.
        RiotApiError: On any other status outside [200, 300).
    """
    if status_code == CODE_ERROR_RATE_LIMITED:
        signal = parse_rate_limit(headers)
        raise RateLimitError(signal.retry_after, signal.rate_limit_type)
    if not is_success(status_code):
        raise RiotApiError(status_code)
    return status_code != CODE_SUCCESS_NO_CONTENT


def decode_body(content: bytes) -> str:
    """Decode a response body as UTF-8, replacing invalid sequences."""
    return content.decode("utf-8", errors="replace")
