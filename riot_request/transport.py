"""Transport adapter - performs exactly one HTTP round-trip.

Each send() opens its own httpx.Client inside a ``with`` block, so the
connection is owned by a single call and closed exactly once on every exit
path. Redirects are never followed: a 3xx surfaces as its literal status.
"""

from __future__ import annotations

import time

import httpx

from riot_request.errors import TransportError, TransportTimeoutError
from riot_request.models import RawResponse, RequestMethod


def _build_timeout(timeout_ms: int) -> httpx.Timeout:
    """Connect, read, write and pool timeouts all come from the same value.

    0 means no explicit timeout.
    """
    if timeout_ms > 0:
        return httpx.Timeout(timeout_ms / 1000.0)
    return httpx.Timeout(None)


class HttpTransport:
    """Sends a single request and returns the raw response.

    Usage:
        transport = HttpTransport()
        response = transport.send("https://host/path?x=1", RequestMethod.GET, {}, None, 5000)

    Tests inject an httpx.MockTransport via ``transport``.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self._transport = transport

    def send(
        self,
        url: str,
        method: RequestMethod,
        headers: dict[str, str],
        body: str | None,
        timeout_ms: int,
    ) -> RawResponse:
        """Execute the round-trip.

        Args:
            url: Fully assembled URL including query string.
            method: HTTP method.
            headers: Request headers.
            body: Optional body, sent UTF-8 encoded.
            timeout_ms: Timeout in milliseconds (0 = none).

        Returns:
            RawResponse with status, lowercased headers and the full body.

        Raises:
            TransportTimeoutError: If connecting or reading timed out.
            TransportError: For any other network failure (DNS, refused, stream).
        """
        content = body.encode("utf-8") if body is not None else None

        try:
            start_time = time.perf_counter()
            with httpx.Client(
                timeout=_build_timeout(timeout_ms),
                follow_redirects=False,
                transport=self._transport,
            ) as client:
                http_response = client.request(
                    method=method.value,
                    url=url,
                    headers=headers if headers else None,
                    content=content,
                )
            elapsed_ms = (time.perf_counter() - start_time) * 1000
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"request timeout: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"request error: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(f"invalid URL: {e}") from e
        except UnicodeEncodeError as e:
            raise TransportError(
                f"encoding error: non-ASCII character {e.object[e.start:e.end]!r} "
                f"in header, query or path"
            ) from e

        return RawResponse(
            status_code=http_response.status_code,
            headers={key.lower(): value for key, value in http_response.headers.items()},
            content=http_response.content,
            elapsed_ms=elapsed_ms,
        )
