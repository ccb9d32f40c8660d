"""Request - one API call, executed at most once.

A Request is configured (URL pieces, parameters, method, token, body), then
execute() performs a single round-trip and leaves the instance in exactly one
terminal state. Results are read afterwards through the accessors or decoded
on demand with get_dto().

Lifecycle:
    NOT_SENT -> WAITING -> SUCCEEDED | FAILED | TIMED_OUT
    NOT_SENT | WAITING -> CANCELLED   (advisory, via cancel())

Failures are both captured on the instance and raised from execute(), so
inline callers can react immediately while deferred callers inspect state.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Mapping, TypeVar, overload

from riot_request.classifier import CODE_SUCCESS_NO_CONTENT, classify_response, decode_body
from riot_request.deserializer import decode
from riot_request.errors import (
    ConfigError,
    RiotApiError,
    RequestStateError,
    TransportError,
    TransportTimeoutError,
)
from riot_request.models import (
    ApiConfig,
    RawResult,
    RequestEvent,
    RequestMethod,
    RequestState,
)
from riot_request.transport import HttpTransport
from riot_request.url_builder import build_url, join_url_pieces

T = TypeVar("T")

RIOT_TOKEN_HEADER = "X-Riot-Token"
API_KEY_PARAMETER = "api_key"
REDACTED = "[REDACTED]"

EventHook = Callable[[RequestEvent], None]

logger = logging.getLogger("riot_request")

# Levels for the default hook. Anything not listed logs at DEBUG.
_EVENT_LEVELS = {
    "succeeded": logging.INFO,
    "failed": logging.WARNING,
    "rate_limited": logging.WARNING,
    "io_failed": logging.ERROR,
}


def log_event(event: RequestEvent) -> None:
    """Default observability hook: write the event to the riot_request logger."""
    level = _EVENT_LEVELS.get(event.event, logging.DEBUG)
    if not logger.isEnabledFor(level):
        return
    message = f"{event.method.value} {event.url} -> {event.event}"
    if event.status_code is not None:
        message += f" status={event.status_code}"
    if event.error_code is not None:
        message += f" error_code={event.error_code}"
    if event.elapsed_ms is not None:
        message += f" elapsed={event.elapsed_ms:.0f}ms"
    if event.detail:
        message += f" ({event.detail})"
    logger.log(level, message)


class Request:
    """A single, non-reusable API call.

    Usage:
        request = Request(config)
        request.set_url_base(platform_host, "/lol/status/v4/platform-data")
        request.add_api_key_to_url()
        request.execute()
        data = request.get_dto(PlatformData)

    A fresh instance is needed for every logical call.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        on_event: EventHook | None = log_event,
    ) -> None:
        """Initialize the request.

        Args:
            config: Credentials and default timeout. Read-only here.
            transport: Transport adapter; a default HttpTransport if None.
            on_event: Observability hook called on every transition. None
                      disables event emission.
        """
        self.config = config or ApiConfig()
        self._transport = transport or HttpTransport()
        self._on_event = on_event

        self._state = RequestState.NOT_SENT
        self._method = RequestMethod.GET
        self._timeout = self.config.timeout
        self._url_base = ""
        self._url_parameters: dict[str, str] = {}
        self._riot_token: str | None = None
        self._body: str | None = None

        self._response_code = -1
        self._elapsed_ms: float | None = None
        self._response_body: str | None = None
        self._exception: RiotApiError | None = None

        # execute() holds _execute_lock for the whole round-trip; state
        # changes take only _state_lock so cancel() never waits on the network.
        self._execute_lock = threading.Lock()
        self._state_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Configuration surface
    # -------------------------------------------------------------------------

    def _require_not_sent(self) -> None:
        if self._state is not RequestState.NOT_SENT:
            raise RequestStateError(
                f"The request can no longer be modified (state: {self._state.value})"
            )

    def set_url_base(self, *pieces: Any) -> None:
        self._require_not_sent()
        self._url_base = join_url_pieces(*pieces)

    def add_url_parameter(self, key: str, value: Any) -> None:
        self._require_not_sent()
        self._url_parameters[key] = str(value)

    def add_api_key_to_url(self) -> None:
        """Send the configured API key as the api_key query parameter."""
        if self.config.key is None:
            raise ConfigError("No API key configured")
        self.add_url_parameter(API_KEY_PARAMETER, self.config.key)

    def add_tournament_key_to_riot_token(self) -> None:
        """Sign the request with the elevated tournament key."""
        self.set_riot_token(self.config.tournament_key)

    def set_riot_token(self, token: str | None) -> None:
        self._require_not_sent()
        self._riot_token = token

    def set_method(self, method: RequestMethod | str) -> None:
        self._require_not_sent()
        self._method = RequestMethod(method.upper()) if isinstance(method, str) else method

    def set_body(self, body: str | None) -> None:
        self._require_not_sent()
        self._body = body

    def build_json_body(self, data: Mapping[str, Any]) -> None:
        """Serialize a string-keyed mapping as the JSON request body."""
        self.set_body(json.dumps(dict(data)))

    def set_timeout(self, timeout_ms: int) -> None:
        self._require_not_sent()
        if timeout_ms < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout_ms}")
        self._timeout = timeout_ms

    @property
    def method(self) -> RequestMethod:
        return self._method

    @property
    def timeout(self) -> int:
        return self._timeout

    @property
    def body(self) -> str | None:
        return self._body

    @property
    def url(self) -> str:
        return build_url(self._url_base, self._url_parameters)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RequestState:
        return self._state

    def _set_state(self, state: RequestState) -> bool:
        """Move to state unless already terminal. Returns True if it moved."""
        with self._state_lock:
            if self._state.is_terminal:
                return False
            self._state = state
            return True

    def _emit(self, event: str, **fields: Any) -> None:
        if self._on_event is None:
            return
        self._on_event(RequestEvent(
            event=event,
            state=self._state,
            method=self._method,
            url=self._redacted_url(),
            **fields,
        ))

    def _redacted_url(self) -> str:
        """URL with the API key masked, for events and logs."""
        parameters = dict(self._url_parameters)
        if API_KEY_PARAMETER in parameters:
            parameters[API_KEY_PARAMETER] = REDACTED
        return build_url(self._url_base, parameters)

    def cancel(self) -> None:
        """Mark the request cancelled unless it already finished.

        Advisory only: an in-flight round-trip is not aborted, but its outcome
        will not replace the CANCELLED state.
        """
        if self._set_state(RequestState.CANCELLED):
            self._emit("cancelled")

    def execute(self) -> None:
        """Perform the round-trip and settle on a terminal state.

        Raises:
            RequestStateError: If the request was already executed or cancelled.
            RateLimitError: On 429 (state FAILED).
            RiotApiError: On any other non-2xx status (FAILED), or with code
                IOEXCEPTION on a timeout (TIMED_OUT) or network failure (FAILED).
        """
        with self._execute_lock:
            with self._state_lock:
                if self._state is RequestState.CANCELLED:
                    raise RequestStateError(self._NOT_SUCCEEDED_MESSAGES[self._state])
                if self._state is not RequestState.NOT_SENT:
                    raise RequestStateError("The request has already been sent")
                self._state = RequestState.WAITING

            url = self.url
            headers: dict[str, str] = {}
            if self._riot_token is not None:
                headers[RIOT_TOKEN_HEADER] = self._riot_token
            if self._body is not None:
                headers["Content-Type"] = "application/json"

            try:
                self._emit("sent")
                response = self._transport.send(url, self._method, headers, self._body, self._timeout)
                self._response_code = response.status_code
                self._elapsed_ms = response.elapsed_ms
                has_body = classify_response(response.status_code, response.headers)
                self._response_body = decode_body(response.content) if has_body else ""
            except RiotApiError as e:
                self._exception = e
                self._set_state(RequestState.FAILED)
                event = "rate_limited" if e.code == RiotApiError.RATE_LIMITED else "failed"
                self._emit(
                    event,
                    status_code=self._response_code,
                    error_code=e.code,
                    detail=str(e),
                    elapsed_ms=self._elapsed_ms,
                )
                raise
            except TransportTimeoutError as e:
                error = RiotApiError(RiotApiError.IOEXCEPTION)
                self._exception = error
                self._set_state(RequestState.TIMED_OUT)
                self._emit("timed_out", error_code=error.code, detail=str(e))
                raise error from e
            except TransportError as e:
                error = RiotApiError(RiotApiError.IOEXCEPTION)
                self._exception = error
                self._set_state(RequestState.FAILED)
                self._emit("io_failed", error_code=error.code, detail=str(e))
                raise error from e
            except BaseException:
                # Every exit path leaves a terminal state, including interrupts
                # and a raising event hook.
                self._set_state(RequestState.FAILED)
                raise

            if self._set_state(RequestState.SUCCEEDED):
                self._emit("succeeded", status_code=self._response_code, elapsed_ms=self._elapsed_ms)

    # -------------------------------------------------------------------------
    # State predicates
    # -------------------------------------------------------------------------

    @property
    def is_done(self) -> bool:
        return self._state.is_terminal

    @property
    def is_pending(self) -> bool:
        return self._state is RequestState.WAITING

    @property
    def is_successful(self) -> bool:
        return self._state is RequestState.SUCCEEDED

    @property
    def is_failed(self) -> bool:
        return self._state is RequestState.FAILED

    @property
    def is_timed_out(self) -> bool:
        return self._state is RequestState.TIMED_OUT

    @property
    def is_cancelled(self) -> bool:
        return self._state is RequestState.CANCELLED

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    _NOT_SUCCEEDED_MESSAGES = {
        RequestState.NOT_SENT: "The request has not yet been sent",
        RequestState.WAITING: "The request has not received a response yet",
        RequestState.FAILED: "The request has failed",
        RequestState.TIMED_OUT: "The request has timed out",
        RequestState.CANCELLED: "The request has been cancelled",
    }

    def _require_succeeded(self) -> None:
        state = self._state
        if state is not RequestState.SUCCEEDED:
            raise RequestStateError(self._NOT_SUCCEEDED_MESSAGES[state])

    @property
    def exception(self) -> RiotApiError | None:
        """The captured error for FAILED or TIMED_OUT requests, else None."""
        if self._state in (RequestState.FAILED, RequestState.TIMED_OUT):
            return self._exception
        return None

    @property
    def response_code(self) -> int:
        self._require_succeeded()
        return self._response_code

    @property
    def response_body(self) -> str:
        self._require_succeeded()
        return self._response_body or ""

    def poll(self) -> RawResult | None:
        """Non-raising view of progress for deferred callers.

        Returns:
            None while the request is NOT_SENT or WAITING, otherwise the
            status code and body of a SUCCEEDED request.

        Raises:
            RiotApiError: The captured error of a FAILED or TIMED_OUT request.
            RequestStateError: If the request was cancelled, or failed without
                a captured API error.
        """
        state = self._state
        if not state.is_terminal:
            return None
        if state is RequestState.SUCCEEDED:
            return RawResult(status_code=self._response_code, body=self._response_body or "")
        if state is RequestState.CANCELLED or self._exception is None:
            raise RequestStateError(self._NOT_SUCCEEDED_MESSAGES[state])
        raise self._exception

    @overload
    def get_dto(self, shape: type[T]) -> T | None: ...

    @overload
    def get_dto(self, shape: Any) -> Any: ...

    def get_dto(self, shape: Any) -> Any:
        """Decode the response body into shape.

        shape may be a model class or a runtime descriptor such as
        ``list[LeagueQueue]``. The same response can be decoded repeatedly.

        Returns:
            The decoded value, or None when the server answered 204.

        Raises:
            RequestStateError: If the request has not succeeded.
            RiotApiError: PARSE_FAILURE if the body does not decode. The
                request state is left unchanged.
        """
        self._require_succeeded()
        if self._response_code == CODE_SUCCESS_NO_CONTENT:
            return None
        return decode(self._response_body or "", shape)
