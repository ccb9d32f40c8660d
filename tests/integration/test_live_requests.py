"""End-to-end tests against the mock API server over real sockets.

These exercise what the in-process MockTransport cannot: real read timeouts,
refused connections, redirects on the wire and UTF-8 bodies from a server.
"""

from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from riot_request.endpoint import LeagueQueue
from riot_request.errors import RateLimitError, RequestStateError, RiotApiError
from riot_request.models import ApiConfig, RequestMethod, RequestState
from riot_request.request import Request
from tests.conftest import MockServer, find_free_port


class PlatformData(BaseModel):
    id: str
    name: str


def _request(base_url: str, path: str, config: ApiConfig | None = None) -> Request:
    request = Request(config or ApiConfig(key="RGAPI-live", tournament_key="tk", timeout=3000))
    request.set_url_base(base_url, path)
    return request


class TestLiveSuccess:
    def test_platform_data(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/lol/status/v4/platform-data")
        request.add_api_key_to_url()
        request.execute()

        assert request.state is RequestState.SUCCEEDED
        assert request.response_code == 200
        assert request.get_dto(PlatformData).name == "EU West"

    def test_generic_container(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/lol/league/v4/positional-rank-queues")
        request.execute()
        assert request.get_dto(list[LeagueQueue])[0] is LeagueQueue.RANKED_SOLO_5x5

    def test_echo_wiring(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/echo?start=0")
        request.set_method(RequestMethod.POST)
        request.add_api_key_to_url()
        request.add_tournament_key_to_riot_token()
        request.build_json_body({"teamSize": 5})
        request.execute()

        echoed = json.loads(request.response_body)
        assert echoed["method"] == "POST"
        assert echoed["query"] == {"start": "0", "api_key": "RGAPI-live"}
        assert echoed["riot_token"] == "tk"
        assert echoed["content_type"] == "application/json"
        assert json.loads(echoed["body"]) == {"teamSize": 5}

    def test_no_content(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/no-content")
        request.set_method(RequestMethod.DELETE)
        request.execute()

        assert request.state is RequestState.SUCCEEDED
        assert request.response_code == 204
        assert request.get_dto(PlatformData) is None


class TestLiveFailures:
    def test_not_found(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/status/404")
        with pytest.raises(RiotApiError) as exc_info:
            request.execute()
        assert exc_info.value.code == 404
        assert request.state is RequestState.FAILED
        with pytest.raises(RequestStateError):
            request.response_code

    def test_rate_limited(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/rate-limited")
        request.add_url_parameter("retry_after", 5)
        request.add_url_parameter("limit_type", "service")
        with pytest.raises(RateLimitError) as exc_info:
            request.execute()
        assert exc_info.value.retry_after == 5
        assert exc_info.value.rate_limit_type == "service"

    def test_rate_limited_without_headers(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/rate-limited")
        with pytest.raises(RateLimitError) as exc_info:
            request.execute()
        assert exc_info.value.retry_after == 0
        assert exc_info.value.rate_limit_type is None

    def test_redirect_surfaces_status(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/redirect")
        with pytest.raises(RiotApiError) as exc_info:
            request.execute()
        assert exc_info.value.code == 302

    def test_malformed_body(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/malformed")
        request.execute()
        with pytest.raises(RiotApiError) as exc_info:
            request.get_dto(PlatformData)
        assert exc_info.value.code == RiotApiError.PARSE_FAILURE
        assert request.state is RequestState.SUCCEEDED

    def test_read_timeout(self, mock_server: MockServer) -> None:
        request = _request(mock_server.base_url, "/slow", ApiConfig(timeout=200))
        request.add_url_parameter("seconds", 2)
        with pytest.raises(RiotApiError) as exc_info:
            request.execute()
        assert exc_info.value.code == RiotApiError.IOEXCEPTION
        assert request.state is RequestState.TIMED_OUT

    def test_connection_refused(self) -> None:
        request = _request(f"http://127.0.0.1:{find_free_port()}", "/anything")
        with pytest.raises(RiotApiError) as exc_info:
            request.execute()
        assert exc_info.value.code == RiotApiError.IOEXCEPTION
        assert request.state is RequestState.FAILED

    def test_unresolvable_host(self) -> None:
        request = _request("http://riot-request.invalid", "/x", ApiConfig(timeout=3000))
        with pytest.raises(RiotApiError) as exc_info:
            request.execute()
        assert exc_info.value.code == RiotApiError.IOEXCEPTION
        assert request.state in (RequestState.FAILED, RequestState.TIMED_OUT)
