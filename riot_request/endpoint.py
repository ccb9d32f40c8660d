"""Endpoint descriptors built on Request.

An ApiMethod knows its URL, parameters and the shape its response decodes
into. Only the base class and one representative endpoint live here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from riot_request.models import ApiConfig
from riot_request.request import EventHook, Request, log_event
from riot_request.transport import HttpTransport


class Platform(Enum):
    """Riot platform routing values and their API hosts."""

    BR = ("br1", "https://br1.api.riotgames.com")
    EUNE = ("eun1", "https://eun1.api.riotgames.com")
    EUW = ("euw1", "https://euw1.api.riotgames.com")
    JP = ("jp1", "https://jp1.api.riotgames.com")
    KR = ("kr", "https://kr.api.riotgames.com")
    LAN = ("la1", "https://la1.api.riotgames.com")
    LAS = ("la2", "https://la2.api.riotgames.com")
    NA = ("na1", "https://na1.api.riotgames.com")
    OCE = ("oc1", "https://oc1.api.riotgames.com")
    TR = ("tr1", "https://tr1.api.riotgames.com")
    RU = ("ru", "https://ru.api.riotgames.com")
    PBE = ("pbe1", "https://pbe1.api.riotgames.com")

    def __init__(self, platform_id: str, host: str) -> None:
        self.platform_id = platform_id
        self.host = host

    @classmethod
    def from_id(cls, platform_id: str) -> Platform:
        """Look up a platform by routing value, e.g. 'euw1'."""
        lowered = platform_id.lower()
        for platform in cls:
            if platform.platform_id == lowered:
                return platform
        raise ValueError(f"Unknown platform '{platform_id}'")


class ApiMethod(Request):
    """A Request that also knows which shape its response decodes into."""

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        on_event: EventHook | None = log_event,
    ) -> None:
        super().__init__(config, transport=transport, on_event=on_event)
        self.return_type: Any = None
        self.platform: Platform | None = None

    def set_platform(self, platform: Platform) -> None:
        self._require_not_sent()
        self.platform = platform

    def set_return_type(self, return_type: Any) -> None:
        self.return_type = return_type

    def add_api_key_parameter(self) -> None:
        self.add_api_key_to_url()

    def get_dto(self, shape: Any = None) -> Any:
        """Decode into shape, or into this endpoint's return_type by default."""
        if shape is None:
            if self.return_type is None:
                raise TypeError(f"{type(self).__name__} has no return type")
            shape = self.return_type
        return super().get_dto(shape)


# =============================================================================
# League
# =============================================================================


class LeagueQueue(str, Enum):
    RANKED_SOLO_5x5 = "RANKED_SOLO_5x5"
    RANKED_FLEX_SR = "RANKED_FLEX_SR"
    RANKED_FLEX_TT = "RANKED_FLEX_TT"
    RANKED_TFT = "RANKED_TFT"
    RANKED_TFT_TURBO = "RANKED_TFT_TURBO"
    RANKED_TFT_DOUBLE_UP = "RANKED_TFT_DOUBLE_UP"


class GetPositionalRankQueues(ApiMethod):
    """GET /lol/league/v4/positional-rank-queues -> list[LeagueQueue]."""

    def __init__(
        self,
        config: ApiConfig,
        platform: Platform,
        *,
        transport: HttpTransport | None = None,
        on_event: EventHook | None = log_event,
    ) -> None:
        super().__init__(config, transport=transport, on_event=on_event)
        self.set_platform(platform)
        self.set_return_type(list[LeagueQueue])
        self.set_url_base(platform.host, "/lol/league/v4/positional-rank-queues")
        self.add_api_key_parameter()
