"""Deserializer - converts a response body into a caller-specified shape.

A shape is anything pydantic can validate: a BaseModel subclass, a builtin,
an Enum, or a parameterized container such as ``list[LeagueQueue]`` built at
runtime. Unknown fields in the payload are ignored by default models, so new
API fields do not break decoding.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar, overload

from pydantic import TypeAdapter, ValidationError

from riot_request.errors import RiotApiError

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def get_adapter(shape: Any) -> TypeAdapter[Any]:
    """Return a (cached when hashable) TypeAdapter for shape."""
    try:
        hash(shape)
    except TypeError:
        # Unhashable shape descriptor (e.g. Annotated with a dict); skip the cache.
        return TypeAdapter(shape)
    return _adapter_for(shape)


@overload
def decode(body: str, shape: type[T]) -> T: ...


@overload
def decode(body: str, shape: Any) -> Any: ...


def decode(body: str, shape: Any) -> Any:
    """Parse body as JSON and validate it against shape.

    Raises:
        RiotApiError: PARSE_FAILURE when the JSON is malformed, does not match
            shape, or decodes to nothing (``null`` or an empty body).
    """
    if not body.strip():
        raise RiotApiError(RiotApiError.PARSE_FAILURE)

    try:
        dto = get_adapter(shape).validate_json(body)
    except ValidationError as e:
        raise RiotApiError(RiotApiError.PARSE_FAILURE) from e

    if dto is None:
        raise RiotApiError(RiotApiError.PARSE_FAILURE)
    return dto
