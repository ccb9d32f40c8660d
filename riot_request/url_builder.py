"""URL assembly for API requests."""

from __future__ import annotations

from typing import Any, Mapping


def join_url_pieces(*pieces: Any) -> str:
    """Concatenate the string form of each piece, e.g. host + path + id."""
    return "".join(str(piece) for piece in pieces)


def build_url(base: str, parameters: Mapping[str, Any]) -> str:
    """Append query parameters to base.

    The first separator is '?' unless base already carries a query string,
    in which case every parameter is joined with '&'. Values are inserted
    verbatim via str(); parameter order is not guaranteed.
    """
    url = base
    connector = "&" if "?" in base else "?"
    for key, value in parameters.items():
        url += f"{connector}{key}={value}"
        connector = "&"
    return url
