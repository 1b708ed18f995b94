"""Immutable action request.

The structured view of one invocation that every stage of a handler
chain receives: the parsed payload, path parameters, and query
parameters. Raw transport framing never reaches this type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from conceptkit.errors import BadRequest
from conceptkit.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class ActionRequest:
    """An immutable request context.

    Build one directly, or through ``ActionRequest.build()`` which
    accepts plain dicts and a raw query string::

        request = ActionRequest.build(
            body={"partialDocument": {"title": "y"}},
            path_params={"_id": "65f1c0ffee0000000000beef"},
        )
    """

    body: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    path_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    query: QueryParams = field(default_factory=QueryParams)

    @classmethod
    def build(
        cls,
        *,
        body: Mapping[str, Any] | None = None,
        path_params: Mapping[str, str] | None = None,
        query: str | bytes | Mapping[str, Any] | QueryParams | None = None,
    ) -> ActionRequest:
        """Construct a request from plain values."""
        if not isinstance(query, QueryParams):
            query = QueryParams(query or "")
        return cls(
            body=MappingProxyType(dict(body or {})),
            path_params=MappingProxyType(dict(path_params or {})),
            query=query,
        )

    def require(self, name: str) -> Any:
        """Return payload field *name*, or raise ``BadRequest`` if absent."""
        try:
            return self.body[name]
        except KeyError:
            msg = f"Missing required field {name!r} in request body"
            raise BadRequest(msg) from None

    def path_param(self, name: str) -> str:
        """Return path parameter *name*, or raise ``BadRequest`` if absent."""
        try:
            return self.path_params[name]
        except KeyError:
            msg = f"Missing path parameter {name!r}"
            raise BadRequest(msg) from None
