"""Action response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """A structured result produced by exactly one stage of a handler chain.

    ``data`` is any JSON-serializable value. Transports encode it with
    ``json()``.
    """

    data: Any = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    content_type = "application/json"

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def json(self) -> str:
        """Encode ``data`` as JSON text."""
        return json_module.dumps(self.data, separators=(",", ":"), default=str)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
