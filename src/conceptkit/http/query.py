"""Immutable query string parameters.

Implements ``Mapping[str, Any]``. Values parsed from a query string are
strings; values supplied through a mapping are kept as given, so a
dispatcher that already decoded its query can pass it straight through.
"""

import json
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs

from conceptkit.errors import BadRequest


class QueryParams(Mapping[str, Any]):
    """Immutable query parameters.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[Any]]

    __slots__ = ("_data",)

    def __init__(self, source: str | bytes | Mapping[str, Any] = "") -> None:
        if isinstance(source, Mapping):
            data = {key: list(value) if isinstance(value, list) else [value] for key, value in source.items()}
        else:
            if isinstance(source, bytes):
                source = source.decode("latin-1")
            data = parse_qs(source, keep_blank_values=True)
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[Any]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_json(self, key: str, default: Any = None) -> Any:
        """Return the value for *key* decoded as JSON.

        Strings are parsed; anything else is returned unchanged. Raises
        ``BadRequest`` when a string value is not valid JSON.
        """
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, str | bytes):
            return value
        try:
            return json.loads(value)
        except ValueError as exc:
            msg = f"Query parameter {key!r} is not valid JSON: {exc}"
            raise BadRequest(msg) from exc
