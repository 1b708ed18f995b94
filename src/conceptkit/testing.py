"""Test utilities for conceptkit registries.

``ActionClient`` drives a registry through the reference dispatcher, so
tests exercise exactly the chain a real request would::

    client = ActionClient(posts)
    response = await client.call("create", body={"document": {"title": "x"}})
    assert response.data["document"]["title"] == "x"
"""

from collections.abc import Mapping
from typing import Any

from conceptkit.dispatch import dispatch
from conceptkit.http.query import QueryParams
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response
from conceptkit.registry import ActionRegistry


class ActionClient:
    """Calls actions on one registry by name."""

    __slots__ = ("registry",)

    def __init__(self, registry: ActionRegistry) -> None:
        self.registry = registry

    async def call(
        self,
        name: str,
        *,
        body: Mapping[str, Any] | None = None,
        path_params: Mapping[str, str] | None = None,
        query: str | Mapping[str, Any] | QueryParams | None = None,
    ) -> Response:
        """Build a request and dispatch it to action *name*."""
        request = ActionRequest.build(body=body, path_params=path_params, query=query)
        return await dispatch(self.registry, name, request)

    # -- Built-in action shortcuts --

    async def create(self, document: Mapping[str, Any]) -> Response:
        return await self.call("create", body={"document": document})

    async def read(self, filter: Mapping[str, Any] | None = None) -> Response:
        return await self.call("read", query={"filter": filter} if filter is not None else None)

    async def update(self, _id: str, partial: Mapping[str, Any]) -> Response:
        return await self.call("update", body={"partialDocument": partial}, path_params={"_id": _id})

    async def delete(self, _id: str) -> Response:
        return await self.call("delete", path_params={"_id": _id})
