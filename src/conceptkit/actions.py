"""Action and validator protocols, and per-action options.

An action body is any callable matching::

    async def body(request: ActionRequest) -> Response: ...

A validator is any callable matching::

    async def validator(request: ActionRequest, next: Next) -> Response: ...

No base class required. The dispatcher checks the shape, not the lineage.
Plain ``def`` callables work too; results are awaited only when awaitable.

A validator passes the request on with ``return await next(request)`` and
rejects it by returning its own ``Response`` (or raising ``HTTPError``)
without calling ``next``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response

# The remainder of a handler chain, as seen from a validator
type Next = Callable[[ActionRequest], Awaitable[Response]]

# One stage of a composed chain: a validator or the action body
type Handler = Callable[..., Any]


class Action(Protocol):
    """Protocol for action bodies.

    Accepts both functions and callable objects::

        async def publish(request: ActionRequest) -> Response:
            ...

        class Publish:
            async def __call__(self, request: ActionRequest) -> Response:
                ...
    """

    async def __call__(self, request: ActionRequest) -> Response: ...


class Validator(Protocol):
    """Protocol for pre-action guards.

    ::

        async def require_title(request: ActionRequest, next: Next) -> Response:
            if "title" not in request.require("document"):
                return Response({"error": "title is required"}, status=422)
            return await next(request)
    """

    async def __call__(self, request: ActionRequest, next: Next) -> Response: ...


@dataclass(frozen=True, slots=True)
class ActionOptions:
    """Options attached to one action at definition time.

    ``validators`` run strictly before the action body, in the order
    given here. Any iterable is accepted and frozen to a tuple.
    """

    validators: tuple[Validator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "validators", tuple(self.validators))

    @classmethod
    def of(cls, *validators: Validator) -> ActionOptions:
        """Shorthand for ``ActionOptions(validators=(v1, v2, ...))``."""
        return cls(validators=validators)


def coerce_options(options: ActionOptions | Iterable[Validator] | None) -> ActionOptions | None:
    """Normalize the ``options`` argument accepted by definition entry points.

    ``None`` stays ``None``; a bare iterable of validators is wrapped.
    """
    if options is None or isinstance(options, ActionOptions):
        return options
    return ActionOptions(validators=tuple(options))
