"""Reference dispatcher: run a composed handler chain for one request.

The registry only composes chains; running them belongs to whatever
transport sits in front. This module is the minimal version of that
layer, used by ``conceptkit.testing`` and by applications that have no
dispatcher of their own.

Stages may be ``def`` or ``async def``. Execution is sequential per
request: each validator runs to completion (or suspends on I/O) before
the next stage starts, and any stage that returns without calling
``next`` ends the chain.
"""

import inspect
import logging
from collections.abc import Sequence
from typing import Any

from conceptkit.actions import Handler, Next
from conceptkit.errors import HTTPError
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response
from conceptkit.registry import ActionRegistry

logger = logging.getLogger("conceptkit.dispatch")


async def _call_stage(stage: Handler, *args: Any) -> Response:
    """Call one stage, awaiting it if it is async, and check it produced a response."""
    result = stage(*args)
    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, Response):
        name = getattr(stage, "__qualname__", repr(stage))
        msg = f"Handler {name} returned {type(result).__name__}, expected Response"
        raise TypeError(msg)
    return result


async def run_handlers(handlers: Sequence[Handler], request: ActionRequest) -> Response:
    """Run ``[validators..., body]`` against *request* and return the response.

    Validators are called as ``validator(request, next)``; the last
    handler is the body, called as ``body(request)``. Exceptions
    propagate.
    """
    if not handlers:
        msg = "Cannot run an empty handler chain."
        raise ValueError(msg)

    *validators, body = handlers

    async def call_body(req: ActionRequest) -> Response:
        return await _call_stage(body, req)

    # Wrap validators around the body, innermost last
    handler: Next = call_body
    for validator in reversed(validators):
        inner = handler

        async def make_next(req: ActionRequest, _v: Handler = validator, _next: Next = inner) -> Response:
            return await _call_stage(_v, req, _next)

        handler = make_next

    return await handler(request)


async def dispatch(registry: ActionRegistry, name: str, request: ActionRequest) -> Response:
    """Resolve *name* on *registry* and run its chain.

    ``UnknownActionError`` propagates. An ``HTTPError`` raised by any
    stage becomes a JSON error response; every other exception
    propagates unchanged.
    """
    chain = registry.handlers(name)
    try:
        return await run_handlers(chain, request)
    except HTTPError as exc:
        logger.debug("%s.%s rejected: %d %s", registry.name, name, exc.status, exc.detail)
        return Response({"error": exc.detail or str(exc.status)}, status=exc.status)
