"""Built-in action bodies for create / read / update / delete.

Each factory closes over a ``DocumentStore`` and returns an action body.
Bodies add no validation of their own; store errors propagate unchanged.
Register them through ``ActionRegistry.define_create_action()`` and
friends rather than calling these directly.
"""

from conceptkit.actions import Action
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response
from conceptkit.store.ids import parse_id
from conceptkit.store.protocol import ID_FIELD, UPDATED_FIELD, DocumentStore


def create_action(store: DocumentStore) -> Action:
    """Action "create".

    Requires ``request.body["document"]``: the document to insert.
    Returns ``{"document": ...}``, the given document plus its ``_id``.
    """

    async def create(request: ActionRequest) -> Response:
        document = request.require("document")
        _id = await store.create_one(document)
        return Response({"document": {**document, ID_FIELD: _id}})

    return create


def read_action(store: DocumentStore, sort_field: str = UPDATED_FIELD, sort_direction: int = -1) -> Action:
    """Action "read".

    Reads ``request.query["filter"]`` (JSON, optional; empty matches all).
    Returns ``{"documents": [...]}`` ordered by *sort_field*, newest first
    by default.
    """
    sort = ((sort_field, sort_direction),)

    async def read(request: ActionRequest) -> Response:
        filter = request.query.get_json("filter", {})
        documents = await store.read_many(filter, sort)
        return Response({"documents": documents})

    return read


def update_action(store: DocumentStore) -> Action:
    """Action "update".

    Requires ``request.path_params["_id"]`` and
    ``request.body["partialDocument"]``. Returns ``{"document": ...}``,
    re-read after the patch (``None`` if the id matched nothing).
    """

    async def update(request: ActionRequest) -> Response:
        partial = request.require("partialDocument")
        _id = parse_id(request.path_param(ID_FIELD))
        await store.update_one_by_id(_id, partial)
        document = await store.read_one_by_id(_id)
        return Response({"document": document})

    return update


def delete_action(store: DocumentStore) -> Action:
    """Action "delete".

    Requires ``request.path_params["_id"]``. Returns ``{"document": ...}``,
    the removed document or ``None`` if it was not found.
    """

    async def delete(request: ActionRequest) -> Response:
        _id = parse_id(request.path_param(ID_FIELD))
        document = await store.pop_one_by_id(_id)
        return Response({"document": document})

    return delete
