"""In-process document store.

Documents live in an insertion-ordered dict keyed by ``_id``. Nothing is
persisted. Useful for tests and for prototyping a concept before it gets
a database.
"""

import copy
import time
from collections.abc import Callable, Mapping
from typing import Any

from conceptkit.store.errors import DuplicateIdError, StoreError
from conceptkit.store.filters import Filter, SortSpec, matches, sort_documents, validate_filter
from conceptkit.store.ids import DocumentId, new_id, parse_id
from conceptkit.store.protocol import CREATED_FIELD, ID_FIELD, MANAGED_FIELDS, UPDATED_FIELD


def prepare_insert(document: Mapping[str, Any], now: float) -> dict[str, Any]:
    """Return the stored form of a new *document*: a deep copy with managed fields set.

    A caller-supplied ``_id`` is validated and kept.
    """
    if not isinstance(document, Mapping):
        msg = f"Document must be a mapping, got {type(document).__name__}"
        raise StoreError(msg)
    stored = copy.deepcopy(dict(document))
    stored[ID_FIELD] = parse_id(stored[ID_FIELD]) if ID_FIELD in stored else new_id()
    stored[CREATED_FIELD] = now
    stored[UPDATED_FIELD] = now
    return stored


def prepare_patch(partial: Mapping[str, Any], now: float) -> dict[str, Any]:
    """Return the fields to set for an update, with ``dateUpdated`` refreshed.

    Store-managed fields cannot be patched.
    """
    if not isinstance(partial, Mapping):
        msg = f"Partial document must be a mapping, got {type(partial).__name__}"
        raise StoreError(msg)
    for field in sorted(MANAGED_FIELDS):
        if field in partial:
            msg = f"Field {field!r} cannot be modified"
            raise StoreError(msg)
    patch = copy.deepcopy(dict(partial))
    patch[UPDATED_FIELD] = now
    return patch


class MemoryStore:
    """Dict-backed ``DocumentStore``.

    Usage::

        store = MemoryStore("posts")
        _id = await store.create_one({"title": "x"})
        await store.read_many({"title": "x"}, sort=[("dateUpdated", -1)])

    ``clock`` supplies the ``dateCreated`` / ``dateUpdated`` timestamps.
    """

    __slots__ = ("_clock", "_documents", "_name")

    def __init__(self, name: str, *, clock: Callable[[], float] = time.time) -> None:
        self._name = name
        self._clock = clock
        self._documents: dict[DocumentId, dict[str, Any]] = {}

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._documents)

    async def create_one(self, document: Mapping[str, Any]) -> DocumentId:
        stored = prepare_insert(document, self._clock())
        _id = stored[ID_FIELD]
        if _id in self._documents:
            msg = f"Document {_id!r} already exists in {self._name!r}"
            raise DuplicateIdError(msg)
        self._documents[_id] = stored
        return _id

    async def read_many(self, filter: Filter | None = None, sort: SortSpec = ()) -> list[dict[str, Any]]:
        filter = validate_filter(filter)
        found = [doc for doc in self._documents.values() if matches(doc, filter)]
        return [copy.deepcopy(doc) for doc in sort_documents(found, sort)]

    async def update_one_by_id(self, id: DocumentId, partial: Mapping[str, Any]) -> bool:
        _id = parse_id(id)
        patch = prepare_patch(partial, self._clock())
        stored = self._documents.get(_id)
        if stored is None:
            return False
        stored.update(patch)
        return True

    async def read_one_by_id(self, id: DocumentId) -> dict[str, Any] | None:
        stored = self._documents.get(parse_id(id))
        return copy.deepcopy(stored) if stored is not None else None

    async def pop_one_by_id(self, id: DocumentId) -> dict[str, Any] | None:
        return self._documents.pop(parse_id(id), None)
