"""The document-store contract consumed by the registry's built-in actions.

Any object with these attributes works; there is no base class. Every
operation is async and may raise a ``StoreError`` (or a driver error)
that propagates unchanged to the dispatcher.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from conceptkit.store.filters import Filter, SortSpec
from conceptkit.store.ids import DocumentId

# Fields every stored document carries, maintained by the store
ID_FIELD = "_id"
CREATED_FIELD = "dateCreated"
UPDATED_FIELD = "dateUpdated"

MANAGED_FIELDS = frozenset({ID_FIELD, CREATED_FIELD, UPDATED_FIELD})


@runtime_checkable
class DocumentStore(Protocol):
    """A named collection of JSON-like documents."""

    @property
    def name(self) -> str: ...

    async def create_one(self, document: Mapping[str, Any]) -> DocumentId:
        """Insert *document* and return its identifier."""
        ...

    async def read_many(self, filter: Filter | None = None, sort: SortSpec = ()) -> list[dict[str, Any]]:
        """Return every document matching *filter*, ordered by *sort*."""
        ...

    async def update_one_by_id(self, id: DocumentId, partial: Mapping[str, Any]) -> bool:
        """Set the fields of *partial* on document *id*. False if no match."""
        ...

    async def read_one_by_id(self, id: DocumentId) -> dict[str, Any] | None: ...

    async def pop_one_by_id(self, id: DocumentId) -> dict[str, Any] | None:
        """Delete document *id* and return it, or ``None`` if absent."""
        ...
