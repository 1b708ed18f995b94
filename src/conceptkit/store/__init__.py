"""Document stores for concept actions.

A store is the persistence collaborator behind the built-in CRUD
actions. Two implementations ship with conceptkit::

    from conceptkit.store import MemoryStore, SQLiteStore, open_store

    store = MemoryStore("posts")
    store = SQLiteStore("posts", "app.db")
    store = open_store("sqlite:///app.db", "posts")

Anything satisfying the ``DocumentStore`` protocol can be used instead.
"""

from conceptkit.errors import ConfigurationError
from conceptkit.store.errors import DuplicateIdError, FilterError, InvalidIdError, QueryError, StoreError
from conceptkit.store.ids import DocumentId, new_id, parse_id
from conceptkit.store.memory import MemoryStore
from conceptkit.store.protocol import DocumentStore
from conceptkit.store.sqlite import SQLiteStore

__all__ = [
    "DocumentId",
    "DocumentStore",
    "DuplicateIdError",
    "FilterError",
    "InvalidIdError",
    "MemoryStore",
    "QueryError",
    "SQLiteStore",
    "StoreError",
    "new_id",
    "open_store",
    "parse_id",
]


def open_store(url: str, name: str, *, echo: bool = False) -> MemoryStore | SQLiteStore:
    """Create a store from a URL.

    Supported forms::

        memory://                 # MemoryStore
        sqlite:///path/to/db      # SQLiteStore on a file
        sqlite:///:memory:        # SQLiteStore in memory

    Raises ``ConfigurationError`` for any other scheme.
    """
    if url == "memory://":
        return MemoryStore(name)
    if url.startswith("sqlite:///"):
        path = url.removeprefix("sqlite:///")
        if not path:
            msg = f"SQLite URL {url!r} has no database path."
            raise ConfigurationError(msg)
        return SQLiteStore(name, path, echo=echo)
    msg = f"Unsupported store URL: {url!r}. Use 'memory://' or 'sqlite:///path'."
    raise ConfigurationError(msg)
