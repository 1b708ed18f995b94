"""Document store error hierarchy."""

from conceptkit.errors import ConceptError


class StoreError(ConceptError):
    """Base for all conceptkit.store errors."""


class InvalidIdError(StoreError):
    """Raised when a value is not a well-formed document identifier."""


class DuplicateIdError(StoreError):
    """Raised when a document is created with an ``_id`` already in use."""


class FilterError(StoreError):
    """Raised when a filter expression cannot be interpreted."""


class QueryError(StoreError):
    """Raised when the backing database rejects a query."""
