"""Concept configuration.

ConceptConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from conceptkit.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ConceptConfig:
    """Configuration shared by a registry and its built-in actions.

    All fields have sensible defaults. Override what you need::

        config = ConceptConfig(store_url="sqlite:///posts.db", echo=True)
    """

    # Ordering of the built-in "read" action (newest first by default)
    sort_field: str = "dateUpdated"
    sort_direction: int = -1

    # Store
    store_url: str = "memory://"
    echo: bool = False  # Print store queries to stderr

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if any field is out of range."""
        if not self.sort_field:
            msg = "sort_field must be a non-empty field name."
            raise ConfigurationError(msg)
        if self.sort_direction not in (1, -1):
            msg = f"sort_direction must be 1 or -1, got {self.sort_direction!r}."
            raise ConfigurationError(msg)
