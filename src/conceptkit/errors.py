"""Conceptkit exception hierarchy.

Shared across the registry, dispatcher, and stores so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class ConceptError(Exception):
    """Base for all conceptkit-specific errors."""


class ConfigurationError(ConceptError):
    """Raised when configuration is invalid.

    Typically surfaces at setup, before any request is dispatched.
    """


class RegistryError(ConceptError):
    """Misuse of an ``ActionRegistry``: a setup or routing mistake."""

    def __init__(self, action: str, concept: str, message: str) -> None:
        super().__init__(message)
        self.action = action
        self.concept = concept


class DuplicateActionError(RegistryError):
    """An action name was defined twice on the same registry."""

    def __init__(self, action: str, concept: str) -> None:
        super().__init__(action, concept, f"Action {action!r} already defined in {concept!r} concept")


class UnknownActionError(RegistryError):
    """An action name was looked up but never defined."""

    def __init__(self, action: str, concept: str) -> None:
        super().__init__(action, concept, f"Action {action!r} does not exist in {concept!r} concept")


@dataclass(frozen=True, slots=True)
class HTTPError(ConceptError):
    """An error that maps directly to an HTTP status code.

    Raised by validators or action bodies to reject a request. The
    dispatcher turns it into a JSON error response.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: the request is missing a field or carries a malformed one."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)
