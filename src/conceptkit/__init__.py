"""Conceptkit — named actions for document-backed concepts.

A concept is one resource (posts, users, comments) with a registry of
named actions. Each action is a body plus an optional, ordered chain of
validators that run before it. A dispatcher asks the registry for the
chain by name and runs it.

Basic usage::

    from conceptkit import ActionOptions, ActionRegistry
    from conceptkit.store import MemoryStore

    posts = ActionRegistry(MemoryStore("posts"))
    posts.define_create_action(ActionOptions.of(require_title))
    posts.define_read_action()

    chain = posts.handlers("create")   # [require_title, <create>]

Running a chain::

    from conceptkit import ActionRequest, dispatch

    response = await dispatch(posts, "create", ActionRequest.build(body={"document": {"title": "x"}}))
"""

__version__ = "0.1.0"
__all__ = [
    "ActionOptions",
    "ActionRegistry",
    "ActionRequest",
    "BadRequest",
    "ConceptConfig",
    "ConceptError",
    "ConfigurationError",
    "DuplicateActionError",
    "HTTPError",
    "Next",
    "Response",
    "UnknownActionError",
    "dispatch",
    "run_handlers",
]

# Public name -> defining module. Keeps ``import conceptkit`` cheap.
_LAZY_IMPORTS: dict[str, str] = {
    "ActionOptions": "conceptkit.actions",
    "Next": "conceptkit.actions",
    "ActionRegistry": "conceptkit.registry",
    "ActionRequest": "conceptkit.http.request",
    "Response": "conceptkit.http.response",
    "ConceptConfig": "conceptkit.config",
    "dispatch": "conceptkit.dispatch",
    "run_handlers": "conceptkit.dispatch",
    "BadRequest": "conceptkit.errors",
    "ConceptError": "conceptkit.errors",
    "ConfigurationError": "conceptkit.errors",
    "DuplicateActionError": "conceptkit.errors",
    "HTTPError": "conceptkit.errors",
    "UnknownActionError": "conceptkit.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API."""
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    return getattr(importlib.import_module(module_name), name)
