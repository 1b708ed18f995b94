"""Per-concept action registry.

Binds action names to bodies, attaches ordered validator chains, and
hands the composed chain to a dispatcher. Populated once during setup;
read-only afterwards.

Free-threading safety:
    - Registration (``define_action``, ``sync``) is setup-time and
      single-threaded
    - ``action()`` and ``handlers()`` only read, so concurrent dispatch
      is safe once setup is done
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from conceptkit.actions import Action, ActionOptions, Handler, Validator, coerce_options
from conceptkit.config import ConceptConfig
from conceptkit.crud import create_action, delete_action, read_action, update_action
from conceptkit.errors import DuplicateActionError, UnknownActionError
from conceptkit.store import open_store
from conceptkit.store.protocol import DocumentStore

logger = logging.getLogger("conceptkit.registry")

type Options = ActionOptions | Iterable[Validator] | None


class ActionRegistry:
    """Named actions for one concept, bound to one document store.

    Usage::

        posts = ActionRegistry(MemoryStore("posts"))
        posts.define_create_action(ActionOptions.of(require_title))
        posts.define_read_action()
        posts.define_action("publish", publish)

        chain = posts.handlers("create")   # [require_title, <create>]

    The concept name is taken from the store and never changes.
    """

    __slots__ = ("_actions", "_config", "_name", "_options", "_store", "_syncs")

    def __init__(self, store: DocumentStore, *, config: ConceptConfig | None = None) -> None:
        config = config or ConceptConfig()
        config.validate()
        self._store = store
        self._config = config
        self._name: str = store.name
        self._actions: dict[str, Action] = {}
        self._options: dict[str, ActionOptions] = {}
        self._syncs: dict[str, list[Handler]] = {}

    @classmethod
    def open(cls, name: str, *, config: ConceptConfig | None = None) -> ActionRegistry:
        """Create a registry whose store is built from ``config.store_url``.

        ::

            posts = ActionRegistry.open("posts", config=ConceptConfig(store_url="sqlite:///app.db"))
        """
        config = config or ConceptConfig()
        return cls(open_store(config.store_url, name, echo=config.echo), config=config)

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def config(self) -> ConceptConfig:
        return self._config

    def __repr__(self) -> str:
        return f"ActionRegistry({self._name!r}, actions={list(self._actions)!r})"

    # -- Registration --

    def define_action(self, name: str, body: Action, options: Options = None) -> None:
        """Register *body* under *name*.

        Raises ``DuplicateActionError`` if *name* is already defined; the
        first registration stays in place.
        """
        if name in self._actions:
            raise DuplicateActionError(name, self._name)
        self._actions[name] = body
        options = coerce_options(options)
        if options is not None:
            self._options[name] = options
        logger.debug(
            "defined action %s.%s (%d validators)",
            self._name,
            name,
            len(options.validators) if options else 0,
        )

    def sync(self, name: str, follow_up: Handler) -> None:
        """Record *follow_up* against *name*.

        Never fails: *name* need not be a defined action, and the same
        callable may be recorded more than once. The registry does not
        run follow-ups; observers read them through ``synced()``.
        """
        self._syncs.setdefault(name, []).append(follow_up)

    # -- Built-in actions --

    def define_create_action(self, options: Options = None) -> None:
        """Define action "create". See ``conceptkit.crud.create_action``."""
        self.define_action("create", create_action(self._store), options)

    def define_read_action(self, options: Options = None) -> None:
        """Define action "read". See ``conceptkit.crud.read_action``."""
        body = read_action(self._store, self._config.sort_field, self._config.sort_direction)
        self.define_action("read", body, options)

    def define_update_action(self, options: Options = None) -> None:
        """Define action "update". See ``conceptkit.crud.update_action``."""
        self.define_action("update", update_action(self._store), options)

    def define_delete_action(self, options: Options = None) -> None:
        """Define action "delete". See ``conceptkit.crud.delete_action``."""
        self.define_action("delete", delete_action(self._store), options)

    # -- Lookup --

    def action(self, name: str) -> Action:
        """Return the raw body registered under *name*.

        Raises ``UnknownActionError`` if *name* was never defined.
        """
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name, self._name) from None

    def handlers(self, name: str) -> list[Handler]:
        """Return the chain ``[validators..., body]`` for *name*.

        Validators keep their registration order and the body is always
        last. Raises ``UnknownActionError`` if *name* was never defined.
        """
        body = self.action(name)
        options = self._options.get(name)
        chain: list[Handler] = list(options.validators) if options is not None else []
        chain.append(body)
        return chain

    def options_for(self, name: str) -> ActionOptions:
        """Return the options *name* was defined with (empty if none)."""
        self.action(name)
        return self._options.get(name, ActionOptions())

    def synced(self, name: str) -> tuple[Handler, ...]:
        """Return the follow-ups recorded for *name*, in recording order."""
        return tuple(self._syncs.get(name, ()))

    @property
    def names(self) -> tuple[str, ...]:
        """Defined action names, in definition order."""
        return tuple(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)
