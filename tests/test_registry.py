"""Tests for conceptkit.registry — definition, lookup, composition, syncs."""

import logging

import pytest

from conceptkit.actions import ActionOptions
from conceptkit.config import ConceptConfig
from conceptkit.errors import ConfigurationError, DuplicateActionError, UnknownActionError
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response
from conceptkit.registry import ActionRegistry
from conceptkit.store.memory import MemoryStore


async def body(request: ActionRequest) -> Response:
    return Response({"ok": True})


async def other_body(request: ActionRequest) -> Response:
    return Response({"ok": False})


async def v1(request, next):
    return await next(request)


async def v2(request, next):
    return await next(request)


@pytest.fixture
def registry() -> ActionRegistry:
    return ActionRegistry(MemoryStore("posts"))


class TestConstruction:
    def test_name_comes_from_store(self, registry: ActionRegistry) -> None:
        assert registry.name == "posts"

    def test_name_is_read_only(self, registry: ActionRegistry) -> None:
        with pytest.raises(AttributeError):
            registry.name = "users"  # type: ignore[misc]

    def test_store_is_exposed(self) -> None:
        store = MemoryStore("posts")
        assert ActionRegistry(store).store is store

    def test_default_config(self, registry: ActionRegistry) -> None:
        assert registry.config == ConceptConfig()

    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionRegistry(MemoryStore("posts"), config=ConceptConfig(sort_direction=0))

    def test_starts_empty(self, registry: ActionRegistry) -> None:
        assert len(registry) == 0
        assert registry.names == ()


class TestDefineAction:
    def test_defines_body(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body)
        assert registry.action("publish") is body
        assert "publish" in registry

    def test_duplicate_raises(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body)
        with pytest.raises(DuplicateActionError, match="publish"):
            registry.define_action("publish", other_body)

    def test_first_registration_stays_authoritative(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions.of(v1))
        with pytest.raises(DuplicateActionError):
            registry.define_action("publish", other_body, ActionOptions.of(v2))
        assert registry.action("publish") is body
        assert registry.handlers("publish") == [v1, body]

    def test_duplicate_error_carries_names(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body)
        with pytest.raises(DuplicateActionError) as exc_info:
            registry.define_action("publish", body)
        assert exc_info.value.action == "publish"
        assert exc_info.value.concept == "posts"
        assert str(exc_info.value) == "Action 'publish' already defined in 'posts' concept"

    def test_builtin_name_collides_with_custom(self, registry: ActionRegistry) -> None:
        registry.define_action("create", body)
        with pytest.raises(DuplicateActionError):
            registry.define_create_action()

    def test_names_in_definition_order(self, registry: ActionRegistry) -> None:
        registry.define_action("b", body)
        registry.define_action("a", body)
        registry.define_action("c", body)
        assert registry.names == ("b", "a", "c")
        assert len(registry) == 3

    def test_logs_definition(self, registry: ActionRegistry, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="conceptkit.registry"):
            registry.define_action("publish", body, [v1, v2])
        assert "posts.publish" in caplog.text
        assert "2 validators" in caplog.text


class TestLookup:
    def test_unknown_action_raises(self, registry: ActionRegistry) -> None:
        with pytest.raises(UnknownActionError, match="'missing'"):
            registry.action("missing")

    def test_unknown_handlers_raises(self, registry: ActionRegistry) -> None:
        with pytest.raises(UnknownActionError):
            registry.handlers("missing")

    def test_unknown_error_message(self, registry: ActionRegistry) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            registry.action("missing")
        assert str(exc_info.value) == "Action 'missing' does not exist in 'posts' concept"

    def test_synced_name_is_not_an_action(self, registry: ActionRegistry) -> None:
        registry.sync("publish", body)
        with pytest.raises(UnknownActionError):
            registry.handlers("publish")

    def test_options_for(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions.of(v1))
        registry.define_action("archive", body)
        assert registry.options_for("publish").validators == (v1,)
        assert registry.options_for("archive").validators == ()
        with pytest.raises(UnknownActionError):
            registry.options_for("missing")


class TestHandlers:
    def test_body_only(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body)
        assert registry.handlers("publish") == [body]

    def test_validators_then_body(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions(validators=[v1, v2]))
        assert registry.handlers("publish") == [v1, v2, body]

    def test_order_is_stable_across_calls(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions.of(v2, v1))
        assert registry.handlers("publish") == [v2, v1, body]
        assert registry.handlers("publish") == [v2, v1, body]

    def test_returned_list_is_a_copy(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions.of(v1))
        chain = registry.handlers("publish")
        chain.insert(0, v2)
        assert registry.handlers("publish") == [v1, body]

    def test_plain_iterable_options(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, [v1, v2])
        assert registry.handlers("publish") == [v1, v2, body]

    def test_empty_options(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body, ActionOptions())
        assert registry.handlers("publish") == [body]

    def test_same_validator_on_many_actions(self, registry: ActionRegistry) -> None:
        registry.define_action("a", body, ActionOptions.of(v1))
        registry.define_action("b", other_body, ActionOptions.of(v1))
        assert registry.handlers("a") == [v1, body]
        assert registry.handlers("b") == [v1, other_body]

    def test_builtin_forwards_options(self, registry: ActionRegistry) -> None:
        registry.define_read_action(ActionOptions.of(v1, v2))
        chain = registry.handlers("read")
        assert chain[:2] == [v1, v2]
        assert chain[2] is registry.action("read")


class TestSync:
    def test_never_requires_action(self, registry: ActionRegistry) -> None:
        registry.sync("nothing-here", body)
        assert registry.synced("nothing-here") == (body,)

    def test_accumulates_in_order(self, registry: ActionRegistry) -> None:
        registry.sync("publish", body)
        registry.sync("publish", other_body)
        assert registry.synced("publish") == (body, other_body)

    def test_duplicates_allowed(self, registry: ActionRegistry) -> None:
        registry.sync("publish", body)
        registry.sync("publish", body)
        assert registry.synced("publish") == (body, body)

    def test_unknown_name_is_empty(self, registry: ActionRegistry) -> None:
        assert registry.synced("publish") == ()

    def test_does_not_change_handlers(self, registry: ActionRegistry) -> None:
        registry.define_action("publish", body)
        registry.sync("publish", other_body)
        assert registry.handlers("publish") == [body]
