"""Tests for conceptkit.errors — exception hierarchy and error messages."""

import pytest

from conceptkit.errors import (
    BadRequest,
    ConceptError,
    ConfigurationError,
    DuplicateActionError,
    HTTPError,
    RegistryError,
    UnknownActionError,
)
from conceptkit.store.errors import DuplicateIdError, FilterError, InvalidIdError, QueryError, StoreError


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, RegistryError, HTTPError, StoreError],
    )
    def test_concept_error_base(self, exc_type: type) -> None:
        assert issubclass(exc_type, ConceptError)

    def test_registry_errors(self) -> None:
        assert issubclass(DuplicateActionError, RegistryError)
        assert issubclass(UnknownActionError, RegistryError)

    def test_store_errors(self) -> None:
        for exc_type in (InvalidIdError, DuplicateIdError, FilterError, QueryError):
            assert issubclass(exc_type, StoreError)

    def test_bad_request_is_http_error(self) -> None:
        assert issubclass(BadRequest, HTTPError)


class TestRegistryErrors:
    def test_duplicate_message(self) -> None:
        err = DuplicateActionError("create", "posts")
        assert str(err) == "Action 'create' already defined in 'posts' concept"
        assert (err.action, err.concept) == ("create", "posts")

    def test_unknown_message(self) -> None:
        err = UnknownActionError("publish", "posts")
        assert str(err) == "Action 'publish' does not exist in 'posts' concept"


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=422, detail="title is required")) == "422: title is required"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_bad_request_defaults(self) -> None:
        err = BadRequest()
        assert err.status == 400
        assert err.detail == "Bad Request"
