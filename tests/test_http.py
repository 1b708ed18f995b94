"""Tests for conceptkit.http — requests, query parameters, responses."""

import json

import pytest

from conceptkit.errors import BadRequest
from conceptkit.http.query import QueryParams
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response


class TestQueryParams:
    def test_from_string(self) -> None:
        query = QueryParams("a=1&b=2&a=3")
        assert query["a"] == "1"
        assert query.get_list("a") == ["1", "3"]
        assert len(query) == 2

    def test_from_bytes(self) -> None:
        assert QueryParams(b"a=1")["a"] == "1"

    def test_from_mapping_keeps_values(self) -> None:
        query = QueryParams({"filter": {"title": "x"}})
        assert query["filter"] == {"title": "x"}

    def test_get_default(self) -> None:
        assert QueryParams().get("missing", "d") == "d"

    def test_get_json_string(self) -> None:
        query = QueryParams('filter={"n":{"$gt":1}}')
        assert query.get_json("filter") == {"n": {"$gt": 1}}

    def test_get_json_decoded_value(self) -> None:
        assert QueryParams({"filter": {"a": 1}}).get_json("filter") == {"a": 1}

    def test_get_json_default(self) -> None:
        assert QueryParams().get_json("filter", {}) == {}

    def test_get_json_invalid(self) -> None:
        with pytest.raises(BadRequest, match="filter"):
            QueryParams("filter={bad").get_json("filter")

    def test_immutable(self) -> None:
        query = QueryParams("a=1")
        with pytest.raises(TypeError):
            query["a"] = "2"  # type: ignore[index]


class TestActionRequest:
    def test_defaults(self) -> None:
        request = ActionRequest()
        assert dict(request.body) == {}
        assert dict(request.path_params) == {}
        assert len(request.query) == 0

    def test_build(self) -> None:
        request = ActionRequest.build(body={"document": {}}, path_params={"_id": "x"}, query="a=1")
        assert request.require("document") == {}
        assert request.path_param("_id") == "x"
        assert request.query["a"] == "1"

    def test_build_copies_body(self) -> None:
        body = {"document": {}}
        request = ActionRequest.build(body=body)
        body["other"] = 1
        assert "other" not in request.body

    def test_body_is_read_only(self) -> None:
        request = ActionRequest.build(body={"a": 1})
        with pytest.raises(TypeError):
            request.body["a"] = 2  # type: ignore[index]

    def test_require_missing(self) -> None:
        with pytest.raises(BadRequest, match="document"):
            ActionRequest.build().require("document")

    def test_path_param_missing(self) -> None:
        with pytest.raises(BadRequest, match="_id"):
            ActionRequest.build().path_param("_id")


class TestResponse:
    def test_defaults(self) -> None:
        response = Response({"a": 1})
        assert response.status == 200
        assert response.ok
        assert response.content_type == "application/json"

    def test_with_status_returns_new(self) -> None:
        original = Response("x")
        changed = original.with_status(404)
        assert original.status == 200
        assert changed.status == 404
        assert not changed.ok

    def test_with_header(self) -> None:
        response = Response().with_header("X-A", "1").with_header("X-B", "2")
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_json(self) -> None:
        response = Response({"document": None, "n": [1, 2]})
        assert json.loads(response.json()) == {"document": None, "n": [1, 2]}
