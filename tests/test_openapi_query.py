import pytest

from routedoc.domain.errors import OperationNotFoundError, UnsupportedMethodError
from routedoc.openapi.query import (
    find_operation_by_id,
    get_operation,
    get_request_schema,
    hit_to_dict,
    search_operations,
)

DOC = {
    "openapi": "3.1.0",
    "info": {"title": "T", "version": "1"},
    "paths": {
        "/users": {
            "get": {
                "summary": "List users",
                "operationId": "users_get_users",
                "tags": ["users"],
                "x-apifox-folder": "src / users",
            },
            "post": {"summary": "Create user", "operationId": "users_post_users"},
        },
        "/users/{id}": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
            "get": {
                "summary": "Get one",
                "operationId": "users_get_users_id",
                "parameters": [{"name": "expand", "in": "query"}],
            },
            "put": {
                "summary": "Replace",
                "operationId": "users_put_users_id",
                "requestBody": {"content": {"application/json": {}}},
                "x-apifox-name": "Replace a user",
            },
        },
        "/health": {"get": {"summary": "Health", "description": "liveness check"}},
    },
}


def test_search_matches_many_fields_case_insensitively():
    assert [(h.method, h.path) for h in search_operations(DOC, "USER")] == [
        ("get", "/users"),
        ("post", "/users"),
        ("get", "/users/{id}"),
        ("put", "/users/{id}"),
    ]
    assert [h.path for h in search_operations(DOC, "liveness")] == ["/health"]
    assert [h.method for h in search_operations(DOC, "replace a user")] == ["put"]
    assert [h.path for h in search_operations(DOC, "src / users")] == ["/users"]


def test_search_limits_and_blank_keyword():
    assert len(search_operations(DOC, "users", max_results=2)) == 2
    assert search_operations(DOC, "   ") == []
    assert search_operations(DOC, "nothing-like-this") == []


def test_hit_to_dict_drops_empty_fields():
    hit = search_operations(DOC, "List users")[0]
    assert hit_to_dict(hit) == {
        "method": "get",
        "path": "/users",
        "summary": "List users",
        "tags": ["users"],
        "folder": "src / users",
        "operationId": "users_get_users",
    }


def test_find_operation_by_id():
    located = find_operation_by_id(DOC, " users_put_users_id ")
    assert (located.path, located.method) == ("/users/{id}", "put")
    assert located.name == "Replace a user"
    assert find_operation_by_id(DOC, "missing") is None
    assert find_operation_by_id(DOC, "") is None


def test_get_operation_and_errors():
    located = get_operation(DOC, "/users", "GET")
    assert located.folder == "src / users"
    assert located.to_dict()["operationId"] == "users_get_users"

    with pytest.raises(UnsupportedMethodError):
        get_operation(DOC, "/users", "TRACE")
    with pytest.raises(OperationNotFoundError):
        get_operation(DOC, "/nope", "get")
    with pytest.raises(OperationNotFoundError):
        get_operation(DOC, "/health", "delete")


def test_request_schema_merges_parameters():
    req = get_request_schema(DOC, "/users/{id}", "get")
    assert [p["name"] for p in req["parameters"]] == ["id", "expand"]
    assert "requestBody" not in req

    put = get_request_schema(DOC, "/users/{id}", "put")
    assert put["requestBody"] == {"content": {"application/json": {}}}
    assert put["name"] == "Replace a user"
