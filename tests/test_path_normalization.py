import pytest

from routedoc.routes.normalize import normalize_path


@pytest.mark.parametrize(
    "fragments, expected",
    [
        (("users", "/"), "/users"),
        (("users", ":id"), "/users/:id"),
        (("/api/", "/users"), "/api/users"),
        (("", "health"), "/health"),
        (("  /v1 ", "  items  "), "/v1/items"),
        (("api\\v1", "users"), "/api/v1/users"),
        (("//a//", "//b"), "/a/b"),
        (("", ""), "/"),
        ((), "/"),
        (("/",), "/"),
        ((None, "x"), "/x"),
    ],
)
def test_normalize_path(fragments, expected):
    assert normalize_path(*fragments) == expected


@pytest.mark.parametrize(
    "fragments",
    [
        ("users", "/"),
        ("\\\\a\\b", "c//d/"),
        ("", "/"),
        ("   ", "x"),
        ("a", "{id}"),
    ],
)
def test_normalize_path_shape_and_idempotence(fragments):
    once = normalize_path(*fragments)

    assert once.startswith("/")
    assert "//" not in once
    assert "\\" not in once
    assert normalize_path(once) == once
    assert normalize_path("", once) == once
