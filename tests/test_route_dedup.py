from routedoc.domain.models import Route
from routedoc.routes.normalize import deduplicate_routes, sort_routes


def route(method="get", path="/a", tag=None, source_file="a.ts", line=1, origin="annotation"):
    return Route(
        method=method,
        path=path,
        summary=f"{source_file}:{line}",
        tag=tag,
        source_file=source_file,
        line=line,
        origin=origin,
    )


def test_first_seen_wins_and_order_is_kept():
    routes = [
        route(path="/b", line=1),
        route(path="/a", line=2),
        route(path="/b", line=3, source_file="other.ts"),
        route(method="post", path="/b", line=4),
    ]
    out = deduplicate_routes(routes)

    assert [(r.method, r.path) for r in out] == [("get", "/b"), ("get", "/a"), ("post", "/b")]
    assert out[0].line == 1
    assert out[0].source_file == "a.ts"


def test_tag_is_part_of_the_key():
    routes = [
        route(tag="users"),
        route(tag="admin"),
        route(tag=None),
        route(tag=None, line=9),
    ]
    out = deduplicate_routes(routes)
    assert [r.tag for r in out] == ["users", "admin", None]


def test_exactly_one_route_per_key():
    routes = [route(method=m, path=p, line=i) for i, (m, p) in enumerate(
        [("get", "/x"), ("get", "/x"), ("put", "/x"), ("get", "/y"), ("put", "/x")]
    )]
    out = deduplicate_routes(routes)

    keys = [r.dedup_key for r in out]
    assert len(keys) == len(set(keys)) == 3
    for r in out:
        first = next(x for x in routes if x.dedup_key == r.dedup_key)
        assert r is first


def test_sort_routes_by_file_then_line():
    routes = [route(source_file="b.ts", line=1), route(source_file="a.ts", line=7), route(source_file="a.ts", line=2)]
    assert [(r.source_file, r.line) for r in sort_routes(routes)] == [("a.ts", 2), ("a.ts", 7), ("b.ts", 1)]
