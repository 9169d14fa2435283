from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from routedoc.domain.models import HTTP_METHODS, Route
from routedoc.extractors.base import FileContext
from routedoc.extractors.typescript.parser import (
    SourceTree,
    named_arguments,
    node_text,
    resolve_string_literal,
    start_line,
)
from routedoc.routes.normalize import normalize_path


class CallChainRouteExtractor:
    """
    Fluent router registrations anywhere in the file:

        router.get('/health', handler)
        app.route('/x').post('/y', ...)   # only the `.post('/y')` part counts

    The receiver is not resolved; any `<expr>.<verb>('<literal>', ...)` matches.
    """

    name = "call-chain"

    def extract(self, tree: SourceTree, ctx: FileContext) -> list[Route]:
        routes: list[Route] = []
        tag = _tag_from_folder(ctx.folder_name)
        basename = ctx.path.name

        for node in tree.walk():
            if node.type != "call_expression":
                continue
            match = _match_verb_call(node)
            if match is None:
                continue
            method, literal = match
            line = start_line(node)
            routes.append(
                Route(
                    method=method,
                    path=normalize_path("", literal),
                    summary=f"From {basename} line {line}",
                    tag=tag,
                    source_file=ctx.rel_path,
                    line=line,
                    folder=ctx.folder,
                    origin="call-chain",
                )
            )
        return routes


def _match_verb_call(call: Node) -> Optional[tuple[str, str]]:
    """Return (method, path literal) for `<expr>.<verb>('<literal>', ...)`."""
    func = call.child_by_field_name("function")
    if func is None or func.type != "member_expression":
        return None

    prop = func.child_by_field_name("property")
    method = node_text(prop).lower()
    if method not in HTTP_METHODS:
        return None

    args = named_arguments(call)
    if not args:
        return None

    literal = resolve_string_literal(args[0])
    if not literal:
        return None
    return method, literal


def _tag_from_folder(folder_name: Optional[str]) -> Optional[str]:
    if not folder_name:
        return None
    return folder_name.replace("-", " ").replace("_", " ")
