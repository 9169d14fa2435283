from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node

from routedoc.domain.models import HTTP_METHODS, Route
from routedoc.extractors.base import FileContext
from routedoc.extractors.typescript.parser import (
    Decorator,
    SourceTree,
    class_decorators,
    doc_comment_text,
    leading_trivia,
    member_name,
    node_text,
    parse_decorator,
    resolve_string_literal,
    start_line,
    top_level_classes,
)
from routedoc.routes.normalize import normalize_path

logger = logging.getLogger(__name__)

CONTROLLER_DECORATOR = "Controller"
_CONTROLLER_SUFFIX = "Controller"


class AnnotationRouteExtractor:
    """
    Decorator-style controllers:

        @Controller('users')
        export class UsersController {
          /** List users */
          @Get(':id')
          findOne() {}
        }

    Only top-level classes carrying a `Controller` decorator are considered.
    """

    name = "annotation"

    def extract(self, tree: SourceTree, ctx: FileContext) -> list[Route]:
        routes: list[Route] = []
        for class_node in top_level_classes(tree):
            routes.extend(self._extract_class(class_node, ctx))
        return routes

    def _extract_class(self, class_node: Node, ctx: FileContext) -> list[Route]:
        controller = _find_named(class_decorators(class_node), CONTROLLER_DECORATOR)
        if controller is None:
            return []

        # base path: a non-literal argument counts as no base path
        base_path = ""
        if controller.arguments:
            base_path = resolve_string_literal(controller.arguments[0]) or ""

        class_name = node_text(class_node.child_by_field_name("name")) or None
        tag = _tag_from_class_name(class_name)

        body = class_node.child_by_field_name("body")
        if body is None:
            return []

        routes: list[Route] = []
        for member in body.named_children:
            if member.type != "method_definition":
                continue
            route = self._extract_method(member, base_path, class_name, tag, ctx)
            if route is not None:
                routes.append(route)
        return routes

    def _extract_method(
        self,
        member: Node,
        base_path: str,
        class_name: Optional[str],
        tag: Optional[str],
        ctx: FileContext,
    ) -> Optional[Route]:
        decorator_nodes, comments = leading_trivia(member)
        if not decorator_nodes:
            return None

        verb = None
        for dec in (parse_decorator(n) for n in decorator_nodes):
            if dec.name and dec.name.lower() in HTTP_METHODS:
                verb = dec
                break
        if verb is None:
            return None

        method_path = ""
        if verb.arguments:
            resolved = resolve_string_literal(verb.arguments[0])
            if resolved is None:
                logger.debug(
                    "%s:%d: @%s path is not a plain literal, skipped",
                    ctx.rel_path, start_line(member), verb.name,
                )
                return None
            method_path = resolved

        handler = member_name(member) or verb.name.lower()
        summary = doc_comment_text(comments) or f"{class_name or 'Controller'}.{handler}"
        decl_line = min(start_line(n) for n in [member, *decorator_nodes])

        return Route(
            method=verb.name.lower(),
            path=normalize_path(base_path, method_path),
            summary=summary,
            tag=tag,
            source_file=ctx.rel_path,
            line=decl_line,
            folder=ctx.folder,
            origin="annotation",
        )


def _find_named(decorators: list[Decorator], name: str) -> Optional[Decorator]:
    for d in decorators:
        if d.name == name:
            return d
    return None


def _tag_from_class_name(class_name: Optional[str]) -> Optional[str]:
    if not class_name:
        return None
    if class_name.endswith(_CONTROLLER_SUFFIX):
        class_name = class_name[: -len(_CONTROLLER_SUFFIX)]
    return class_name or None
