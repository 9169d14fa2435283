from __future__ import annotations

import re
from typing import Iterable, Optional

from routedoc.domain.models import BuildOptions, Route
from routedoc.openapi.document import (
    DOCUMENT_METHODS,
    ApiDocument,
    Info,
    Operation,
    Response,
    Server,
    Tag,
)

DEFAULT_DESCRIPTION = "Generated from controller scan results"
DEFAULT_RESPONSE_DESCRIPTION = "Auto-generated endpoint, returns 200 OK by default."

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def document_method(method: str) -> Optional[str]:
    """Map a route method onto a path-item key; `all` is documented as `get`."""
    m = (method or "").lower()
    if m == "all":
        return "get"
    return m if m in DOCUMENT_METHODS else None


def build_operation_id(route: Route, method: str) -> str:
    """
    tag + method + sanitized path, joined by "_":
      GET /users/{id} (tag users) -> users_get_users_id
    Routes without a tag use "controller". An empty sanitized path (root) is dropped.
    """
    sanitized = _PLACEHOLDER.sub(r"_\1_", route.path)
    sanitized = _NON_ALNUM.sub("_", sanitized).strip("_").lower()
    parts = [route.tag or "controller", method, sanitized]
    return "_".join(p for p in parts if p)


def _folder_label(folder: str) -> str:
    return " / ".join(seg for seg in folder.replace("\\", "/").split("/") if seg)


def build_openapi_from_routes(routes: Iterable[Route], options: BuildOptions) -> ApiDocument:
    """
    Fold routes (already de-duplicated, in order) into a fresh document.

    Same path -> one path-item; a later route for the same path+method replaces
    the earlier operation. Tags are listed in first-seen order.
    """
    paths: dict[str, dict[str, Operation]] = {}
    tag_names: list[str] = []
    response_description = options.default_response_description or DEFAULT_RESPONSE_DESCRIPTION

    for route in routes:
        method = document_method(route.method)
        if method is None:
            continue

        path_item = paths.setdefault(route.path, {})
        path_item[method] = Operation(
            summary=route.summary,
            description=f"Generated from {route.source_file}:{route.line} ({route.origin})",
            tags=[route.tag] if route.tag else None,
            responses={"200": Response(description=response_description)},
            operation_id=build_operation_id(route, method),
            folder=_folder_label(route.folder) if route.folder else None,
        )

        if route.tag and route.tag not in tag_names:
            tag_names.append(route.tag)

    return ApiDocument(
        info=Info(
            title=options.title,
            version=options.version or "1.0.0",
            description=options.description or DEFAULT_DESCRIPTION,
        ),
        servers=[Server(url=options.server_url)] if options.server_url else None,
        paths=paths,
        tags=[Tag(name=n) for n in tag_names],
    )
