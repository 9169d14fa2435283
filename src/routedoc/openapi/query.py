from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from routedoc.domain.errors import OperationNotFoundError, UnsupportedMethodError
from routedoc.openapi.document import DOCUMENT_METHODS, FOLDER_EXTENSION, NAME_EXTENSION


@dataclass(frozen=True)
class SearchHit:
    method: str
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    folder: Optional[str] = None
    operation_id: Optional[str] = None


@dataclass(frozen=True)
class LocatedOperation:
    path: str
    method: str
    operation: dict[str, Any]
    path_item: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def folder(self) -> Optional[str]:
        return _str_or_none(self.operation.get(FOLDER_EXTENSION))

    @property
    def name(self) -> Optional[str]:
        return _str_or_none(self.operation.get(NAME_EXTENSION))

    @property
    def operation_id(self) -> Optional[str]:
        return _str_or_none(self.operation.get("operationId"))

    def to_dict(self) -> dict[str, Any]:
        out = {
            "path": self.path,
            "method": self.method,
            "folder": self.folder,
            "name": self.name,
            "operationId": self.operation_id,
            "operation": self.operation,
        }
        return {k: v for k, v in out.items() if v is not None}


def _str_or_none(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None


def _iter_operations(document: Mapping[str, Any]):
    paths = document.get("paths") or {}
    for path_key, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in DOCUMENT_METHODS:
            op = path_item.get(method)
            if isinstance(op, dict):
                yield path_key, method, op, path_item


def normalize_method(method: str) -> str:
    m = (method or "").strip().lower()
    if m not in DOCUMENT_METHODS:
        raise UnsupportedMethodError(method)
    return m


def search_operations(
    document: Mapping[str, Any],
    keyword: str,
    max_results: int = 20,
) -> list[SearchHit]:
    """
    Case-insensitive substring search over path, summary, description,
    operationId, tags and the folder/name extensions.
    """
    q = (keyword or "").strip().lower()
    if not q or max_results < 1:
        return []

    hits: list[SearchHit] = []
    for path_key, method, op, _ in _iter_operations(document):
        tags = op.get("tags") if isinstance(op.get("tags"), list) else None
        haystack_parts = [
            path_key,
            op.get("summary"),
            op.get("description"),
            op.get("operationId"),
            *(tags or []),
            _str_or_none(op.get(FOLDER_EXTENSION)),
            _str_or_none(op.get(NAME_EXTENSION)),
        ]
        haystack = " | ".join(str(p) for p in haystack_parts if p).lower()
        if q not in haystack:
            continue

        hits.append(
            SearchHit(
                method=method,
                path=path_key,
                summary=op.get("summary"),
                description=op.get("description"),
                tags=tags,
                folder=_str_or_none(op.get(FOLDER_EXTENSION)),
                operation_id=op.get("operationId"),
            )
        )
        if len(hits) >= max_results:
            break
    return hits


def find_operation_by_id(document: Mapping[str, Any], operation_id: str) -> Optional[LocatedOperation]:
    target = (operation_id or "").strip()
    if not target:
        return None
    for path_key, method, op, path_item in _iter_operations(document):
        if op.get("operationId") == target:
            return LocatedOperation(path=path_key, method=method, operation=op, path_item=path_item)
    return None


def get_operation(document: Mapping[str, Any], path: str, method: str) -> LocatedOperation:
    m = normalize_method(method)
    paths = document.get("paths") or {}
    path_item = paths.get(path)
    if not isinstance(path_item, dict):
        raise OperationNotFoundError(f"Path not found in document: {path}")
    op = path_item.get(m)
    if not isinstance(op, dict):
        raise OperationNotFoundError(f"No {m.upper()} operation under {path}")
    return LocatedOperation(path=path, method=m, operation=op, path_item=path_item)


def get_request_schema(document: Mapping[str, Any], path: str, method: str) -> dict[str, Any]:
    """Request-side view of one operation: parameters (path-level first) and requestBody."""
    located = get_operation(document, path, method)
    op = located.operation
    parameters = list(located.path_item.get("parameters") or []) + list(op.get("parameters") or [])
    out = {
        "path": located.path,
        "method": located.method,
        "folder": located.folder,
        "name": located.name,
        "operationId": located.operation_id,
        "summary": op.get("summary"),
        "description": op.get("description"),
        "parameters": parameters,
        "requestBody": op.get("requestBody"),
    }
    return {k: v for k, v in out.items() if v is not None}


def hit_to_dict(hit: SearchHit) -> dict[str, Any]:
    d = asdict(hit)
    d["operationId"] = d.pop("operation_id")
    return {k: v for k, v in d.items() if v is not None}
