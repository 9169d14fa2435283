from __future__ import annotations

import re
from typing import Iterable, Optional

from routedoc.domain.models import Route

_MULTI_SLASH = re.compile(r"/{2,}")


def normalize_path(*fragments: Optional[str]) -> str:
    """
    Combine path fragments (base first) into one canonical absolute path.

      ("users", "/")        -> "/users"
      ("/api/", "\\v1//x")  -> "/api/v1/x"
      ("", "")              -> "/"

    Trimmed, empty fragments dropped, backslashes turned into slashes, slash
    runs collapsed, exactly one leading slash, no trailing slash unless the
    whole path is "/". Pure; safe to call on its own output.
    """
    parts = [f.strip() for f in fragments if f is not None and f.strip()]
    if not parts:
        return "/"

    p = "/".join(parts).replace("\\", "/")
    p = _MULTI_SLASH.sub("/", p)
    if not p.startswith("/"):
        p = "/" + p

    # keep "/" as-is, otherwise strip trailing slash for stability
    if p != "/" and p.endswith("/"):
        p = p[:-1]
    return p


def deduplicate_routes(routes: Iterable[Route]) -> list[Route]:
    """
    One route per (method, path, tag); the first one seen wins.
    Order of first appearance is preserved.
    """
    seen: dict[str, Route] = {}
    for r in routes:
        if r.dedup_key not in seen:
            seen[r.dedup_key] = r
    return list(seen.values())


def sort_routes(routes: Iterable[Route]) -> list[Route]:
    # explicit (file, line) order for callers that merged results out of order
    return sorted(routes, key=lambda r: (r.source_file, r.line, r.method, r.path))
