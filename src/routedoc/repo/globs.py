from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import pathspec

# never descended into, whatever the ignore patterns say
PRUNED_DIRS = frozenset(
    {
        ".git",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".next",
        ".turbo",
        ".cache",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
    }
)

_BRACE = re.compile(r"\{([^{}]*)\}")


def should_prune_dir(dir_path: Path) -> bool:
    return dir_path.name in PRUNED_DIRS


def expand_braces(pattern: str) -> list[str]:
    """
    Expand shell-style alternatives:
      "src/**/*.{ts,js}" -> ["src/**/*.ts", "src/**/*.js"]
    A brace group without a comma is left alone.
    """
    m = None
    for candidate in _BRACE.finditer(pattern):
        if "," in candidate.group(1):
            m = candidate
            break
    if m is None:
        return [pattern]

    out: list[str] = []
    head, tail = pattern[: m.start()], pattern[m.end():]
    for alt in m.group(1).split(","):
        for expanded in expand_braces(head + alt + tail):
            if expanded not in out:
                out.append(expanded)
    return out


def compile_patterns(patterns: Iterable[str]) -> pathspec.PathSpec:
    """
    Glob matcher over repo-relative POSIX paths (`**` spans directories).

    Every line is anchored at the scan root, so `*.ts` only matches files in
    the root itself and a leading `!` is literal, never a negation.
    """
    lines: list[str] = []
    for p in patterns:
        p = (p or "").strip().replace("\\", "/")
        if p.startswith("./"):
            p = p[2:]
        if not p:
            continue
        lines.extend(_anchor(e) for e in expand_braces(p))
    return pathspec.GitIgnoreSpec.from_lines(lines)


def _anchor(pattern: str) -> str:
    if pattern.startswith(("/", "**/")) or pattern == "**":
        return pattern
    return "/" + pattern
