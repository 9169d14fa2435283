from __future__ import annotations

from pathlib import Path


class RoutedocError(Exception):
    """Base class for everything routedoc raises on purpose."""


class SourceParseError(RoutedocError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not parse {path}: {reason}")
        self.path = path
        self.reason = reason


class NoRoutesFoundError(RoutedocError):
    """A full scan finished without a single route; usually a pattern mismatch."""

    def __init__(self, cwd: Path, patterns: list[str], files_scanned: int):
        super().__init__(
            f"No controller or router routes found under {cwd} "
            f"({files_scanned} files matched); check the include patterns."
        )
        self.cwd = cwd
        self.patterns = patterns
        self.files_scanned = files_scanned


class DocumentLoadError(RoutedocError):
    pass


class OperationNotFoundError(RoutedocError):
    pass


class UnsupportedMethodError(RoutedocError):
    def __init__(self, method: str):
        super().__init__(
            f"Unsupported HTTP method: {method} (use GET/POST/PUT/DELETE/PATCH/OPTIONS/HEAD)"
        )
        self.method = method
