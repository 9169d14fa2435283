from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from routedoc.domain.models import Route
from routedoc.extractors.typescript.parser import SourceTree


@dataclass(frozen=True)
class FileContext:
    """Where a parsed file sits relative to the scan root."""

    scan_root: Path
    path: Path

    @property
    def rel_path(self) -> str:
        return Path(os.path.relpath(str(self.path), str(self.scan_root))).as_posix()

    @property
    def folder(self) -> Optional[str]:
        rel_dir = Path(os.path.relpath(str(self.path.parent), str(self.scan_root))).as_posix()
        return None if rel_dir in ("", ".") else rel_dir

    @property
    def folder_name(self) -> Optional[str]:
        # directory immediately containing the file; None at the scan root
        if self.folder is None:
            return None
        return self.path.parent.name


class RouteExtractor(Protocol):
    name: str

    def extract(self, tree: SourceTree, ctx: FileContext) -> list[Route]:
        ...
