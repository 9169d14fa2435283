from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from routedoc.repo.globs import compile_patterns, should_prune_dir

logger = logging.getLogger(__name__)


def discover_files(cwd: Path, patterns: Iterable[str], ignore: Iterable[str] = ()) -> list[str]:
    """
    Return absolute paths (as strings) of files under cwd that match at least one
    include pattern and no ignore pattern.

    Output is de-duplicated and sorted by repo-relative POSIX path so first-seen
    semantics further down the pipeline do not depend on filesystem order.
    """
    cwd = Path(cwd).resolve()
    include_spec = compile_patterns(patterns)
    ignore_spec = compile_patterns(ignore)

    found: dict[str, str] = {}
    for root, dirs, files in _walk(cwd):
        root_p = Path(root)

        dirs[:] = [d for d in dirs if not should_prune_dir(root_p / d)]

        for f in files:
            abs_path = root_p / f
            rel = abs_path.relative_to(cwd).as_posix()
            if not include_spec.match_file(rel):
                continue
            if ignore_spec.match_file(rel):
                continue
            found.setdefault(rel, str(abs_path.resolve()))

    logger.debug("Discovered %d files under %s", len(found), cwd)
    return [found[rel] for rel in sorted(found)]


def _walk(cwd: Path):
    # Separate helper to make unit testing easier (can be mocked)
    return os.walk(cwd)
