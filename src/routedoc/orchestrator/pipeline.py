from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from routedoc.domain.errors import NoRoutesFoundError, SourceParseError
from routedoc.domain.models import BuildOptions, Route, ScanOptions
from routedoc.extractors.base import FileContext, RouteExtractor
from routedoc.extractors.typescript.annotations import AnnotationRouteExtractor
from routedoc.extractors.typescript.call_chain import CallChainRouteExtractor
from routedoc.extractors.typescript.parser import parse_file
from routedoc.openapi.builder import build_openapi_from_routes
from routedoc.openapi.document import ApiDocument
from routedoc.repo.scanner import discover_files
from routedoc.routes.normalize import deduplicate_routes

logger = logging.getLogger(__name__)

DEFAULT_EXTRACTORS: tuple[RouteExtractor, ...] = (
    AnnotationRouteExtractor(),
    CallChainRouteExtractor(),
)


@dataclass(frozen=True)
class ScanResult:
    cwd: Path
    files: list[str]
    skipped_files: list[str]
    routes: list[Route]          # de-duplicated
    raw_route_count: int


@dataclass(frozen=True)
class GenerateResult:
    scan: ScanResult
    document: ApiDocument

    @property
    def operation_count(self) -> int:
        return self.document.operation_count()


def extract_routes_from_file(
    path: Path,
    scan_root: Path,
    extractors: Sequence[RouteExtractor] = DEFAULT_EXTRACTORS,
) -> list[Route]:
    """Parse one file and run every extractor over it; results are concatenated."""
    tree = parse_file(path)
    ctx = FileContext(scan_root=scan_root, path=path)
    routes: list[Route] = []
    for extractor in extractors:
        found = extractor.extract(tree, ctx)
        logger.debug("%s: %d %s route(s)", ctx.rel_path, len(found), extractor.name)
        routes.extend(found)
    return routes


def scan_routes(
    options: ScanOptions,
    extractors: Sequence[RouteExtractor] = DEFAULT_EXTRACTORS,
) -> ScanResult:
    cwd = options.cwd
    files = discover_files(cwd, options.patterns, options.ignore)

    def work(p: str) -> Optional[list[Route]]:
        try:
            return extract_routes_from_file(Path(p), cwd, extractors)
        except SourceParseError as e:
            logger.warning("Skipping %s: %s", e.path, e.reason)
            return None

    # map() keeps discovery order, so the merge below is deterministic
    with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
        per_file = list(pool.map(work, files))

    merged: list[Route] = []
    skipped: list[str] = []
    for p, routes in zip(files, per_file):
        if routes is None:
            skipped.append(p)
            continue
        merged.extend(routes)

    routes = deduplicate_routes(merged)
    logger.info(
        "Scanned %d file(s) under %s: %d route(s), %d after de-duplication, %d file(s) skipped",
        len(files), cwd, len(merged), len(routes), len(skipped),
    )
    return ScanResult(
        cwd=cwd,
        files=files,
        skipped_files=skipped,
        routes=routes,
        raw_route_count=len(merged),
    )


def run_generate(scan_options: ScanOptions, build_options: BuildOptions) -> GenerateResult:
    """Scan, then synthesize. An empty scan is reported, not documented."""
    scan = scan_routes(scan_options)
    if not scan.routes:
        raise NoRoutesFoundError(scan.cwd, scan_options.patterns, len(scan.files))

    document = build_openapi_from_routes(scan.routes, build_options)
    return GenerateResult(scan=scan, document=document)
