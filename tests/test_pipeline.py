import logging
import textwrap
from pathlib import Path

import pytest

from routedoc.domain.errors import NoRoutesFoundError
from routedoc.domain.models import BuildOptions, ScanOptions
from routedoc.openapi.io import dump_document
from routedoc.orchestrator.pipeline import run_generate, scan_routes


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


def make_project(root: Path) -> None:
    write(
        root / "src" / "users" / "users.controller.ts",
        """\
        import { Controller, Get } from '@nestjs/common';

        @Controller('users')
        export class usersController {
          /**
           * 获取用户列表
           */
          @Get('/')
          findAll() {
            return [];
          }
        }
        """,
    )
    write(
        root / "src" / "routes" / "health.router.ts",
        """\
        import { Router } from 'express';
        const router = Router();
        router.get('/health', (_req, res) => res.send('ok'));
        export default router;
        """,
    )


def test_scan_finds_both_conventions(tmp_path: Path):
    make_project(tmp_path)
    result = scan_routes(ScanOptions(cwd=tmp_path))

    by_path = {r.path: r for r in result.routes}
    assert set(by_path) == {"/users", "/health"}

    users = by_path["/users"]
    assert (users.method, users.summary, users.tag, users.origin) == ("get", "获取用户列表", "users", "annotation")

    health = by_path["/health"]
    assert (health.method, health.tag, health.origin) == ("get", "routes", "call-chain")
    assert health.source_file == "src/routes/health.router.ts"
    assert result.skipped_files == []


def test_generate_document_with_both_paths(tmp_path: Path):
    make_project(tmp_path)
    result = run_generate(
        ScanOptions(cwd=tmp_path, patterns=["src/**/*.controller.ts", "src/routes/**/*.ts"]),
        BuildOptions(title="Test APIs", version="0.0.1"),
    )
    doc = result.document

    assert doc.info.title == "Test APIs"
    assert set(doc.paths) == {"/users", "/health"}
    assert set(doc.paths["/users"]) == {"get"}
    assert set(doc.paths["/health"]) == {"get"}
    assert doc.paths["/users"]["get"].operation_id == "users_get_users"
    assert doc.paths["/health"]["get"].folder == "src / routes"
    # discovery order is by relative path, so the routes folder comes first
    assert [t.name for t in doc.tags] == ["routes", "users"]
    assert result.operation_count == len(result.scan.routes) == 2


def test_duplicates_across_files_keep_first_in_path_order(tmp_path: Path):
    write(tmp_path / "src" / "routes" / "a.ts", "router.get('/dup', h);\n")
    write(tmp_path / "src" / "routes" / "b.ts", "\n\nrouter.get('/dup', h);\n")

    for _ in range(3):
        result = scan_routes(ScanOptions(cwd=tmp_path, max_workers=4))
        assert result.raw_route_count == 2
        assert len(result.routes) == 1
        assert result.routes[0].source_file == "src/routes/a.ts"


def test_unreadable_file_is_skipped(tmp_path: Path, caplog):
    make_project(tmp_path)
    bad = tmp_path / "src" / "routes" / "broken.ts"
    bad.write_bytes(b"router.get('/x', h); \xff\xfe\xfa")

    with caplog.at_level(logging.WARNING, logger="routedoc"):
        result = scan_routes(ScanOptions(cwd=tmp_path))

    assert [Path(p).name for p in result.skipped_files] == ["broken.ts"]
    assert {r.path for r in result.routes} == {"/users", "/health"}
    assert any("broken.ts" in rec.getMessage() for rec in caplog.records)


def test_syntax_errors_do_not_abort_the_file(tmp_path: Path):
    write(
        tmp_path / "src" / "routes" / "messy.ts",
        """\
        router.get('/before', h);
        const = = ;
        router.post('/after', h);
        """,
    )
    result = scan_routes(ScanOptions(cwd=tmp_path))
    assert "/before" in {r.path for r in result.routes}


def test_empty_scan_is_reported(tmp_path: Path):
    write(tmp_path / "src" / "users" / "users.service.ts", "export class UsersService {}\n")
    with pytest.raises(NoRoutesFoundError) as exc:
        run_generate(ScanOptions(cwd=tmp_path), BuildOptions(title="T"))
    assert exc.value.files_scanned == 0


def test_bad_escape_in_one_file_does_not_abort_the_scan(tmp_path: Path):
    write(tmp_path / "src" / "routes" / "good.ts", "router.get('/ok', h);\n")
    write(tmp_path / "src" / "routes" / "zbad.ts", "router.get('/x\\u{110000}', h);\n")
    write(tmp_path / "src" / "routes" / "smile.ts", "router.get('/\\uD83D\\uDE00', h);\n")

    result = run_generate(ScanOptions(cwd=tmp_path), BuildOptions())

    assert {r.path for r in result.scan.routes} == {"/ok", "/😀"}
    assert result.scan.skipped_files == []
    dump_document(result.document, "json").encode("utf-8")
