from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from routedoc.domain.errors import NoRoutesFoundError, RoutedocError
from routedoc.domain.models import BuildOptions, ScanOptions
from routedoc.log import configure_logging
from routedoc.openapi.cache import DocumentCache
from routedoc.openapi.io import FORMATS, dump_document, load_document
from routedoc.openapi.query import (
    find_operation_by_id,
    get_operation,
    get_request_schema,
    hit_to_dict,
    search_operations,
)
from routedoc.orchestrator.pipeline import run_generate, scan_routes


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _resolve_root(root: Optional[str]) -> Path:
    repo_path = Path(root or ".").expanduser().resolve()
    if not repo_path.exists():
        raise typer.BadParameter(f"Project root does not exist: {repo_path}")
    if not repo_path.is_dir():
        raise typer.BadParameter(f"Project root is not a directory: {repo_path}")
    return repo_path


def _fail(message: str) -> None:
    err_console.print(f"[bold red]error:[/bold red] {message}", highlight=False)
    raise typer.Exit(code=1)


def _load(ctx: typer.Context, doc: str) -> dict:
    path = Path(doc).expanduser().resolve()
    cache: DocumentCache = ctx.ensure_object(DocumentCache)
    return cache.load(str(path), lambda: load_document(path))


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="ROUTEDOC_LOG_LEVEL", help="DEBUG/INFO/WARNING/ERROR"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Shortcut for --log-level DEBUG"),
) -> None:
    configure_logging("DEBUG" if verbose else log_level)
    ctx.ensure_object(DocumentCache)


@app.command()
def scan(
    root: Optional[str] = typer.Argument(
        None, envvar="ROUTEDOC_PROJECT_ROOT", help="Project root (default: current directory)"
    ),
    pattern: Optional[list[str]] = typer.Option(
        None, "--pattern", "-p", help="Include glob (repeatable); replaces the defaults"
    ),
    ignore: Optional[list[str]] = typer.Option(
        None, "--ignore", "-i", help="Ignore glob (repeatable); replaces the defaults"
    ),
    limit: int = typer.Option(200, help="Max rows to print"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    repo_path = _resolve_root(root)
    result = scan_routes(ScanOptions(cwd=repo_path, patterns=pattern or None, ignore=ignore or None))

    if format.lower() == "json":
        rows = [
            {
                "method": r.method,
                "path": r.path,
                "summary": r.summary,
                "tag": r.tag,
                "sourceFile": r.source_file,
                "line": r.line,
                "folder": r.folder,
                "origin": r.origin,
            }
            for r in result.routes[:limit]
        ]
        typer.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    console.print(f"[bold green]routedoc[/bold green] scan: {repo_path}")
    console.print(f"Files scanned: {len(result.files)} (skipped: {len(result.skipped_files)})")
    console.print(f"Routes found: [bold]{len(result.routes)}[/bold] (showing up to {limit})")

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("PATH")
    table.add_column("TAG")
    table.add_column("FILE:LINE", no_wrap=True)
    table.add_column("ORIGIN", no_wrap=True)

    for r in result.routes[:limit]:
        table.add_row(
            r.method.upper(),
            r.path,
            r.tag or "",
            f"{r.source_file}:{r.line}",
            r.origin,
        )

    console.print(table)


@app.command()
def generate(
    root: Optional[str] = typer.Argument(
        None, envvar="ROUTEDOC_PROJECT_ROOT", help="Project root (default: current directory)"
    ),
    title: str = typer.Option("Auto Generated APIs", envvar="ROUTEDOC_TITLE", help="info.title"),
    doc_version: str = typer.Option("1.0.0", "--version", envvar="ROUTEDOC_VERSION", help="info.version"),
    description: Optional[str] = typer.Option(
        None, envvar="ROUTEDOC_DESCRIPTION", help="info.description"
    ),
    server_url: Optional[str] = typer.Option(None, envvar="ROUTEDOC_SERVER_URL", help="servers[0].url"),
    pattern: Optional[list[str]] = typer.Option(
        None, "--pattern", "-p", help="Include glob (repeatable); replaces the defaults"
    ),
    ignore: Optional[list[str]] = typer.Option(
        None, "--ignore", "-i", help="Ignore glob (repeatable); replaces the defaults"
    ),
    format: str = typer.Option("json", help="Output format: json|yaml"),
    out: Optional[str] = typer.Option(None, help="Output path (default: print to stdout)"),
) -> None:
    repo_path = _resolve_root(root)
    fmt = format.lower().strip()
    if fmt not in FORMATS:
        raise typer.BadParameter(f"format must be one of: {', '.join(FORMATS)}")

    try:
        result = run_generate(
            ScanOptions(cwd=repo_path, patterns=pattern or None, ignore=ignore or None),
            BuildOptions(
                title=title,
                version=doc_version,
                description=description,
                server_url=server_url,
            ),
        )
    except NoRoutesFoundError as e:
        _fail(str(e))
        return

    text = dump_document(result.document, fmt)
    summary = (
        f"Generated {result.operation_count} operation(s) from "
        f"{len(result.scan.routes)} route(s) in {len(result.scan.files)} file(s)"
    )

    if out:
        out_path = Path(out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        console.print(f"[bold green]Wrote[/bold green] {fmt} document to: {out_path}")
        console.print(summary)
    else:
        err_console.print(summary)
        typer.echo(text)


@app.command()
def search(
    ctx: typer.Context,
    doc: str = typer.Argument(..., help="OpenAPI document (JSON or YAML)"),
    keyword: str = typer.Argument(..., help="Matched against path, summary, tags, operationId, folder"),
    max_results: int = typer.Option(20, min=1, max=100, help="Max hits"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    if not keyword.strip():
        raise typer.BadParameter("keyword must not be empty")
    try:
        document = _load(ctx, doc)
    except RoutedocError as e:
        _fail(str(e))
        return

    hits = search_operations(document, keyword, max_results=max_results)

    if format.lower() == "json":
        typer.echo(json.dumps([hit_to_dict(h) for h in hits], indent=2, ensure_ascii=False))
        return

    if not hits:
        console.print(f"No operations matching '{keyword}'.")
        return

    console.print(f"{len(hits)} operation(s) matching '{keyword}' (max {max_results}):")
    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("PATH")
    table.add_column("SUMMARY")
    table.add_column("OPERATION ID", no_wrap=True)
    for h in hits:
        table.add_row(h.method.upper(), h.path, h.summary or "", h.operation_id or "")
    console.print(table)


@app.command()
def operation(
    ctx: typer.Context,
    doc: str = typer.Argument(..., help="OpenAPI document (JSON or YAML)"),
    operation_id: Optional[str] = typer.Option(None, "--id", help="operationId to look up"),
    path: Optional[str] = typer.Option(None, help="Path, e.g. /users/{id}"),
    method: Optional[str] = typer.Option(None, help="HTTP method (case-insensitive)"),
    request_only: bool = typer.Option(False, help="Only print parameters + requestBody"),
) -> None:
    if operation_id is None and (path is None or method is None):
        raise typer.BadParameter("pass --id, or both --path and --method")

    try:
        document = _load(ctx, doc)

        if operation_id is not None:
            located = find_operation_by_id(document, operation_id)
            if located is None:
                _fail(f"No operation with operationId {operation_id}")
                return
        else:
            located = get_operation(document, path, method)

        payload = (
            get_request_schema(document, located.path, located.method)
            if request_only
            else located.to_dict()
        )
    except RoutedocError as e:
        _fail(str(e))
        return

    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
