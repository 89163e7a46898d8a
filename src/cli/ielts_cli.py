"""
Typer CLI for the IELTS config service.

Commands:
    ielts-config init-db                     - Create catalog tables
    ielts-config seed                        - Insert the initial catalog version
    ielts-config versions                    - List catalog versions
    ielts-config show [--version N]          - Show the catalog of a version
    ielts-config options TYPE [--version N]  - Show a boolean option set
    ielts-config type-metadata [--version N] - Show type cards (with fallback reason)
    ielts-config readiness                   - Check the active version is complete
    ielts-config normalize FILE --type T     - Repair a persisted assignment config
    ielts-config serve                       - Run the API server

Usage:
    ielts-config --help
    ielts-config --database-url sqlite:///./ielts.db init-db
    ielts-config seed --version 2 --no-activate
    ielts-config normalize assignment.json --type listening --catalog
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings

app = typer.Typer(
    help="ielts-config: versioned IELTS assignment configuration catalog",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main_callback(
    database_url: Optional[str] = typer.Option(
        None, "--database-url", envvar="DATABASE_URL", help="Override the configured database URL"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging and the database engine for every command."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else get_settings().log_level,
        format="<level>{level: <8}</level> {message}",
    )
    if database_url:
        from src.db.database import configure_engine

        configure_engine(database_url)


def _run(coro: Any) -> Any:
    """Run a coroutine and release pooled connections afterwards."""
    from src.db.database import get_engine

    async def runner():
        try:
            return await coro
        finally:
            # Pooled connections belong to this event loop
            await get_engine().dispose()

    return asyncio.run(runner())


# ========================================
# DATABASE COMMANDS
# ========================================


@app.command("init-db")
def init_db_command() -> None:
    """
    Create catalog tables from the SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    from src.db.database import init_db

    _run(init_db())
    rprint("[green]✓[/green] Database initialized!")


@app.command("seed")
def seed_command(
    version: int = typer.Option(1, "--version", min=1, help="Catalog version number to create"),
    name: str = typer.Option("Initial", "--name", help="Version name"),
    activate: Optional[bool] = typer.Option(
        None, "--activate/--no-activate", help="Mark the new version active (default from settings)"
    ),
) -> None:
    """Insert a complete catalog version (skipped when it already exists)."""
    from src.db.database import async_session_scope, init_db
    from src.db.seed import seed_catalog

    should_activate = get_settings().ielts_seed_activate if activate is None else activate

    async def seed() -> bool:
        await init_db()
        async with async_session_scope() as session:
            return await seed_catalog(session, version=version, name=name, activate=should_activate)

    if _run(seed()):
        rprint(f"[green]✓[/green] Seeded IELTS catalog version {version} (active={should_activate})")
    else:
        rprint(f"[yellow]⚠[/yellow] Version {version} already exists; nothing written")


# ========================================
# CATALOG COMMANDS
# ========================================


@app.command("versions")
def versions_command() -> None:
    """List catalog versions, newest first."""
    from src.catalog.catalog_service import CatalogService

    listing = _run(CatalogService().list_versions())
    if not listing["versions"]:
        rprint("[yellow]⚠[/yellow] No IELTS config versions found (run [cyan]ielts-config seed[/cyan])")
        raise typer.Exit(code=1)

    table = Table(title="IELTS Config Versions", show_header=True)
    table.add_column("Version", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Active", justify="center")
    table.add_column("Activated", style="dim")
    table.add_column("Created", style="dim")

    for row in listing["versions"]:
        table.add_row(
            str(row["version"]),
            row["name"],
            "[green]●[/green]" if row["is_active"] else "",
            row["activated_at"].isoformat() if row["activated_at"] else "-",
            row["created_at"].isoformat() if row["created_at"] else "-",
        )

    console.print(table)


@app.command("show")
def show_command(
    version: Optional[int] = typer.Option(None, "--version", min=1, help="Catalog version (default: active)"),
) -> None:
    """Show the catalog of the active or requested version."""
    from src.catalog.catalog_service import CatalogService

    payload = _run(CatalogService().get_config(version))
    if payload is None:
        rprint(f"[red]✗[/red] IELTS config {'version ' + str(version) if version else '(active)'} not found")
        raise typer.Exit(code=1)

    rprint(f"\n[bold cyan]IELTS catalog v{payload['version']}[/bold cyan]\n")

    sections = [
        ("Assignment types", payload["assignment_types"]),
        ("Reading question types", payload["question_types"]["reading"]),
        ("Listening question types", payload["question_types"]["listening"]),
        ("Writing task 1 types", payload["writing_task_types"]["task1"]),
        ("Writing task 2 types", payload["writing_task_types"]["task2"]),
        ("Speaking parts", payload["speaking_part_types"]),
        ("Completion formats", payload["completion_formats"]),
        ("Sample timing options", payload["sample_timing_options"]),
    ]
    for title, rows in sections:
        table = Table(title=f"{title} ({len(rows)})", show_header=True)
        table.add_column("#", style="dim", justify="right")
        table.add_column("ID", style="cyan")
        table.add_column("Label")
        table.add_column("Enabled", justify="center")
        for row in rows:
            table.add_row(str(row["sort_order"]), row["id"], row["label"], "✓" if row["enabled"] else "✗")
        console.print(table)


@app.command("options")
def options_command(
    option_type: str = typer.Argument(..., help="true_false or yes_no"),
    version: Optional[int] = typer.Option(None, "--version", min=1),
) -> None:
    """Show the enabled values of a boolean option set."""
    from src.catalog.question_options_service import QuestionOptionsService, parse_option_type

    parsed = parse_option_type(option_type)
    if parsed is None:
        rprint(f"[red]✗[/red] Unknown option type '{option_type}' (use true_false or yes_no)")
        raise typer.Exit(code=2)

    payload = _run(QuestionOptionsService().fetch_boolean_options(parsed, version))
    if payload is None:
        rprint(f"[red]✗[/red] No {parsed.value} options for version {version or 'active'}")
        raise typer.Exit(code=1)

    table = Table(title=f"{parsed.value} options (v{payload['version']})", show_header=True)
    table.add_column("Value", style="cyan")
    table.add_column("Label")
    table.add_column("Score", justify="right")
    for option in payload["options"]:
        table.add_row(option["value"], option["label"], str(option["score"]))
    console.print(table)


@app.command("type-metadata")
def type_metadata_command(
    version: Optional[int] = typer.Option(None, "--version", min=1),
) -> None:
    """Show type cards; reports when the built-in fallback is served."""
    from src.catalog.type_metadata_service import TypeMetadataService

    result = _run(TypeMetadataService().resolve(version))
    if result.is_fallback:
        rprint(f"[yellow]⚠[/yellow] Serving built-in cards ({result.fallback_reason.value})")

    table = Table(title=f"IELTS type metadata (v{result.version})", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Icon")
    table.add_column("Theme", style="dim")
    for card in result.types:
        theme = card["theme"]
        table.add_row(
            card["id"],
            card["title"],
            card["icon"],
            f"{theme['color_from']} → {theme['color_to']} / {theme['border_color']}",
        )
    console.print(table)


@app.command("readiness")
def readiness_command() -> None:
    """Check the active catalog version carries every table authoring needs."""
    from src.catalog.catalog_service import CatalogService

    report = _run(CatalogService().readiness_report())

    table = Table(title="IELTS Config Readiness", show_header=True)
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in report["counts"].items():
        table.add_row(name, str(count) if count else f"[red]{count}[/red]")
    console.print(table)

    if report["ready"]:
        rprint(f"[bold green]✓ Ready[/bold green] (active version {report['active_version']})")
    else:
        rprint(f"[red]✗ Not ready:[/red] {report['reason']}")
        raise typer.Exit(code=1)


# ========================================
# CONFIG COMMANDS
# ========================================


@app.command("normalize")
def normalize_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file holding a persisted config"),
    assignment_type: str = typer.Option(..., "--type", "-t", help="reading | listening | writing | speaking"),
    use_catalog: bool = typer.Option(
        False, "--catalog", help="Use boolean option values from the active catalog"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result here"),
) -> None:
    """Repair a persisted assignment config and print the normalized JSON."""
    from src.ielts.normalizer import normalize_assignment_config

    raw = file.read_text(encoding="utf-8")

    boolean_options = None
    if use_catalog:
        from src.catalog.question_options_service import QuestionOptionsService

        boolean_options = _run(QuestionOptionsService().fetch_boolean_option_values())

    config = normalize_assignment_config(assignment_type, raw, boolean_options=boolean_options)
    rendered = json.dumps(config.to_dict(), indent=2, ensure_ascii=False)

    if output:
        output.write_text(rendered + "\n", encoding="utf-8")
        rprint(f"[green]✓[/green] Wrote normalized {config.type} config to {output}")
    else:
        console.print_json(rendered)


# ========================================
# SERVER
# ========================================


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    reload: bool = typer.Option(False, "--reload"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
