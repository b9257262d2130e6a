"""``crashforge manifest-info`` and ``crashforge inject-build-uuid``."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from crashforge.cli.commands._context import build_context, fail
from crashforge.core.errors import CrashforgeError
from crashforge.core.manifest_parser import ManifestParser
from crashforge.tasks.manifest_uuid import ManifestUuidTask

console = Console()


def manifest_info_cmd(
    manifest: Path = typer.Argument(..., help="Path to AndroidManifest.xml."),
) -> None:
    """Show the API key, version and build UUID a manifest resolves to."""
    ctx = build_context()
    try:
        info = ManifestParser().read_manifest(manifest, ctx)
    except CrashforgeError as exc:
        raise fail(console, exc)

    table = Table(title=str(manifest), show_header=True, header_style="bold cyan")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("API key", info.api_key)
    table.add_row("Version code", info.version_code)
    table.add_row("Version name", info.version_name)
    table.add_row("Build UUID", info.build_uuid)
    console.print(table)


def inject_build_uuid_cmd(
    manifest: Path = typer.Argument(..., help="Path to AndroidManifest.xml."),
    build_uuid: str = typer.Option(
        None,
        "--uuid",
        help="Build UUID to inject. A random UUID is generated if omitted.",
    ),
    info_file: Path = typer.Option(
        None,
        "--info-file",
        help="Where to write the manifest info JSON.",
    ),
    build_dir: Path = typer.Option(
        None, "--build-dir", "-b", help="Build output directory."
    ),
) -> None:
    """Add a build UUID to the manifest (if absent) and export its metadata."""
    ctx = build_context(build_dir=build_dir)
    task = ManifestUuidTask(manifest, build_uuid=build_uuid, manifest_info_file=info_file)
    try:
        result = task.run_task(ctx)
    except CrashforgeError as exc:
        raise fail(console, exc)

    if result["uuid_written"]:
        console.print(f"[green]Wrote build UUID[/green] {result['build_uuid']}")
    else:
        console.print(
            f"[yellow]Manifest already has build UUID[/yellow] {result['build_uuid']}"
        )
    console.print(f"[dim]Manifest info: {result['manifest_info_file']}[/dim]")
