"""``crashforge locate-objdump`` and ``crashforge generate-symbols``."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from crashforge.cli.commands._context import build_context, fail
from crashforge.core.errors import CrashforgeError
from crashforge.core.toolchain import ToolLocator
from crashforge.tasks.so_mapping import SoMappingTask

console = Console()


def parse_overrides(values: list[str] | None) -> dict[str, str] | None:
    """Turn ``ABI=PATH`` strings into a mapping."""
    if not values:
        return None
    overrides: dict[str, str] = {}
    for value in values:
        abi, sep, path = value.partition("=")
        if not sep or not abi or not path:
            raise typer.BadParameter(f"Expected ABI=PATH, got {value!r}")
        overrides[abi] = path
    return overrides


def locate_objdump_cmd(
    abi: str = typer.Argument(..., help="ABI name, e.g. arm64-v8a."),
    ndk_dir: Path = typer.Option(None, "--ndk-dir", help="NDK root directory."),
    objdump: list[str] = typer.Option(
        None, "--objdump", help="Override as ABI=PATH. Repeatable."
    ),
) -> None:
    """Print the objdump executable used for an ABI."""
    ctx = build_context(ndk_dir=ndk_dir, objdump_paths=parse_overrides(objdump))
    locator = ToolLocator(ctx.ndk_dir)
    try:
        path = locator.locate(abi, ctx.config.objdump_paths, ctx)
    except CrashforgeError as exc:
        raise fail(console, exc)
    console.print(str(path), soft_wrap=True)


def generate_symbols_cmd(
    search_dir: Path = typer.Argument(
        ..., help="Directory containing <abi>/*.so shared objects."
    ),
    output_dir: Path = typer.Option(
        None, "--output", "-o", help="Output directory for symbol files."
    ),
    ndk_dir: Path = typer.Option(None, "--ndk-dir", help="NDK root directory."),
    objdump: list[str] = typer.Option(
        None, "--objdump", help="Override as ABI=PATH. Repeatable."
    ),
    build_dir: Path = typer.Option(
        None, "--build-dir", "-b", help="Build output directory."
    ),
) -> None:
    """Generate gzip-compressed objdump symbol files for every shared object."""
    ctx = build_context(
        ndk_dir=ndk_dir,
        objdump_paths=parse_overrides(objdump),
        build_dir=build_dir,
    )
    try:
        result = SoMappingTask(search_dir, output_dir=output_dir).run_task(ctx)
    except CrashforgeError as exc:
        raise fail(console, exc)

    lines = [f"[green]+[/green] {path}" for path in result["generated"]]
    lines += [f"[red]x[/red] {name}" for name in result["failed"]]
    if not lines:
        lines = ["[dim]No shared objects found.[/dim]"]
    border = "red" if result["failed"] else "green"
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Symbol Files[/bold]",
            subtitle=result["output_dir"],
            border_style=border,
            padding=(1, 2),
        )
    )
    if result["failed"]:
        raise typer.Exit(code=1)
