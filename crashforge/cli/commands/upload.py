"""``crashforge upload-source-map`` — upload a React Native source map."""

from __future__ import annotations

import shlex
from pathlib import Path

import typer
from rich.console import Console

from crashforge.cli.commands._context import build_context, fail
from crashforge.core.errors import CrashforgeError
from crashforge.core.source_map_upload import find_react_native_task_arg
from crashforge.tasks.upload_source_map import HostCapabilities, create_upload_task

console = Console()


def upload_source_map_cmd(
    output_file: Path = typer.Option(
        ..., "--result", "-r", help="Status file that receives success/failure."
    ),
    source_map: Path = typer.Option(None, "--source-map", help="Source map file."),
    bundle: Path = typer.Option(None, "--bundle", help="JS bundle file."),
    bundle_args: str = typer.Option(
        None,
        "--bundle-args",
        help="React Native bundle command line to take "
        "--bundle-output/--sourcemap-output from.",
    ),
    project_root: Path = typer.Option(
        Path("."), "--project-root", help="React Native project root."
    ),
    info_file: Path = typer.Option(
        None, "--info-file", help="Manifest info JSON from inject-build-uuid."
    ),
    executable: Path = typer.Option(
        None, "--executable", help="Path to the bugsnag-source-maps CLI."
    ),
    endpoint: str = typer.Option(None, "--endpoint", help="Upload endpoint."),
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Replace existing source maps."
    ),
    dev: bool = typer.Option(False, "--dev", help="Upload a dev build."),
    ignore_upload_error: bool = typer.Option(
        False,
        "--ignore-upload-error",
        help="Log a failed upload instead of failing the build.",
    ),
    legacy: bool = typer.Option(
        False, "--legacy", help="Pass the project root as a single path."
    ),
    build_dir: Path = typer.Option(
        None, "--build-dir", "-b", help="Build output directory."
    ),
) -> None:
    """Upload a React Native source map and bundle."""
    if bundle_args:
        args = shlex.split(bundle_args)
        bundle = bundle or _optional_path(find_react_native_task_arg(args, "--bundle-output"))
        source_map = source_map or _optional_path(
            find_react_native_task_arg(args, "--sourcemap-output")
        )
    if source_map is None or bundle is None:
        raise typer.BadParameter(
            "--source-map and --bundle are required (directly or via --bundle-args)."
        )

    ctx = build_context(
        source_maps_executable=executable,
        endpoint=endpoint,
        overwrite=overwrite or None,
        dev_enabled=dev or None,
        fail_on_upload_error=False if ignore_upload_error else None,
        build_dir=build_dir,
    )
    task = create_upload_task(
        HostCapabilities(file_collections=not legacy),
        project_root,
        source_map=source_map,
        bundle=bundle,
        output_file=output_file,
        manifest_info_file=info_file,
    )
    try:
        result = task.run_task(ctx)
    except CrashforgeError as exc:
        raise fail(console, exc)

    if result["uploaded"]:
        console.print("[bold green]Source map uploaded.[/bold green]")
    else:
        console.print("[bold yellow]Source map upload failed (ignored).[/bold yellow]")


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None
