"""Main Typer application — imports and registers all CLI commands.

Entry point: ``crashforge`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from crashforge.cli.commands.manifest import inject_build_uuid_cmd, manifest_info_cmd
from crashforge.cli.commands.symbols import generate_symbols_cmd, locate_objdump_cmd
from crashforge.cli.commands.upload import upload_source_map_cmd
from crashforge.config import PluginConfig, configure_logging

app = typer.Typer(
    name="crashforge",
    help="Crashforge: crash-reporting symbol and source map tooling for Android builds.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default: CRASHFORGE_LOG_LEVEL or INFO)."
    ),
) -> None:
    configure_logging(log_level or PluginConfig().log_level)


# Register subcommands
app.command(name="manifest-info", help="Show metadata read from a manifest.")(manifest_info_cmd)
app.command(name="inject-build-uuid", help="Add a build UUID to a manifest.")(inject_build_uuid_cmd)
app.command(name="locate-objdump", help="Print the objdump used for an ABI.")(locate_objdump_cmd)
app.command(name="generate-symbols", help="Generate NDK symbol files.")(generate_symbols_cmd)
app.command(name="upload-source-map", help="Upload a React Native source map.")(upload_source_map_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
