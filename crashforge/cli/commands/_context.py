"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from crashforge.config import PluginConfig
from crashforge.core.errors import CrashforgeError
from crashforge.models.context import BuildContext


def build_context(**overrides: Any) -> BuildContext:
    """A BuildContext from env config plus non-``None`` CLI overrides."""
    config = PluginConfig()
    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        config = config.model_copy(update=updates)
    return BuildContext(config=config)


def fail(console: Console, exc: CrashforgeError) -> typer.Exit:
    """Print *exc* and return the exit to raise."""
    console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)
