"""Crashforge CLI — Typer-based command-line interface.

Provides the ``crashforge`` command with subcommands for reading and
stamping manifests, generating NDK symbol files and uploading React
Native source maps.

All output uses Rich for formatted terminal display.
"""
