"""Error taxonomy.

Low-level failures (XML syntax errors, missing files, spawn errors) are
converted into these at component boundaries so callers get a message
saying what was expected and where it was looked for.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class CrashforgeError(RuntimeError):
    """Base class for all crashforge failures."""


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class ManifestError(CrashforgeError):
    """The application manifest could not be used."""


class ManifestParseError(ManifestError):
    """The manifest is missing, malformed, or lacks an application element."""


class MissingMetadataError(ManifestError):
    """One or more required manifest fields could not be resolved."""

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields: tuple[str, ...] = tuple(missing_fields)
        super().__init__(
            "Missing "
            + "/".join(self.missing_fields)
            + ", required to upload crash reporting artifacts."
        )


# ---------------------------------------------------------------------------
# External tools
# ---------------------------------------------------------------------------


class ToolError(CrashforgeError):
    """An external tool could not be located or run successfully."""


class ToolNotFoundError(ToolError):
    """No executable tool at the resolved location."""

    def __init__(self, architecture: str, path: Path | None, reason: str = "") -> None:
        self.architecture = architecture
        self.path = path
        detail = reason or f"Failed to find executable at {path}"
        super().__init__(f"[{architecture}] {detail}")


class UnsupportedHostError(ToolError):
    """The host operating system family has no NDK prebuilt directory."""

    def __init__(self, system: str) -> None:
        self.system = system
        super().__init__(f"Failed to calculate OS name for host {system!r}")


class SubprocessFailure(ToolError):
    """An external tool exited with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        exit_code: int | None,
        error_log: Path | None = None,
        stderr: str = "",
    ) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.error_log = error_log
        self.stderr = stderr
        msg = f"{Path(self.command[0]).name} failed. Exit code={exit_code}"
        if error_log is not None:
            msg += f", see {error_log} for more details"
        elif stderr:
            msg += f", msg={stderr.strip()}"
        super().__init__(msg + ".")


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TaskExecutionError(CrashforgeError):
    """Raised when a task's execute() fails with an unexpected exception."""
