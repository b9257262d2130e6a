"""React Native source map upload via the ``bugsnag-source-maps`` CLI.

Builds an ``upload-react-native`` command line from manifest metadata,
runs it synchronously and records ``success`` or ``failure`` in a
status file that later build steps read.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from crashforge.core.errors import SubprocessFailure, ToolNotFoundError
from crashforge.models.context import BuildContext
from crashforge.models.upload import UploadRequest

RESULT_SUCCESS = "success"
RESULT_FAILURE = "failure"


def build_upload_command(request: UploadRequest) -> list[str]:
    """Argument list for ``<cli> upload-react-native``."""
    info = request.manifest_info
    cmd = [
        str(request.executable.absolute()),
        "upload-react-native",
        "--api-key",
        info.api_key,
        "--app-version",
        info.version_name,
        "--app-version-code",
        info.version_code,
        "--platform",
        "android",
        "--source-map",
        str(request.source_map.absolute()),
        "--bundle",
        str(request.bundle.absolute()),
        "--endpoint",
        request.endpoint,
        "--project-root",
        str(request.project_root.absolute()),
    ]
    if request.overwrite:
        cmd.append("--overwrite")
    if request.dev_enabled:
        cmd.append("--dev")
    return cmd


def find_react_native_task_arg(args: Sequence[str], key: str) -> str | None:
    """Value following *key* in a React Native bundle command line.

    >>> find_react_native_task_arg(["--bundle-output", "out.js"], "--bundle-output")
    'out.js'
    """
    try:
        index = list(args).index(key)
    except ValueError:
        return None
    if index + 1 < len(args):
        return args[index + 1]
    return None


def error_log_path(output_file: Path) -> Path:
    """``<output stem>.error.txt`` next to the status file."""
    return output_file.with_name(f"{output_file.stem}.error.txt")


class SourceMapUploader:
    """Runs source map uploads and writes their status files."""

    def upload(self, request: UploadRequest, ctx: BuildContext) -> bool:
        """Upload one source map.  Returns ``True`` on success.

        Raises ``ToolNotFoundError`` before spawning when the CLI is
        missing and ``fail_on_upload_error`` is set, and
        ``SubprocessFailure`` for a failed upload under the same flag.
        """
        logger = ctx.logger
        executable = request.executable
        if not executable.exists() and request.fail_on_upload_error:
            err = ToolNotFoundError(
                "source-maps",
                executable,
                "source map upload failed. Please ensure that "
                f"bugsnag-source-maps is installed at {executable}.",
            )
            logger.error("crashforge: %s", err)
            raise err

        command = build_upload_command(request)
        logger.info("crashforge: uploading react native sourcemap: %s", command)

        exit_code: int | None
        try:
            completed = subprocess.run(
                command, capture_output=True, text=True, errors="replace"
            )
        except OSError as exc:
            exit_code, stdout, stderr = None, "", str(exc)
        else:
            exit_code = completed.returncode
            stdout, stderr = completed.stdout, completed.stderr

        if stdout:
            logger.info("crashforge: uploaded react native sourcemap: %s", stdout.strip())

        succeeded = exit_code == 0
        output_file = request.output_file
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(
            RESULT_SUCCESS if succeeded else RESULT_FAILURE, encoding="utf-8"
        )
        if succeeded:
            return True

        error_log = error_log_path(output_file)
        error_log.write_text(stderr, encoding="utf-8")
        failure = SubprocessFailure(command, exit_code, stderr=stderr)
        logger.error("crashforge: source map upload failed: %s", failure)
        if request.fail_on_upload_error:
            raise failure
        return False
