"""Generates symbol mapping files for native shared objects.

objdump's DWARF dump is streamed through gzip straight into
``<output_dir>/<abi>/<name>.so.gz`` so large dumps never sit in memory.
stderr goes to ``<output_dir>/<abi>/<name>.so.error.txt``.
"""

from __future__ import annotations

import gzip
import shutil
import subprocess
from pathlib import Path

from crashforge.core.errors import SubprocessFailure
from crashforge.core.toolchain import ToolLocator
from crashforge.models.context import BuildContext
from crashforge.models.toolchain import Abi, ToolInvocationParams

OBJDUMP_FLAGS = ("--dwarf=info", "--dwarf=rawline")


def dump_symbols(
    executable: Path, shared_object: Path, arch_dir: Path, ctx: BuildContext
) -> Path:
    """Run objdump on *shared_object* and gzip its stdout into *arch_dir*.

    Returns the gzip file.  Raises ``SubprocessFailure`` on a non-zero
    exit; the partially written output is left in place.
    """
    output_name = shared_object.name
    output_file = arch_dir / f"{output_name}.gz"
    error_file = arch_dir / f"{output_name}.error.txt"
    command = [str(executable), *OBJDUMP_FLAGS, str(shared_object)]
    ctx.logger.info(
        "crashforge: creating symbol file for %s at %s", output_name, output_file
    )

    with open(error_file, "wb") as stderr_sink, subprocess.Popen(
        command, stdout=subprocess.PIPE, stderr=stderr_sink
    ) as process:
        with gzip.open(output_file, "wb") as gzip_sink:
            shutil.copyfileobj(process.stdout, gzip_sink)
        exit_code = process.wait()

    if exit_code != 0:
        raise SubprocessFailure(command, exit_code, error_log=error_file)
    return output_file


def find_shared_objects(search_dir: Path) -> list[tuple[Path, str]]:
    """Discover ``<search_dir>/<abi>/*.so`` files, sorted by ABI then name."""
    found: list[tuple[Path, str]] = []
    if not search_dir.is_dir():
        return found
    for arch_dir in sorted(p for p in search_dir.iterdir() if p.is_dir()):
        if Abi.find_by_name(arch_dir.name) is None:
            continue
        for so_file in sorted(arch_dir.glob("*.so")):
            found.append((so_file, arch_dir.name))
    return found


class SharedObjectMappingFactory:
    """Creates SO mapping files, one objdump invocation per shared object.

    Failures are logged and reported as ``None`` so callers can continue
    with the remaining architectures.
    """

    def __init__(self, locator: ToolLocator | None = None) -> None:
        self._locator = locator

    def generate_so_mapping_file(
        self, params: ToolInvocationParams, ctx: BuildContext
    ) -> Path | None:
        """Return the generated ``.gz`` file, or ``None`` on error."""
        arch = params.architecture
        locator = self._locator or ToolLocator(ctx.ndk_dir)
        try:
            objdump = locator.locate(arch, params.path_overrides, ctx)
        except Exception as exc:
            ctx.logger.error(
                "crashforge: unable to upload NDK symbols: could not find "
                "objdump location for %s: %s",
                arch,
                exc,
            )
            return None

        try:
            arch_dir = params.output_directory / arch
            arch_dir.mkdir(parents=True, exist_ok=True)
            return dump_symbols(objdump, params.shared_object, arch_dir, ctx)
        except SubprocessFailure as exc:
            ctx.logger.error(
                "crashforge: failed to generate symbols for %s, see %s for more details",
                arch,
                exc.error_log,
            )
        except Exception as exc:
            ctx.logger.error(
                "crashforge: failed to generate symbols for %s: %s",
                arch,
                exc,
                exc_info=True,
            )
        return None
