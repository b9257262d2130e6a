"""Locate the NDK objdump binary for an ABI.

Resolution order:
    1. An explicit override for the architecture, used verbatim.
    2. ``<ndk>/toolchains/<toolchain>-4.9/prebuilt/<host>/bin/<prefix>-objdump``

The resolved path must exist and be executable.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from pathlib import Path

from crashforge.core.errors import ToolNotFoundError, UnsupportedHostError
from crashforge.models.context import BuildContext
from crashforge.models.toolchain import Abi, HostOs

TOOLCHAIN_VERSION = "4.9"

_UNIX_SYSTEMS = frozenset(
    {"linux", "freebsd", "openbsd", "netbsd", "sunos", "aix", "hp-ux"}
)
_WINDOWS_32_MACHINES = frozenset({"x86", "i386", "i686"})


def detect_host_os(system: str | None = None, machine: str | None = None) -> HostOs:
    """Classify the host into one of the NDK prebuilt host families.

    *system* and *machine* default to :func:`platform.system` and
    :func:`platform.machine`.  Raises ``UnsupportedHostError`` for
    anything that is not mac, unix or windows.
    """
    system = platform.system() if system is None else system
    family = system.lower()
    if family == "darwin":
        return HostOs.MAC
    if family in _UNIX_SYSTEMS:
        return HostOs.UNIX
    if family == "windows":
        machine = platform.machine() if machine is None else machine
        if machine.lower() in _WINDOWS_32_MACHINES:
            return HostOs.WINDOWS_32
        return HostOs.WINDOWS_64
    raise UnsupportedHostError(system)


def calculate_objdump_location(ndk_dir: Path | str, abi: Abi, host_os: HostOs) -> Path:
    """Deterministic objdump path inside an NDK installation."""
    executable = "objdump.exe" if host_os.is_windows else "objdump"
    return (
        Path(ndk_dir)
        / "toolchains"
        / f"{abi.toolchain_prefix}-{TOOLCHAIN_VERSION}"
        / "prebuilt"
        / host_os.value
        / "bin"
        / f"{abi.objdump_prefix}-{executable}"
    )


def is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class ToolLocator:
    """Resolves objdump executables for ABIs.

    Parameters
    ----------
    ndk_dir:
        NDK root directory.  Only needed when no override applies.
    host_os:
        Pin the host family instead of detecting it.
    """

    def __init__(self, ndk_dir: Path | None, host_os: HostOs | None = None) -> None:
        self._ndk_dir = ndk_dir
        self._host_os = host_os

    def locate(
        self,
        architecture: str,
        overrides: Mapping[str, str] | None,
        ctx: BuildContext,
    ) -> Path:
        """Return an executable objdump path for *architecture*.

        Raises ``ToolNotFoundError`` or ``UnsupportedHostError``.
        """
        override = (overrides or {}).get(architecture)
        if override is not None:
            path = Path(override)
            ctx.logger.debug(
                "crashforge: using objdump override %s for %s", path, architecture
            )
        else:
            path = self._compute(architecture)

        if not is_executable(path):
            raise ToolNotFoundError(architecture, path)
        return path

    def _compute(self, architecture: str) -> Path:
        # Host detection comes first: an unsupported host never touches the filesystem.
        host_os = self._host_os or detect_host_os()
        abi = Abi.find_by_name(architecture)
        if abi is None:
            raise ToolNotFoundError(
                architecture, None, f"Failed to find ABI for {architecture}"
            )
        if self._ndk_dir is None:
            raise ToolNotFoundError(
                architecture,
                None,
                "No NDK directory configured (set CRASHFORGE_NDK_DIR "
                "or an objdump override)",
            )
        return calculate_objdump_location(self._ndk_dir, abi, host_os)
