"""Toolchain models — ABIs, host operating systems, invocation params."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class Abi(str, Enum):
    """Android ABIs that native symbol files can be generated for."""

    ARMEABI = "armeabi"
    ARMEABI_V7A = "armeabi-v7a"
    ARM64_V8A = "arm64-v8a"
    X86 = "x86"
    X86_64 = "x86_64"

    @property
    def abi_name(self) -> str:
        return self.value

    @property
    def toolchain_prefix(self) -> str:
        """NDK toolchain directory prefix (``toolchains/<prefix>-4.9``)."""
        return _ABI_PREFIXES[self][0]

    @property
    def objdump_prefix(self) -> str:
        """Prefix of the objdump binary name inside the toolchain."""
        return _ABI_PREFIXES[self][1]

    @classmethod
    def find_by_name(cls, name: str) -> Abi | None:
        try:
            return cls(name)
        except ValueError:
            return None


# (toolchain prefix, objdump prefix)
_ABI_PREFIXES: dict[Abi, tuple[str, str]] = {
    Abi.ARMEABI: ("arm-linux-androideabi", "arm-linux-androideabi"),
    Abi.ARMEABI_V7A: ("arm-linux-androideabi", "arm-linux-androideabi"),
    Abi.ARM64_V8A: ("aarch64-linux-android", "aarch64-linux-android"),
    Abi.X86: ("x86", "i686-linux-android"),
    Abi.X86_64: ("x86_64", "x86_64-linux-android"),
}


class HostOs(str, Enum):
    """Host families the NDK ships prebuilt binaries for.

    The value is the ``prebuilt/<dir>`` directory name.
    """

    MAC = "darwin-x86_64"
    UNIX = "linux-x86_64"
    WINDOWS_32 = "windows"
    WINDOWS_64 = "windows-x86_64"

    @property
    def is_windows(self) -> bool:
        return self in (HostOs.WINDOWS_32, HostOs.WINDOWS_64)


class ToolInvocationParams(BaseModel):
    """Parameters for generating one shared object's symbol file."""

    model_config = ConfigDict(frozen=True)

    shared_object: Path
    architecture: str
    path_overrides: dict[str, str] = {}
    output_directory: Path
