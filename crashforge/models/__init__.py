"""Crashforge data models — Pydantic v2, frozen where immutable."""

from crashforge.models.context import BuildContext
from crashforge.models.manifest import ManifestInfo, MetadataEntry
from crashforge.models.toolchain import Abi, HostOs, ToolInvocationParams
from crashforge.models.upload import UploadRequest

__all__ = [
    # manifest
    "ManifestInfo",
    "MetadataEntry",
    # toolchain
    "Abi",
    "HostOs",
    "ToolInvocationParams",
    # upload
    "UploadRequest",
    # context
    "BuildContext",
]
