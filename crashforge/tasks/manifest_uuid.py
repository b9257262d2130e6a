"""Manifest task — inject a build UUID, then export the manifest info.

The exported JSON file is what the upload task reads, so a manifest is
parsed once per build rather than once per consumer.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, ClassVar

from crashforge.core.manifest_parser import ManifestParser
from crashforge.models.context import BuildContext
from crashforge.tasks.base import BaseTask


class ManifestUuidTask(BaseTask):
    """Ensures the manifest has a build UUID and writes ``manifestInfo.json``."""

    description: ClassVar[str] = (
        "Adds a unique build UUID to AndroidManifest.xml and exports its metadata"
    )

    def __init__(
        self,
        manifest_path: Path,
        build_uuid: str | None = None,
        manifest_info_file: Path | None = None,
        parser: ManifestParser | None = None,
    ) -> None:
        self.manifest_path = manifest_path
        self.build_uuid = build_uuid or str(uuid.uuid4())
        self.manifest_info_file = manifest_info_file
        self._parser = parser or ManifestParser()

    @property
    def task_id(self) -> str:
        return "manifest_uuid"

    @property
    def display_name(self) -> str:
        return "Manifest UUID"

    def execute(self, ctx: BuildContext) -> dict[str, Any]:
        written = self._parser.write_build_uuid(
            self.manifest_path, self.build_uuid, ctx
        )
        info = self._parser.read_manifest(self.manifest_path, ctx)

        info_file = self.manifest_info_file or ctx.config.manifest_info_file
        info.write(info_file)

        return {
            "manifest_path": str(self.manifest_path),
            "uuid_written": written,
            "build_uuid": info.build_uuid,
            "manifest_info_file": str(info_file),
        }
