"""Upload task for React Native JS source maps.

Two variants differ only in how the project root is supplied:

* ``FileCollectionUploadTask`` — the host hands over a file collection
  that must resolve to exactly one directory.
* ``LegacyUploadTask`` — the host hands over a single path.

The variant is chosen once, from the host's capabilities, by
``select_upload_task``.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from crashforge.core.source_map_upload import SourceMapUploader
from crashforge.models.context import BuildContext
from crashforge.models.manifest import ManifestInfo
from crashforge.models.upload import UploadRequest
from crashforge.tasks.base import BaseTask


class HostCapabilities(BaseModel):
    """Features of the host build tool that affect task selection."""

    model_config = ConfigDict(frozen=True)

    file_collections: bool = True


class UploadJsSourceMapTask(BaseTask):
    """Uploads JS source maps using metadata exported by the manifest task."""

    description: ClassVar[str] = "Uploads JS source maps"

    def __init__(
        self,
        source_map: Path,
        bundle: Path,
        output_file: Path,
        manifest_info_file: Path | None = None,
        uploader: SourceMapUploader | None = None,
    ) -> None:
        self.source_map = source_map
        self.bundle = bundle
        self.output_file = output_file
        self.manifest_info_file = manifest_info_file
        self._uploader = uploader or SourceMapUploader()

    @property
    def task_id(self) -> str:
        return "upload_js_source_map"

    @property
    def display_name(self) -> str:
        return "Upload JS Source Map"

    @abc.abstractmethod
    def project_root(self) -> Path:
        """The React Native project root passed to the upload CLI."""
        ...

    def execute(self, ctx: BuildContext) -> dict[str, Any]:
        config = ctx.config
        info_file = self.manifest_info_file or config.manifest_info_file
        request = UploadRequest(
            executable=config.source_maps_executable,
            manifest_info=ManifestInfo.load(info_file),
            source_map=self.source_map,
            bundle=self.bundle,
            project_root=self.project_root(),
            endpoint=config.endpoint,
            overwrite=config.overwrite,
            dev_enabled=config.dev_enabled,
            fail_on_upload_error=config.fail_on_upload_error,
            output_file=self.output_file,
        )
        uploaded = self._uploader.upload(request, ctx)
        return {
            "uploaded": uploaded,
            "output_file": str(self.output_file),
            "project_root": str(request.project_root),
        }


class FileCollectionUploadTask(UploadJsSourceMapTask):
    """Variant for hosts that supply the project root as a file collection."""

    def __init__(self, *args: Any, project_root_files: Sequence[Path] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.project_root_files = list(project_root_files)

    def project_root(self) -> Path:
        if len(self.project_root_files) != 1:
            raise ValueError(
                "Expected exactly one project root, got "
                f"{len(self.project_root_files)}: {self.project_root_files}"
            )
        return self.project_root_files[0]


class LegacyUploadTask(UploadJsSourceMapTask):
    """Variant for hosts that supply the project root as a single path."""

    def __init__(self, *args: Any, project_root: Path, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._project_root = project_root

    def project_root(self) -> Path:
        return self._project_root


def select_upload_task(capabilities: HostCapabilities) -> type[UploadJsSourceMapTask]:
    """Pick the upload task variant the host can drive."""
    if capabilities.file_collections:
        return FileCollectionUploadTask
    return LegacyUploadTask


def create_upload_task(
    capabilities: HostCapabilities,
    project_root: Path,
    **kwargs: Any,
) -> UploadJsSourceMapTask:
    """Instantiate the selected variant with *project_root* in its native form."""
    task_cls = select_upload_task(capabilities)
    if task_cls is FileCollectionUploadTask:
        return FileCollectionUploadTask(project_root_files=[project_root], **kwargs)
    return LegacyUploadTask(project_root=project_root, **kwargs)
