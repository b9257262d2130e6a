"""Source map upload request model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from crashforge.models.manifest import ManifestInfo


class UploadRequest(BaseModel):
    """Everything needed to run one ``upload-react-native`` command."""

    model_config = ConfigDict(frozen=True)

    executable: Path
    manifest_info: ManifestInfo
    source_map: Path
    bundle: Path
    project_root: Path
    endpoint: str
    overwrite: bool = False
    dev_enabled: bool = False
    fail_on_upload_error: bool = True
    output_file: Path
