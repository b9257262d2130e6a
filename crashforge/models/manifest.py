"""Manifest metadata models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class MetadataEntry(BaseModel):
    """A single ``<meta-data android:name=... android:value=...>`` element."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    value: str | None = None


class ManifestInfo(BaseModel):
    """Identifying metadata required to correlate uploads with a build.

    Built fresh on every manifest read; never cached.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    version_code: str
    build_uuid: str
    version_name: str

    def write(self, path: Path) -> None:
        """Persist as JSON for downstream tasks."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> ManifestInfo:
        return cls.model_validate_json(path.read_text(encoding="utf-8"))
