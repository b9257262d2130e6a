"""Plugin configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and CRASHFORGE_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

SO_MAPPING_DIR = Path("intermediates/bugsnag/soMappings")


class PluginConfig(BaseSettings):
    """Plugin configuration with environment variable overrides.

    All settings can be overridden via CRASHFORGE_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Override via environment::

        export CRASHFORGE_NDK_DIR=$ANDROID_HOME/ndk/21.4.7075529
        export CRASHFORGE_FAIL_ON_UPLOAD_ERROR=false
        export CRASHFORGE_OBJDUMP_PATHS='{"arm64-v8a": "/opt/bin/objdump"}'

    Or via .env file::

        CRASHFORGE_LOG_LEVEL=DEBUG
        CRASHFORGE_ENDPOINT=https://upload.example.com
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CRASHFORGE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Build layout
    build_dir: Path = Path("build")
    ndk_dir: Path | None = None

    # objdump overrides, keyed by ABI name
    objdump_paths: dict[str, str] = {}

    # Source map upload
    source_maps_executable: Path = Path(
        "node_modules/@bugsnag/source-maps/bin/cli"
    )
    endpoint: str = "https://upload.bugsnag.com"
    overwrite: bool = False
    dev_enabled: bool = False
    fail_on_upload_error: bool = True

    @property
    def so_mapping_dir(self) -> Path:
        """Directory that receives per-ABI symbol files."""
        return self.build_dir / SO_MAPPING_DIR

    @property
    def manifest_info_file(self) -> Path:
        """JSON hand-off file written by the manifest task."""
        return self.build_dir / "intermediates" / "bugsnag" / "manifestInfo.json"


def configure_logging(level: str = "INFO") -> None:
    """Route ``crashforge`` log records through a Rich handler."""
    root = logging.getLogger("crashforge")
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(show_path=False, markup=False))
