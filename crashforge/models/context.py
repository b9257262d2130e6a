"""Build context threaded through every component call."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crashforge.config import PluginConfig


class BuildContext(BaseModel):
    """Logger, configuration and paths for one build invocation.

    Components never read a global logger or config; they receive this.
    ``task_results`` collects the output of each task that ran.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: PluginConfig = Field(default_factory=PluginConfig)
    logger: logging.Logger = Field(
        default_factory=lambda: logging.getLogger("crashforge")
    )
    task_results: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @property
    def build_dir(self) -> Path:
        return self.config.build_dir

    @property
    def ndk_dir(self) -> Path | None:
        return self.config.ndk_dir
