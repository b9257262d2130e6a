"""Tests for plugin config — env-driven settings."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from crashforge.config import PluginConfig, configure_logging


class TestPluginConfig:
    def test_defaults(self):
        config = PluginConfig()
        assert config.log_level == "INFO"
        assert config.endpoint == "https://upload.bugsnag.com"
        assert config.fail_on_upload_error is True
        assert config.overwrite is False
        assert config.dev_enabled is False

    def test_default_paths(self):
        config = PluginConfig()
        assert config.build_dir == Path("build")
        assert config.so_mapping_dir == Path("build/intermediates/bugsnag/soMappings")
        assert config.manifest_info_file.name == "manifestInfo.json"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CRASHFORGE_FAIL_ON_UPLOAD_ERROR", "false")
        monkeypatch.setenv("CRASHFORGE_NDK_DIR", "/opt/ndk")
        monkeypatch.setenv("CRASHFORGE_OBJDUMP_PATHS", '{"x86": "/usr/bin/objdump"}')
        config = PluginConfig()
        assert config.fail_on_upload_error is False
        assert config.ndk_dir == Path("/opt/ndk")
        assert config.objdump_paths == {"x86": "/usr/bin/objdump"}


class TestConfigureLogging:
    def test_installs_single_rich_handler(self):
        configure_logging("debug")
        configure_logging("warning")
        logger = logging.getLogger("crashforge")
        assert logger.level == logging.WARNING
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
