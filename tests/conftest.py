"""Shared test fixtures for crashforge."""

from __future__ import annotations

import stat
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from crashforge.config import PluginConfig
from crashforge.core.manifest_parser import ManifestParser
from crashforge.models.context import BuildContext

ANDROID_NS = "http://schemas.android.com/apk/res/android"


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def config(tmp_dir: Path) -> PluginConfig:
    """Provide a PluginConfig rooted in the temp directory."""
    return PluginConfig(build_dir=tmp_dir / "build", ndk_dir=tmp_dir / "ndk")


@pytest.fixture
def ctx(config: PluginConfig) -> BuildContext:
    """Provide a fresh BuildContext."""
    return BuildContext(config=config)


@pytest.fixture
def parser() -> ManifestParser:
    return ManifestParser()


# ---------------------------------------------------------------------------
# File factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_manifest(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write an AndroidManifest.xml.

    ``meta_data`` is a list of (name, value) pairs; ``None`` root
    attributes are omitted.
    """

    def _factory(
        meta_data: list[tuple[str, str]] | None = None,
        version_code: str | None = "12",
        version_name: str | None = "1.2.0",
        name: str = "AndroidManifest.xml",
    ) -> Path:
        attrs = ""
        if version_code is not None:
            attrs += f' android:versionCode="{version_code}"'
        if version_name is not None:
            attrs += f' android:versionName="{version_name}"'
        entries = "".join(
            f'\n        <meta-data android:name="{key}" android:value="{value}" />'
            for key, value in (meta_data or [])
        )
        content = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            f'<manifest xmlns:android="{ANDROID_NS}" package="com.example.app"{attrs}>\n'
            "    <uses-permission android:name=\"android.permission.INTERNET\" />\n"
            f'    <application android:label="Example">{entries}\n'
            "    </application>\n"
            "</manifest>\n"
        )
        path = tmp_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def make_tool(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write an executable Python script standing in for a CLI.

    The script echoes its arguments (one per line) to stdout, writes
    *raw_output* bytes to both streams and *stderr* to stderr, records
    its argv in ``<name>.args`` and exits with *exit_code*.
    """

    def _factory(
        name: str = "fake-tool",
        exit_code: int = 0,
        stderr: str = "",
        stdout_lines: int = 0,
        raw_output: bytes = b"",
    ) -> Path:
        path = tmp_dir / "bin" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        script = textwrap.dedent(
            f"""\
            #!{sys.executable}
            import json
            import sys

            with open({str(path) + ".args"!r}, "w") as fh:
                json.dump(sys.argv[1:], fh)
            for arg in sys.argv[1:]:
                print(arg)
            for i in range({stdout_lines}):
                print("DW_TAG_subprogram line", i)
            sys.stdout.flush()
            sys.stdout.buffer.write({raw_output!r})
            sys.stderr.buffer.write({raw_output!r})
            sys.stderr.flush()
            sys.stderr.write({stderr!r})
            sys.exit({exit_code})
            """
        )
        path.write_text(script, encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _factory
