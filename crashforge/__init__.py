"""Crashforge: crash-reporting build artifacts for Android pipelines.

v0.1.0 — manifest metadata, NDK symbol dumps, source map upload:
  - Reads API key, version code, build UUID and version name from
    AndroidManifest.xml meta-data (root attribute fallbacks)
  - Injects a build UUID into the manifest once per build
  - Generates gzip-compressed objdump symbol files per ABI
  - Uploads React Native source maps via the bugsnag-source-maps CLI
"""

__version__ = "0.1.0"
__description__ = (
    "Crash-reporting symbol and source map tooling for Android builds"
)

from crashforge.core.manifest_parser import ManifestParser
from crashforge.core.so_mapping import SharedObjectMappingFactory
from crashforge.core.source_map_upload import SourceMapUploader
from crashforge.cli.app import app as cli

__all__ = [
    "ManifestParser",
    "SharedObjectMappingFactory",
    "SourceMapUploader",
    "cli",
    "__version__",
]
