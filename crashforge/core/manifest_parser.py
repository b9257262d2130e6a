"""AndroidManifest.xml reader and build UUID writer.

Identifying metadata lives in ``<meta-data>`` children of the first
``<application>`` element::

    <manifest xmlns:android="http://schemas.android.com/apk/res/android"
              android:versionCode="12" android:versionName="1.2.0">
      <application>
        <meta-data android:name="com.bugsnag.android.API_KEY"
                   android:value="abc123"/>
      </application>
    </manifest>

Version code and version name fall back to the root element's
``android:versionCode`` / ``android:versionName`` attributes when no
meta-data entry overrides them.
"""

from __future__ import annotations

import re
from pathlib import Path
from xml.etree import ElementTree as ET

from crashforge.core.errors import ManifestParseError, MissingMetadataError
from crashforge.models.context import BuildContext
from crashforge.models.manifest import ManifestInfo, MetadataEntry

ANDROID_NS = "http://schemas.android.com/apk/res/android"
ATTR_NAME = f"{{{ANDROID_NS}}}name"
ATTR_VALUE = f"{{{ANDROID_NS}}}value"
ATTR_VERSION_CODE = f"{{{ANDROID_NS}}}versionCode"
ATTR_VERSION_NAME = f"{{{ANDROID_NS}}}versionName"

TAG_APPLICATION = "application"
TAG_META_DATA = "meta-data"
TAG_API_KEY = "com.bugsnag.android.API_KEY"
TAG_BUILD_UUID = "com.bugsnag.android.BUILD_UUID"
TAG_VERSION_CODE = "com.bugsnag.android.VERSION_CODE"
TAG_APP_VERSION = "com.bugsnag.android.APP_VERSION"

# Indentation added to an empty <application> so the new child is nested.
_CHILD_INDENT = "    "
_RESERVED_PREFIX = re.compile(r"ns\d+")


class ManifestParser:
    """Reads :class:`ManifestInfo` from, and writes build UUIDs into, a manifest."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_manifest(self, manifest_path: Path, ctx: BuildContext) -> ManifestInfo:
        """Extract the four required fields from *manifest_path*.

        Raises ``MissingMetadataError`` listing every unresolved field,
        after logging a warning for each one.
        """
        logger = ctx.logger
        logger.debug("crashforge: reading manifest at %s", manifest_path)
        tree = self._parse(manifest_path)
        root = tree.getroot()
        entries = find_metadata_entries(self._application(root, manifest_path))

        api_key = get_manifest_metadata(entries, TAG_API_KEY) or None
        if api_key is None:
            logger.warning(
                "crashforge: could not find apiKey in '%s' <meta-data> tag "
                "in your AndroidManifest.xml",
                TAG_API_KEY,
            )

        version_code = get_manifest_metadata(entries, TAG_VERSION_CODE)
        if version_code is None:
            version_code = root.get(ATTR_VERSION_CODE)
        if version_code is None:
            logger.warning(
                "crashforge: could not find 'android:versionCode' value "
                "in your AndroidManifest.xml"
            )

        build_uuid = get_manifest_metadata(entries, TAG_BUILD_UUID)
        if build_uuid is None:
            logger.warning(
                "crashforge: could not find '%s' <meta-data> tag "
                "in your AndroidManifest.xml",
                TAG_BUILD_UUID,
            )

        version_name = get_manifest_metadata(entries, TAG_APP_VERSION)
        if version_name is None:
            version_name = root.get(ATTR_VERSION_NAME)
        if version_name is None:
            logger.warning(
                "crashforge: could not find 'android:versionName' value "
                "in your AndroidManifest.xml"
            )

        resolved = {
            "api_key": api_key,
            "version_code": version_code,
            "build_uuid": build_uuid,
            "version_name": version_name,
        }
        missing = [field for field, value in resolved.items() if value is None]
        if missing:
            err = MissingMetadataError(missing)
            logger.error("crashforge: %s (manifest: %s)", err, manifest_path)
            raise err

        return ManifestInfo(**resolved)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write_build_uuid(
        self, manifest_path: Path, build_uuid: str, ctx: BuildContext
    ) -> bool:
        """Append a build UUID ``<meta-data>`` entry unless one exists.

        An existing entry without ``android:value`` gets the value set in
        place.  Returns ``True`` if the file was rewritten, ``False`` if
        the manifest already carried a build UUID.
        """
        _register_namespaces(manifest_path)
        tree = self._parse(manifest_path)
        application = self._application(tree.getroot(), manifest_path)

        existing = _find_metadata_element(application, TAG_BUILD_UUID)
        if existing is not None and existing.get(ATTR_VALUE) is not None:
            ctx.logger.debug(
                "crashforge: %s already contains a build UUID", manifest_path
            )
            return False

        if existing is not None:
            existing.set(ATTR_VALUE, build_uuid)
        else:
            element = ET.Element(
                TAG_META_DATA, {ATTR_NAME: TAG_BUILD_UUID, ATTR_VALUE: build_uuid}
            )
            _append_preserving_whitespace(application, element)

        tree.write(manifest_path, encoding="utf-8", xml_declaration=True)
        ctx.logger.info(
            "crashforge: wrote build UUID %s to %s", build_uuid, manifest_path
        )
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(manifest_path: Path) -> ET.ElementTree:
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            return ET.parse(manifest_path, parser=parser)
        except FileNotFoundError:
            raise ManifestParseError(
                f"AndroidManifest.xml not found at {manifest_path}"
            ) from None
        except ET.ParseError as exc:
            raise ManifestParseError(
                f"Could not parse AndroidManifest.xml at {manifest_path}: {exc}"
            ) from exc

    @staticmethod
    def _application(root: ET.Element, manifest_path: Path) -> ET.Element:
        # First match wins; duplicates are not validated.
        application = root.find(TAG_APPLICATION)
        if application is None:
            raise ManifestParseError(
                f"Expected an <{TAG_APPLICATION}> element in {manifest_path}"
            )
        return application


def find_metadata_entries(application: ET.Element) -> list[MetadataEntry]:
    """Collect ``<meta-data>`` children of *application* in document order."""
    return [
        MetadataEntry(name=child.get(ATTR_NAME), value=child.get(ATTR_VALUE))
        for child in application
        if child.tag == TAG_META_DATA
    ]


def get_manifest_metadata(entries: list[MetadataEntry], key: str) -> str | None:
    """Value of the first entry named *key*, or ``None``."""
    for entry in entries:
        if entry.name == key:
            return entry.value
    return None


def _find_metadata_element(application: ET.Element, key: str) -> ET.Element | None:
    for child in application:
        if child.tag == TAG_META_DATA and child.get(ATTR_NAME) == key:
            return child
    return None


def _register_namespaces(manifest_path: Path) -> None:
    """Re-register every prefix the document declares so it survives a rewrite."""
    ET.register_namespace("android", ANDROID_NS)
    try:
        for _, (prefix, uri) in ET.iterparse(manifest_path, events=("start-ns",)):
            # ElementTree reserves ns0, ns1, ... for its own generated prefixes.
            if prefix and not _RESERVED_PREFIX.fullmatch(prefix):
                ET.register_namespace(prefix, uri)
    except (FileNotFoundError, ET.ParseError):
        # _parse reports these with a proper message.
        return


def _append_preserving_whitespace(parent: ET.Element, element: ET.Element) -> None:
    """Append *element* reusing the sibling indentation already in *parent*."""
    children = list(parent)
    if children:
        last = children[-1]
        element.tail = last.tail
        last.tail = parent.text
    else:
        text = parent.text or ""
        element.tail = text
        if not text.strip():
            parent.text = (text or "\n") + _CHILD_INDENT
    parent.append(element)
