"""Tests for ManifestParser — metadata lookup, fallbacks, build UUID injection."""

from __future__ import annotations

import logging
from xml.etree import ElementTree as ET

import pytest

from crashforge.core.errors import ManifestParseError, MissingMetadataError
from crashforge.core.manifest_parser import (
    ATTR_NAME,
    ATTR_VALUE,
    TAG_API_KEY,
    TAG_APP_VERSION,
    TAG_BUILD_UUID,
    TAG_VERSION_CODE,
    find_metadata_entries,
    get_manifest_metadata,
)
from crashforge.models.manifest import ManifestInfo, MetadataEntry

FULL_META = [(TAG_API_KEY, "abc123"), (TAG_BUILD_UUID, "xyz")]


def _build_uuid_values(path) -> list[str]:
    root = ET.parse(path).getroot()
    return [
        el.get(ATTR_VALUE)
        for el in root.find("application")
        if el.tag == "meta-data" and el.get(ATTR_NAME) == TAG_BUILD_UUID
    ]


class TestReadManifest:
    def test_reads_all_fields(self, parser, ctx, make_manifest):
        path = make_manifest(FULL_META)
        info = parser.read_manifest(path, ctx)
        assert info == ManifestInfo(
            api_key="abc123", version_code="12", build_uuid="xyz", version_name="1.2.0"
        )

    def test_unrelated_meta_data_ignored(self, parser, ctx, make_manifest):
        path = make_manifest(
            [("com.google.android.geo.API_KEY", "maps"), *FULL_META, ("other", "x")]
        )
        info = parser.read_manifest(path, ctx)
        assert info.api_key == "abc123"
        assert info.build_uuid == "xyz"

    def test_meta_data_preferred_over_root_attributes(self, parser, ctx, make_manifest):
        path = make_manifest(
            [*FULL_META, (TAG_VERSION_CODE, "99"), (TAG_APP_VERSION, "9.9.9")]
        )
        info = parser.read_manifest(path, ctx)
        assert info.version_code == "99"
        assert info.version_name == "9.9.9"

    def test_meta_data_without_root_attributes(self, parser, ctx, make_manifest):
        path = make_manifest(
            [*FULL_META, (TAG_VERSION_CODE, "7"), (TAG_APP_VERSION, "0.7")],
            version_code=None,
            version_name=None,
        )
        info = parser.read_manifest(path, ctx)
        assert (info.version_code, info.version_name) == ("7", "0.7")

    def test_first_match_wins(self, parser, ctx, make_manifest):
        path = make_manifest([(TAG_API_KEY, "first"), (TAG_API_KEY, "second"), (TAG_BUILD_UUID, "u")])
        assert parser.read_manifest(path, ctx).api_key == "first"

    @pytest.mark.parametrize(
        "meta_data, kwargs, expected",
        [
            ([(TAG_BUILD_UUID, "xyz")], {}, ("api_key",)),
            (FULL_META, {"version_code": None}, ("version_code",)),
            ([(TAG_API_KEY, "abc123")], {}, ("build_uuid",)),
            (FULL_META, {"version_name": None}, ("version_name",)),
            (
                [],
                {"version_code": None, "version_name": None},
                ("api_key", "version_code", "build_uuid", "version_name"),
            ),
        ],
    )
    def test_missing_fields_enumerated(self, parser, ctx, make_manifest, meta_data, kwargs, expected):
        path = make_manifest(meta_data, **kwargs)
        with pytest.raises(MissingMetadataError) as excinfo:
            parser.read_manifest(path, ctx)
        assert excinfo.value.missing_fields == expected

    def test_empty_api_key_is_missing(self, parser, ctx, make_manifest):
        path = make_manifest([(TAG_API_KEY, ""), (TAG_BUILD_UUID, "xyz")])
        with pytest.raises(MissingMetadataError) as excinfo:
            parser.read_manifest(path, ctx)
        assert excinfo.value.missing_fields == ("api_key",)

    def test_missing_fields_logged_as_warnings(self, parser, ctx, make_manifest, caplog):
        path = make_manifest([], version_code=None)
        with caplog.at_level(logging.WARNING, logger="crashforge"):
            with pytest.raises(MissingMetadataError):
                parser.read_manifest(path, ctx)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 3
        assert any("versionCode" in r.getMessage() for r in warnings)

    def test_missing_file(self, parser, ctx, tmp_dir):
        with pytest.raises(ManifestParseError, match="not found"):
            parser.read_manifest(tmp_dir / "nope.xml", ctx)

    def test_malformed_xml(self, parser, ctx, tmp_dir):
        path = tmp_dir / "bad.xml"
        path.write_text("<manifest><application></manifest>")
        with pytest.raises(ManifestParseError, match="Could not parse"):
            parser.read_manifest(path, ctx)

    def test_no_application_element(self, parser, ctx, tmp_dir):
        path = tmp_dir / "empty.xml"
        path.write_text("<manifest/>")
        with pytest.raises(ManifestParseError, match="application"):
            parser.read_manifest(path, ctx)

    def test_first_application_element_used(self, parser, ctx, tmp_dir):
        path = tmp_dir / "two.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
            'android:versionCode="1" android:versionName="1.0">'
            f'<application><meta-data android:name="{TAG_API_KEY}" android:value="one"/>'
            f'<meta-data android:name="{TAG_BUILD_UUID}" android:value="u"/></application>'
            f'<application><meta-data android:name="{TAG_API_KEY}" android:value="two"/></application>'
            "</manifest>"
        )
        assert parser.read_manifest(path, ctx).api_key == "one"


class TestWriteBuildUuid:
    def test_injects_when_absent(self, parser, ctx, make_manifest):
        path = make_manifest([(TAG_API_KEY, "abc123")])
        assert parser.write_build_uuid(path, "uuid-1", ctx) is True
        assert parser.read_manifest(path, ctx).build_uuid == "uuid-1"

    def test_noop_when_present(self, parser, ctx, make_manifest):
        path = make_manifest(FULL_META)
        before = path.read_bytes()
        assert parser.write_build_uuid(path, "other", ctx) is False
        assert path.read_bytes() == before

    def test_idempotent(self, parser, ctx, make_manifest):
        path = make_manifest([(TAG_API_KEY, "abc123")])
        parser.write_build_uuid(path, "first", ctx)
        after_first = path.read_bytes()
        assert parser.write_build_uuid(path, "second", ctx) is False
        assert path.read_bytes() == after_first
        assert _build_uuid_values(path) == ["first"]

    def test_preserves_android_prefix_and_siblings(self, parser, ctx, make_manifest):
        path = make_manifest([(TAG_API_KEY, "abc123")])
        parser.write_build_uuid(path, "uuid-1", ctx)
        text = path.read_text(encoding="utf-8")
        assert 'xmlns:android="http://schemas.android.com/apk/res/android"' in text
        assert "ns0:" not in text
        assert 'android:name="android.permission.INTERNET"' in text
        assert 'android:label="Example"' in text

    def test_preserves_comments_and_indentation(self, parser, ctx, tmp_dir):
        path = tmp_dir / "AndroidManifest.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android">\n'
            "    <!-- keep me -->\n"
            "    <application>\n"
            f'        <meta-data android:name="{TAG_API_KEY}" android:value="k" />\n'
            "    </application>\n"
            "</manifest>\n"
        )
        parser.write_build_uuid(path, "u", ctx)
        text = path.read_text(encoding="utf-8")
        assert "<!-- keep me -->" in text
        assert f'\n        <meta-data android:name="{TAG_BUILD_UUID}"' in text
        assert text.rstrip().endswith("</application>\n</manifest>")

    def test_empty_application(self, parser, ctx, tmp_dir):
        path = tmp_dir / "AndroidManifest.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android">\n'
            "  <application>\n  </application>\n</manifest>\n"
        )
        assert parser.write_build_uuid(path, "u", ctx) is True
        assert _build_uuid_values(path) == ["u"]

    def test_preserves_tools_namespace(self, parser, ctx, tmp_dir):
        path = tmp_dir / "AndroidManifest.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
            'xmlns:tools="http://schemas.android.com/tools">'
            '<application tools:replace="android:label"/></manifest>'
        )
        parser.write_build_uuid(path, "u", ctx)
        assert "tools:replace" in path.read_text(encoding="utf-8")

    def test_missing_file(self, parser, ctx, tmp_dir):
        with pytest.raises(ManifestParseError):
            parser.write_build_uuid(tmp_dir / "missing.xml", "u", ctx)

    def test_valueless_entry_filled_in_place(self, parser, ctx, tmp_dir):
        path = tmp_dir / "AndroidManifest.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
            'android:versionCode="3" android:versionName="3.0">\n'
            "    <application>\n"
            f'        <meta-data android:name="{TAG_API_KEY}" android:value="k" />\n'
            f'        <meta-data android:name="{TAG_BUILD_UUID}" />\n'
            "    </application>\n"
            "</manifest>\n"
        )
        assert parser.write_build_uuid(path, "a", ctx) is True
        assert parser.write_build_uuid(path, "b", ctx) is False
        assert _build_uuid_values(path) == ["a"]
        assert parser.read_manifest(path, ctx).build_uuid == "a"

    def test_reserved_namespace_prefix(self, parser, ctx, tmp_dir):
        path = tmp_dir / "AndroidManifest.xml"
        path.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
            'xmlns:ns0="urn:x" android:versionCode="3" android:versionName="3.0">'
            f'<application><meta-data android:name="{TAG_API_KEY}" android:value="k"/>'
            "</application></manifest>"
        )
        assert parser.write_build_uuid(path, "u", ctx) is True
        assert parser.read_manifest(path, ctx).build_uuid == "u"


class TestMetadataHelpers:
    def test_find_metadata_entries_in_order(self):
        app = ET.fromstring(
            '<application xmlns:android="http://schemas.android.com/apk/res/android">'
            '<meta-data android:name="a" android:value="1"/>'
            "<activity/>"
            '<meta-data android:name="b"/>'
            "</application>"
        )
        assert find_metadata_entries(app) == [
            MetadataEntry(name="a", value="1"),
            MetadataEntry(name="b", value=None),
        ]

    def test_get_manifest_metadata_absent(self):
        assert get_manifest_metadata([MetadataEntry(name="a", value="1")], "b") is None
