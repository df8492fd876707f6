"""
Tests for Content Normalization

Tests canonical forms for JSON, YAML and text payloads, FeatureFlags
metadata stripping and local data validation.
"""

import json

import pytest

from appconfig_deployment.api.models import ProfileKind
from appconfig_deployment.config.constants import MAX_CONFIG_SIZE
from appconfig_deployment.content import (
    ContentFormat,
    ContentNormalizer,
    content_type_for,
    format_for_content_type,
    format_for_path,
    strip_feature_flag_metadata,
    validate_local_data,
)
from appconfig_deployment.error_handling import ErrorCodes, ParseError, ValidationError


@pytest.fixture
def normalizer():
    return ContentNormalizer()


class TestJSONNormalization:
    """Test canonical JSON output."""

    def test_key_order_does_not_matter(self, normalizer):
        a = normalizer.normalize('{"b": 1, "a": {"d": 2, "c": 3}}', ContentFormat.JSON)
        b = normalizer.normalize('{"a":{"c":3,"d":2},"b":1}', ContentFormat.JSON)
        assert a == b

    def test_canonical_layout(self, normalizer):
        result = normalizer.normalize(b'{"b":1,"a":"x"}', ContentFormat.JSON)
        assert result == '{\n  "a": "x",\n  "b": 1\n}\n'

    def test_idempotent(self, normalizer):
        once = normalizer.normalize('{"z": [3, 1], "y": null}', ContentFormat.JSON)
        assert normalizer.normalize(once, ContentFormat.JSON) == once

    def test_non_ascii_is_preserved(self, normalizer):
        result = normalizer.normalize('{"greeting": "héllo"}', ContentFormat.JSON)
        assert "héllo" in result

    def test_invalid_json_reports_position(self, normalizer):
        with pytest.raises(ParseError) as exc_info:
            normalizer.normalize('{\n  "a": 1,\n}', ContentFormat.JSON)

        error = exc_info.value
        assert error.error_code == ErrorCodes.CONTENT_PARSE_FAILED
        assert error.context.line_number == 3

    def test_invalid_utf8(self, normalizer):
        with pytest.raises(ParseError):
            normalizer.normalize(b'{"a": "\xff"}', ContentFormat.JSON)


class TestFeatureFlags:
    """Test metadata stripping for FeatureFlags profiles."""

    DOCUMENT = {
        "version": "1",
        "flags": {"beta": {"name": "beta", "_createdAt": "keep-me"}},
        "values": {
            "beta": {
                "enabled": True,
                "_createdAt": "2024-01-01T00:00:00Z",
                "_updatedAt": "2024-01-02T00:00:00Z",
            }
        },
    }

    def test_timestamps_do_not_show_as_changes(self, normalizer):
        with_metadata = json.dumps(self.DOCUMENT)
        without = json.dumps(
            {
                "version": "1",
                "flags": self.DOCUMENT["flags"],
                "values": {"beta": {"enabled": True}},
            }
        )

        assert normalizer.normalize(
            with_metadata, ContentFormat.JSON, ProfileKind.FEATURE_FLAGS
        ) == normalizer.normalize(without, ContentFormat.JSON, ProfileKind.FEATURE_FLAGS)

    def test_only_values_entries_are_stripped(self):
        data = json.loads(json.dumps(self.DOCUMENT))
        stripped = strip_feature_flag_metadata(data)

        assert stripped["values"]["beta"] == {"enabled": True}
        assert stripped["flags"]["beta"]["_createdAt"] == "keep-me"

    def test_freeform_keeps_metadata(self, normalizer):
        result = normalizer.normalize(
            json.dumps(self.DOCUMENT), ContentFormat.JSON, ProfileKind.FREEFORM
        )
        assert "_updatedAt" in result

    def test_non_mapping_documents_pass_through(self):
        assert strip_feature_flag_metadata([1, 2]) == [1, 2]
        assert strip_feature_flag_metadata({"values": "x"}) == {"values": "x"}


class TestYAMLAndText:
    """Test YAML and text canonical forms."""

    def test_yaml_key_order(self, normalizer):
        a = normalizer.normalize("b: 1\na:\n  d: 2\n  c: 3\n", ContentFormat.YAML)
        b = normalizer.normalize("a: {c: 3, d: 2}\nb: 1\n", ContentFormat.YAML)
        assert a == b
        assert a.startswith("a:\n")

    def test_yaml_idempotent(self, normalizer):
        once = normalizer.normalize("list:\n- 1\n- 2\nname: x\n", ContentFormat.YAML)
        assert normalizer.normalize(once, ContentFormat.YAML) == once

    def test_invalid_yaml(self, normalizer):
        with pytest.raises(ParseError) as exc_info:
            normalizer.normalize("a: [1, 2\nb: 3\n", ContentFormat.YAML)
        assert exc_info.value.context.line_number is not None

    def test_text_line_endings(self, normalizer):
        result = normalizer.normalize(b"one\r\ntwo\r\n\n\n", ContentFormat.TEXT)
        assert result == "one\ntwo\n"

    def test_text_gets_final_newline(self, normalizer):
        assert normalizer.normalize("solo", ContentFormat.TEXT) == "solo\n"


class TestFormatMapping:
    """Test mapping between files, formats and content types."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("data.json", ContentFormat.JSON),
            ("DATA.JSON", ContentFormat.JSON),
            ("data.yaml", ContentFormat.YAML),
            ("config/data.yml", ContentFormat.YAML),
            ("data.txt", ContentFormat.TEXT),
            ("README", ContentFormat.TEXT),
        ],
    )
    def test_format_for_path(self, path, expected):
        assert format_for_path(path) is expected

    def test_format_for_content_type(self):
        assert format_for_content_type("application/json; charset=utf-8") is ContentFormat.JSON
        assert format_for_content_type("application/x-yaml") is ContentFormat.YAML
        assert format_for_content_type("text/plain") is ContentFormat.TEXT

    def test_feature_flags_always_upload_json(self):
        assert (
            content_type_for(ContentFormat.YAML, ProfileKind.FEATURE_FLAGS)
            == "application/json"
        )
        assert content_type_for(ContentFormat.YAML, ProfileKind.FREEFORM) == "application/x-yaml"
        assert content_type_for(ContentFormat.TEXT, ProfileKind.FREEFORM) == "text/plain"


class TestValidateLocalData:
    """Test pre-upload validation."""

    def test_valid_json(self):
        validate_local_data(b'{"a": 1}', ContentFormat.JSON)

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            validate_local_data(b'{"a": ', ContentFormat.JSON)

    def test_text_is_not_parsed(self):
        validate_local_data(b"{not json", ContentFormat.TEXT)

    def test_size_limit_is_checked_first(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_local_data(b"{" * (MAX_CONFIG_SIZE + 1), ContentFormat.JSON)
        assert exc_info.value.error_code == ErrorCodes.CONTENT_TOO_LARGE

    def test_exactly_max_size_is_allowed(self):
        validate_local_data(b"x" * MAX_CONFIG_SIZE, ContentFormat.TEXT)
