"""
Content Normalizer

Canonicalizes configuration payloads so that formatting differences (key
order, indentation, line endings) never show up as changes. Also maps data
files to formats and AppConfig content types.
"""

import json
import logging
from enum import Enum
from pathlib import PurePath
from typing import Any, Union

import yaml

from ..api.models import ProfileKind
from ..config.constants import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT,
    CONTENT_TYPE_YAML,
    MAX_CONFIG_SIZE,
)
from ..config.generator import base_content_type
from ..error_handling import ErrorCodes, ErrorMessages, ParseError, ValidationError

logger = logging.getLogger(__name__)

# Fields AppConfig maintains on each FeatureFlags value entry
FEATURE_FLAG_METADATA_FIELDS = ("_createdAt", "_updatedAt")


class ContentFormat(Enum):
    """Payload formats understood by the normalizer."""

    JSON = "json"
    YAML = "yaml"
    TEXT = "text"


def format_for_path(path: Union[str, PurePath]) -> ContentFormat:
    """Infer a payload format from a file extension."""
    suffix = PurePath(path).suffix.lower()
    if suffix == ".json":
        return ContentFormat.JSON
    if suffix in (".yaml", ".yml"):
        return ContentFormat.YAML
    return ContentFormat.TEXT


def format_for_content_type(content_type: str) -> ContentFormat:
    """Infer a payload format from an AppConfig content type."""
    ct = base_content_type(content_type)
    if ct == CONTENT_TYPE_JSON:
        return ContentFormat.JSON
    if ct in (CONTENT_TYPE_YAML, "application/yaml"):
        return ContentFormat.YAML
    return ContentFormat.TEXT


def content_type_for(content_format: ContentFormat, profile_kind: ProfileKind) -> str:
    """Content type to upload; FeatureFlags data is always JSON."""
    if profile_kind is ProfileKind.FEATURE_FLAGS:
        return CONTENT_TYPE_JSON
    if content_format is ContentFormat.JSON:
        return CONTENT_TYPE_JSON
    if content_format is ContentFormat.YAML:
        return CONTENT_TYPE_YAML
    return CONTENT_TYPE_TEXT


def _decode(content: Union[str, bytes], content_format: ContentFormat) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(
            content_format.value, "content is not valid UTF-8", cause=e
        ) from e


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            "json",
            f"{e.msg} (line {e.lineno}, column {e.colno})",
            line_number=e.lineno,
            column=e.colno,
            cause=e,
        ) from e


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        detail = str(e).replace("\n", " ")
        raise ParseError(
            "yaml", detail, line_number=line, column=column, cause=e
        ) from e


def strip_feature_flag_metadata(data: Any) -> Any:
    """Drop timestamp metadata from each entry of the top-level ``values`` map.

    Flag definitions and any other part of the document are left untouched.
    """
    if not isinstance(data, dict):
        return data
    values = data.get("values")
    if not isinstance(values, dict):
        return data
    for entry in values.values():
        if isinstance(entry, dict):
            for metadata_field in FEATURE_FLAG_METADATA_FIELDS:
                entry.pop(metadata_field, None)
    return data


class ContentNormalizer:
    """Produces canonical text for JSON, YAML and plain-text payloads.

    ``normalize`` is idempotent, and for JSON and YAML the output does not
    depend on the key order of the input.
    """

    def normalize(
        self,
        content: Union[str, bytes],
        content_format: ContentFormat,
        profile_kind: ProfileKind = ProfileKind.FREEFORM,
    ) -> str:
        text = _decode(content, content_format)
        if content_format is ContentFormat.JSON:
            return self.normalize_json(text, profile_kind)
        if content_format is ContentFormat.YAML:
            return self.normalize_yaml(text)
        return self.normalize_text(text)

    def normalize_json(
        self, text: str, profile_kind: ProfileKind = ProfileKind.FREEFORM
    ) -> str:
        data = _parse_json(text)
        if profile_kind is ProfileKind.FEATURE_FLAGS:
            data = strip_feature_flag_metadata(data)
        return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n"

    def normalize_yaml(self, text: str) -> str:
        data = _parse_yaml(text)
        return yaml.safe_dump(
            data,
            sort_keys=True,
            default_flow_style=False,
            allow_unicode=True,
            indent=2,
        )

    def normalize_text(self, text: str) -> str:
        return text.replace("\r\n", "\n").rstrip("\n") + "\n"


def validate_local_data(content: bytes, content_format: ContentFormat) -> None:
    """Reject oversized content and content that does not parse."""
    if len(content) > MAX_CONFIG_SIZE:
        raise ValidationError(
            f"configuration data ({len(content)} bytes) exceeds maximum allowed "
            f"size ({MAX_CONFIG_SIZE} bytes)",
            error_code=ErrorCodes.CONTENT_TOO_LARGE,
            remediation=ErrorMessages.get_remediation(ErrorCodes.CONTENT_TOO_LARGE),
        )

    text = _decode(content, content_format)
    if content_format is ContentFormat.JSON:
        _parse_json(text)
    elif content_format is ContentFormat.YAML:
        _parse_yaml(text)
    logger.debug(f"Validated {len(content)} bytes of {content_format.value} data")
