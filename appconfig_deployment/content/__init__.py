"""
Content Handling

Normalization and comparison of configuration payloads.
"""

from .diff_engine import DiffEngine, DiffResult
from .normalizer import (
    ContentFormat,
    ContentNormalizer,
    content_type_for,
    format_for_content_type,
    format_for_path,
    strip_feature_flag_metadata,
    validate_local_data,
)

__all__ = [
    "DiffEngine",
    "DiffResult",
    "ContentFormat",
    "ContentNormalizer",
    "content_type_for",
    "format_for_content_type",
    "format_for_path",
    "strip_feature_flag_metadata",
    "validate_local_data",
]
