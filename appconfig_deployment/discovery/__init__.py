"""
Resource Discovery

Name resolution and listing of AppConfig resources.
"""

from .lister import ResourceLister, ResourcesTree, format_human_readable, format_json
from .resolver import ResourceResolver, find_unique_id

__all__ = [
    "ResourceResolver",
    "find_unique_id",
    "ResourceLister",
    "ResourcesTree",
    "format_human_readable",
    "format_json",
]
