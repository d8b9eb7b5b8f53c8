"""Dialect mappings for convmd."""

from convmd.mapper.dialects import Dialect
from convmd.mapper.taxonomy import (
    Category,
    TagCategoryTable,
    TagClassifier,
    build_tag_table,
    normalize_tag,
)

__all__ = [
    "Category",
    "Dialect",
    "TagCategoryTable",
    "TagClassifier",
    "build_tag_table",
    "normalize_tag",
]
