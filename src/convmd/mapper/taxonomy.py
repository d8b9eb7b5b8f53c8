"""Tag to category classification.

A document's free-form tags are reduced to exactly one category from a
small fixed taxonomy through a static lookup table.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType

from convmd.exceptions import AmbiguousCategoryError
from convmd.utils.logging import get_logger

log = get_logger(__name__)


class Category(str, Enum):
    """Topical category attached to every converted post."""

    ALGORITHMS = "Algorithms"
    LANGUAGE = "Language"
    OPERATING_SYSTEM = "OperatingSystem"
    NETWORK = "Network"
    OTHER = "Other"

    @property
    def slug(self) -> str:
        """Lower-cased name used in output front matter."""
        return self.value.lower()


TagCategoryTable = Mapping[str, Category]

_CATEGORY_TAGS: dict[Category, tuple[str, ...]] = {
    Category.ALGORITHMS: (
        "string",
        "string pattern match",
        "algorithm",
        "graph",
    ),
    Category.LANGUAGE: (
        "c",
        "common lisp",
        "php",
        "haskell",
        "hy",
        "python",
        "compiler",
        "llvm",
    ),
    Category.OPERATING_SYSTEM: (
        "linux",
        "kernel",
        "fs",
        "shell",
        "bash",
        "sudo",
    ),
    Category.NETWORK: (
        "ietf rfcs",
        "ietf",
    ),
}


def normalize_tag(tag: str) -> str:
    """Normalize a tag for table lookup."""
    return tag.strip().lower()


def build_tag_table(
    category_tags: Mapping[Category, Iterable[str]] | None = None,
) -> TagCategoryTable:
    """Build the read-only tag -> category table.

    Args:
        category_tags: Tags per category (default: the built-in taxonomy)

    Returns:
        Immutable mapping from normalized tag to category
    """
    source = _CATEGORY_TAGS if category_tags is None else category_tags
    table = {
        normalize_tag(tag): category for category, tags in source.items() for tag in tags
    }
    return MappingProxyType(table)


class TagClassifier:
    """Resolve a tag list to a single category."""

    def __init__(self, table: TagCategoryTable) -> None:
        self.table = table

    def classify(self, tags: Iterable[str]) -> list[Category]:
        """Classify tags into exactly one category.

        Tags without a table entry are ignored; no match at all yields
        ``Category.OTHER``.

        Args:
            tags: Tags in front matter order

        Returns:
            Single-element list with the category

        Raises:
            AmbiguousCategoryError: If matching tags disagree on the category
        """
        matches = [
            (tag, self.table[normalize_tag(tag)])
            for tag in tags
            if normalize_tag(tag) in self.table
        ]

        found = {category for _, category in matches}
        if len(found) > 1:
            raise AmbiguousCategoryError([(tag, category.value) for tag, category in matches])

        category = matches[0][1] if matches else Category.OTHER
        log.debug("Classified tags", category=category.value, matched=len(matches))
        return [category]
