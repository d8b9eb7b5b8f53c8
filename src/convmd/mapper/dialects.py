"""Document dialects convmd can read or write."""

from enum import Enum


class Dialect(str, Enum):
    """Named front matter and body convention."""

    DEFAULT = "default"
    JEKYLL = "jekyll"

    @classmethod
    def parse(cls, value: str) -> "Dialect":
        """Parse a dialect name or its one-letter alias, case-insensitively.

        Raises:
            ValueError: If the name matches no dialect
        """
        dialect = _ALIASES.get(value.strip().lower())
        if dialect is None:
            names = ", ".join(sorted(_ALIASES))
            raise ValueError(f"No dialect matched for {value!r} (expected one of: {names})")
        return dialect


_ALIASES = {
    "default": Dialect.DEFAULT,
    "d": Dialect.DEFAULT,
    "jekyll": Dialect.JEKYLL,
    "j": Dialect.JEKYLL,
}
