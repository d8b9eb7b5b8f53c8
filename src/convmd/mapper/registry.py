"""Registry of dialect mappings."""

from collections.abc import Callable
from typing import Any

from convmd.exceptions import UnsupportedDialectPairError
from convmd.mapper.base import Mapper
from convmd.mapper.dialects import Dialect
from convmd.mapper.jekyll import JekyllMapper

MAPPERS: dict[tuple[Dialect, Dialect], Callable[..., Mapper]] = {
    (Dialect.DEFAULT, Dialect.JEKYLL): JekyllMapper,
}


def supported_pairs() -> list[tuple[Dialect, Dialect]]:
    """List the registered (source, target) dialect pairs."""
    return list(MAPPERS)


def get_mapper(source: Dialect, target: Dialect, **options: Any) -> Mapper:
    """Create the mapper for a dialect pair.

    Args:
        source: Input dialect
        target: Output dialect
        **options: Keyword arguments passed to the mapper constructor

    Raises:
        UnsupportedDialectPairError: If no mapper is registered for the pair
    """
    factory = MAPPERS.get((source, target))
    if factory is None:
        raise UnsupportedDialectPairError(source.value, target.value)
    return factory(**options)
