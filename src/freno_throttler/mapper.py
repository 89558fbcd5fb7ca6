"""
Mappers resolve a caller context into the store names to check.

A mapper is any callable ``mapper(context) -> Iterable[store_name]``. It is
called once per poll, so it may return different stores over time.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable

StoreName = Hashable
Mapper = Callable[[Any], Iterable[StoreName]]


def identity_mapper(context: Any) -> list[StoreName]:
    """Treat the context itself as the store names.

    ``None`` maps to no stores, a single string to one store, and any other
    iterable to its items.
    """
    if context is None:
        return []
    if isinstance(context, (str, bytes)):
        return [context]
    return list(context)


def static_mapper(*store_names: StoreName) -> Mapper:
    """Mapper that ignores the context and always checks the same stores."""
    stores = list(store_names)

    def _mapper(context: Any) -> list[StoreName]:
        return list(stores)

    return _mapper
