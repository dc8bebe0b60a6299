"""Identity-keyed node cache.

Cache structure:
    current    {id(value): (value, node)}   # entries touched in this pass
    previous   {id(value): (value, node)}   # entries from the last pass

Entries hold a strong reference to their value, so an ``id()`` cannot be
recycled while its entry exists. Lookups promote previous-pass entries into
the current pass; whatever is left in ``previous`` when the next pass starts
is dropped.
"""

from collections.abc import Iterator
from typing import Any

from collectionkit.core.node import Node

_Entry = tuple[Any, Node]


class NodeCache:
    """Cache of built nodes keyed by source value identity (not equality)."""

    __slots__ = ("_current", "_previous")

    def __init__(self) -> None:
        self._current: dict[int, _Entry] = {}
        self._previous: dict[int, _Entry] = {}

    def begin_pass(self) -> None:
        """Start a build pass, dropping entries untouched by the last one."""
        self._previous = self._current
        self._current = {}

    def get(self, value: Any) -> Node | None:
        """Retrieve the node built for a value.

        Args:
            value: Source value (looked up by identity)

        Returns:
            Cached Node, or None if the value was not seen recently
        """
        ident = id(value)
        entry = self._current.get(ident)
        if entry is None:
            entry = self._previous.pop(ident, None)
            if entry is None:
                return None
            self._current[ident] = entry
        cached_value, node = entry
        if cached_value is not value:
            return None
        return node

    def set(self, value: Any, node: Node) -> None:
        """Store the node built for a value."""
        ident = id(value)
        self._previous.pop(ident, None)
        self._current[ident] = (value, node)

    def discard(self, value: Any) -> None:
        """Remove the entry for a value, if any."""
        ident = id(value)
        self._current.pop(ident, None)
        self._previous.pop(ident, None)

    def clear(self) -> None:
        """Remove all entries."""
        self._current.clear()
        self._previous.clear()

    def __contains__(self, value: object) -> bool:
        entry = self._current.get(id(value)) or self._previous.get(id(value))
        return entry is not None and entry[0] is value

    def __len__(self) -> int:
        return len(self._current) + len(self._previous)

    def __iter__(self) -> Iterator[Node]:
        for _, node in self._current.values():
            yield node
        for _, node in self._previous.values():
            yield node
