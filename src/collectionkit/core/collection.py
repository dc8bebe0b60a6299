"""Collection interface and the default flat list collection."""

import logging
from collections.abc import Iterable, Iterator
from typing import Protocol, runtime_checkable

from collectionkit.core.node import Node
from collectionkit.core.types import Key

logger = logging.getLogger(__name__)


@runtime_checkable
class Collection(Protocol):
    """Ordered, keyed, iterable container of nodes.

    Implementations may additionally provide ``get_children(key)`` and
    ``get_text_value(key)``; traversal helpers use them when present.
    """

    @property
    def size(self) -> int: ...

    def __iter__(self) -> Iterator[Node]: ...

    def get_keys(self) -> Iterable[Key]: ...

    def get_item(self, key: Key) -> Node | None: ...

    def at(self, idx: int) -> Node | None: ...

    def get_key_before(self, key: Key) -> Key | None: ...

    def get_key_after(self, key: Key) -> Key | None: ...

    def get_first_key(self) -> Key | None: ...

    def get_last_key(self) -> Key | None: ...


class ListCollection:
    """Collection over a flattened node sequence.

    Stores nodes in a flat list in depth-first order with a key index,
    providing O(1) key and position lookups. Sibling linkage comes from the
    nodes' ``prev_key``/``next_key`` as assigned by the builder.
    """

    __slots__ = ("__weakref__", "_key_index", "_nodes")

    def __init__(self, nodes: Iterable[Node]) -> None:
        """Initialize collection.

        Args:
            nodes: Nodes in collection order (e.g., CollectionBuilder.build output)
        """
        self._nodes = list(nodes)
        self._key_index: dict[Key, int] = {}
        for i, node in enumerate(self._nodes):
            if node.key in self._key_index:
                logger.warning(f"Duplicate key {node.key!r} in collection, last one wins")
            self._key_index[node.key] = i
        logger.debug(f"Created collection with {len(self._nodes)} nodes")

    @property
    def size(self) -> int:
        """Number of nodes in the collection."""
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._key_index

    def get_keys(self) -> list[Key]:
        """Get all keys in collection order."""
        return [node.key for node in self._nodes]

    def get_item(self, key: Key) -> Node | None:
        """Get node by key.

        Args:
            key: Node key

        Returns:
            Node if found, None otherwise
        """
        idx = self._key_index.get(key)
        if idx is None:
            return None
        return self._nodes[idx]

    def at(self, idx: int) -> Node | None:
        """Get node by position, None when out of range."""
        if idx < 0 or idx >= len(self._nodes):
            return None
        return self._nodes[idx]

    def get_key_before(self, key: Key) -> Key | None:
        """Get the key preceding the given key."""
        node = self.get_item(key)
        return node.prev_key if node is not None else None

    def get_key_after(self, key: Key) -> Key | None:
        """Get the key following the given key."""
        node = self.get_item(key)
        return node.next_key if node is not None else None

    def get_first_key(self) -> Key | None:
        """Get the first key, None for an empty collection."""
        return self._nodes[0].key if self._nodes else None

    def get_last_key(self) -> Key | None:
        """Get the last key, None for an empty collection."""
        return self._nodes[-1].key if self._nodes else None

    def get_children(self, key: Key) -> list[Node]:
        """Get direct children of a node.

        Args:
            key: Parent node key

        Returns:
            List of child nodes, empty if not found or no children
        """
        node = self.get_item(key)
        if node is None:
            return []
        return list(node.child_nodes)

    def get_text_value(self, key: Key) -> str:
        """Get the plain text value of a node, empty if not found."""
        node = self.get_item(key)
        return node.text_value if node is not None else ""
