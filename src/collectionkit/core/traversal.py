"""Traversal helpers shared by collection consumers."""

import itertools
import weakref
from collections.abc import Iterable
from typing import Any, TypeVar

from collectionkit.core.collection import Collection
from collectionkit.core.node import Node

T = TypeVar("T")

_item_counts: weakref.WeakKeyDictionary[Any, int] = weakref.WeakKeyDictionary()


def get_child_nodes(node: Node, collection: Collection) -> Iterable[Node]:
    """Get direct children of a node.

    Prefers the collection's own child lookup; falls back to the node's
    resolved child nodes.
    """
    get_children = getattr(collection, "get_children", None)
    if callable(get_children):
        return get_children(node.key)
    return node.child_nodes


def get_first_item(iterable: Iterable[T]) -> T | None:
    """Get the first element, None if empty."""
    return next(iter(iterable), None)


def get_last_item(iterable: Iterable[T]) -> T | None:
    """Get the last element, None if empty. Consumes the whole iterable."""
    last: T | None = None
    for item in iterable:
        last = item
    return last


def get_nth_item(iterable: Iterable[T], index: int) -> T | None:
    """Get the element at ``index``, None for negative or out of range."""
    if index < 0:
        return None
    return next(itertools.islice(iterable, index, None), None)


def compare_node_order(collection: Collection, a: Node, b: Node) -> int:
    """Compare two nodes by document order.

    Siblings compare by index. Otherwise both ancestor chains are collected
    root-first and the first divergent ancestors are compared. When one node
    is an ancestor of the other, the ancestor comes first.

    Returns:
        Negative if a precedes b, positive if b precedes a, zero if equal
    """
    if a.parent_key == b.parent_key:
        return a.index - b.index

    a_chain = [*_get_ancestors(collection, a), a]
    b_chain = [*_get_ancestors(collection, b), b]

    for a_node, b_node in zip(a_chain, b_chain):
        if a_node.key != b_node.key:
            return a_node.index - b_node.index

    if any(node.key == b.key for node in a_chain):
        return 1
    return -1


def get_item_count(collection: Collection) -> int:
    """Count item nodes, excluding sections and other containers.

    Memoized per collection instance when the collection is hashable and
    weak-referenceable; collections are treated as immutable snapshots.
    """
    try:
        count = _item_counts.get(collection)
    except TypeError:
        # Unhashable or not weak-referenceable collections are counted every time
        return _count_items(collection)
    if count is not None:
        return count

    count = _count_items(collection)
    _item_counts[collection] = count
    return count


def _count_items(collection: Collection) -> int:
    return sum(1 for node in collection if node.type == "item")


def _get_ancestors(collection: Collection, node: Node) -> list[Node]:
    """Collect ancestors of a node, root first."""
    ancestors: list[Node] = []
    current: Node | None = node
    while current is not None and current.parent_key is not None:
        current = collection.get_item(current.parent_key)
        if current is not None:
            ancestors.append(current)
    ancestors.reverse()
    return ancestors
