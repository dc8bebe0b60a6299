"""Node model produced by the collection builder.

A ``PartialNode`` is what an element descriptor knows about itself; the
builder resolves it into a ``Node`` with a guaranteed key and its position
in the flattened collection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypedDict

from collectionkit.core.elements import Element
from collectionkit.core.types import Key

Renderer = Callable[[Any], Any]
Wrapper = Callable[[Element], Element]
InvalidationPredicate = Callable[[Any], bool]


@dataclass
class PartialNode:
    """Incomplete node description yielded by element descriptors."""

    type: str | None = None
    key: Key | None = None
    value: Any = None
    element: Element | None = None
    wrapper: Wrapper | None = None
    rendered: Any = None
    text_value: str | None = None
    aria_label: str | None = None
    index: int = 0
    # Render function carried down from a parent for data-driven children
    renderer: Renderer | None = None
    has_child_nodes: bool = False
    child_nodes: Callable[[], Iterator[PartialNode]] | None = None
    props: Any = None
    should_invalidate: InvalidationPredicate | None = None


class NodeDict(TypedDict):
    """Dictionary representation of a node."""

    key: Key
    type: str
    text_value: str
    index: int
    level: int
    parent_key: Key | None
    prev_key: Key | None
    next_key: Key | None
    has_child_nodes: bool


@dataclass(eq=False)
class Node:
    """Finalized collection entry.

    Nodes compare by identity: the builder hands out the same object for an
    unchanged source value across rebuilds. Linkage fields are refreshed on
    reuse, between build passes only.
    """

    type: str
    key: Key
    value: Any = None
    element: Element | None = None
    wrapper: Wrapper | None = None
    rendered: Any = None
    text_value: str = ""
    aria_label: str | None = None
    index: int = 0
    level: int = 0
    has_child_nodes: bool = False
    child_nodes: tuple[Node, ...] = ()
    parent_key: Key | None = None
    prev_key: Key | None = None
    next_key: Key | None = None
    props: Any = None
    should_invalidate: InvalidationPredicate | None = None

    def descendants(self) -> Iterator[Node]:
        """Traverse child nodes depth-first, excluding self."""
        for child in self.child_nodes:
            yield child
            yield from child.descendants()

    def to_dict(self) -> NodeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "type": self.type,
            "text_value": self.text_value,
            "index": self.index,
            "level": self.level,
            "parent_key": self.parent_key,
            "prev_key": self.prev_key,
            "next_key": self.next_key,
            "has_child_nodes": self.has_child_nodes,
        }
