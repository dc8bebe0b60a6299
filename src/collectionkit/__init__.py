"""collectionkit - Normalized, keyed collections from declarative content.

Re-exports the building blocks most callers need.
"""

from collectionkit.binding import CollectionBinding, use_collection
from collectionkit.core.builder import CollectionBuilder, CollectionProps
from collectionkit.core.cache import NodeCache
from collectionkit.core.collection import Collection, ListCollection
from collectionkit.core.context import CollectionContext
from collectionkit.core.descriptors import (
    ElementType,
    Fragment,
    Item,
    Section,
    register_descriptor,
)
from collectionkit.core.elements import Element, create_element, is_element
from collectionkit.core.errors import CollectionError
from collectionkit.core.node import Node, PartialNode
from collectionkit.core.traversal import (
    compare_node_order,
    get_child_nodes,
    get_first_item,
    get_item_count,
    get_last_item,
    get_nth_item,
)
from collectionkit.core.types import Key

__all__ = [
    "Collection",
    "CollectionBinding",
    "CollectionBuilder",
    "CollectionContext",
    "CollectionError",
    "CollectionProps",
    "Element",
    "ElementType",
    "Fragment",
    "Item",
    "Key",
    "ListCollection",
    "Node",
    "NodeCache",
    "PartialNode",
    "Section",
    "compare_node_order",
    "create_element",
    "get_child_nodes",
    "get_first_item",
    "get_item_count",
    "get_last_item",
    "get_nth_item",
    "is_element",
    "register_descriptor",
    "use_collection",
]
