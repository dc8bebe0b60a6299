"""Collection builder.

Walks declarative collection content (static elements, or a data set paired
with a render function), asks element descriptors to describe themselves,
resolves keys and nests children. The result is a lazy, flattened,
depth-first sequence of linked nodes. Nodes built from data values are
cached by value identity so an unchanged value yields the same Node object
on the next build.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any

from collectionkit.core.cache import NodeCache
from collectionkit.core.context import CollectionContext
from collectionkit.core.descriptors import ElementType, describe_content, descriptor_for
from collectionkit.core.elements import Element, flatten_children, is_element
from collectionkit.core.errors import CollectionError
from collectionkit.core.node import InvalidationPredicate, Node, PartialNode, Renderer, Wrapper
from collectionkit.core.types import Key, KeyGetter

logger = logging.getLogger(__name__)


@dataclass
class CollectionProps:
    """Inputs of a collection.

    ``children`` is either static content (an element, a list of elements,
    fragments) or a one-argument render function applied to each entry of
    ``items``. ``collection`` short-circuits building entirely and is
    honoured by the binding, not the builder. ``disabled_keys`` is passed
    through for consumers.
    """

    children: Any = None
    items: Iterable[Any] | None = None
    collection: Any = None
    get_key: KeyGetter | None = None
    disabled_keys: Iterable[Key] | None = None


@dataclass(frozen=True)
class _BuildState:
    renderer: Renderer | None = None
    get_key: KeyGetter | None = None
    context: CollectionContext | None = None


class CollectionBuilder:
    """Builds flattened node sequences, reusing nodes across builds.

    One builder owns one node cache; use one builder per collection owner.
    """

    def __init__(self) -> None:
        self._cache = NodeCache()

    @property
    def cache(self) -> NodeCache:
        """Node cache shared by all builds of this builder."""
        return self._cache

    def build(
        self,
        props: CollectionProps,
        context: CollectionContext | None = None,
    ) -> Iterator[Node]:
        """Build the nodes of a collection.

        Nothing runs until the returned iterator is consumed. Each top-level
        subtree is resolved when iteration reaches it, so caller errors in a
        nested section surface when that section is reached.

        Args:
            props: Collection inputs
            context: Ambient context for descriptors and invalidation

        Returns:
            Iterator of linked nodes in depth-first order

        Raises:
            CollectionError: On consumption, if children is a render
                function without items, or a data value has no key
        """
        return _link(_flatten(self._iterate_collection(props, context)))

    def _iterate_collection(
        self,
        props: CollectionProps,
        context: CollectionContext | None,
    ) -> Iterator[Node]:
        self._cache.begin_pass()

        children = props.children
        renders = _is_render_function(children)
        if renders and props.items is None:
            raise CollectionError("props.children was a function but props.items is missing")

        state = _BuildState(
            renderer=children if renders else None,
            get_key=props.get_key,
            context=context,
        )

        seeds: Iterator[PartialNode]
        if props.items is not None:
            seeds = (
                PartialNode(value=item, element=item if not renders and is_element(item) else None)
                for item in props.items
            )
        else:
            seeds = (PartialNode(element=child) for child in flatten_children(children))

        index = 0
        for seed in seeds:
            seed.index = index
            for node in self._get_full_node(seed, state, None):
                index += 1
                yield node

        logger.debug(f"Built {index} top-level nodes ({len(self._cache)} cached)")

    def _get_full_node(
        self,
        partial: PartialNode,
        state: _BuildState,
        parent_node: Node | None,
    ) -> Iterator[Node]:
        """Resolve a partial node into nodes with their subtrees."""
        element = partial.element

        if element is None and partial.value is not None:
            cached = self._cache.get(partial.value)
            predicate = partial.should_invalidate
            if cached is not None:
                predicate = predicate or cached.should_invalidate
                stale = predicate is not None and predicate(state.context)
                if not stale and not _key_changed(cached, partial, state):
                    yield self._reuse(cached, partial, predicate, parent_node)
                    return
                logger.debug(f"Invalidated cached node {cached.key!r}")

            content = partial.value
            if state.renderer is not None:
                content = state.renderer(partial.value)

            if is_element(content):
                element = content
            else:
                implicit = describe_content(content)
                partial = replace(
                    partial,
                    type=partial.type or implicit.type,
                    rendered=implicit.rendered,
                    text_value=partial.text_value or implicit.text_value,
                )

        if element is not None:
            yield from self._describe_element(element, partial, state, parent_node)
            return

        # Partial nodes without a type are not structural
        if partial.type is None:
            return

        key = partial.key
        if key is None:
            key = self._get_key(None, partial.value, partial.index, state, parent_node)

        node = Node(
            type=partial.type,
            key=key,
            value=partial.value,
            wrapper=partial.wrapper,
            rendered=partial.rendered,
            text_value=partial.text_value or "",
            aria_label=partial.aria_label,
            index=partial.index,
            level=parent_node.level + 1 if parent_node is not None else 0,
            has_child_nodes=partial.has_child_nodes,
            parent_key=parent_node.key if parent_node is not None else None,
            props=partial.props,
            should_invalidate=partial.should_invalidate,
        )
        if partial.has_child_nodes and partial.child_nodes is not None:
            node.child_nodes = tuple(self._resolve_children(node, partial.child_nodes(), state))

        if node.value is not None:
            self._cache.set(node.value, node)
        yield node

    def _describe_element(
        self,
        element: Element,
        partial: PartialNode,
        state: _BuildState,
        parent_node: Node | None,
    ) -> Iterator[Node]:
        """Ask an element's descriptor for partial nodes and resolve them."""
        describe = descriptor_for(element)
        if describe is None:
            described: list[PartialNode] = [describe_content(element, element.props)]
        else:
            described = list(describe(element.props, state.context))

        # One value described as several nodes cannot map to a single cache entry
        cacheable = len(described) == 1

        index = partial.index
        for child in described:
            value = child.value if child.value is not None else partial.value
            key = child.key
            if key is None:
                key = self._get_key(element, value, index, state, parent_node)

            resolved = replace(
                child,
                key=key,
                index=index,
                wrapper=_compose(partial.wrapper, child.wrapper),
                should_invalidate=child.should_invalidate or partial.should_invalidate,
            )
            for node in self._get_full_node(resolved, self._child_state(state, child), parent_node):
                node.value = value
                node.element = element
                if value is not None:
                    if cacheable:
                        self._cache.set(value, node)
                    else:
                        self._cache.discard(value)
                index += 1
                yield node

    def _resolve_children(
        self,
        node: Node,
        children: Iterable[PartialNode],
        state: _BuildState,
    ) -> Iterator[Node]:
        index = 0
        for child in children:
            child.index = index
            for child_node in self._get_full_node(child, self._child_state(state, child), node):
                index += 1
                yield child_node

    def _reuse(
        self,
        cached: Node,
        partial: PartialNode,
        predicate: InvalidationPredicate | None,
        parent_node: Node | None,
    ) -> Node:
        """Refresh the position of a cached node for the current pass."""
        cached.index = partial.index
        cached.parent_key = parent_node.key if parent_node is not None else None
        cached.should_invalidate = predicate
        _set_level(cached, parent_node.level + 1 if parent_node is not None else 0)

        # Keep cached descendants alive for the next pass, except values shared
        # by several nodes
        owners: dict[int, Node | None] = {}
        for descendant in cached.descendants():
            if descendant.value is not None:
                ident = id(descendant.value)
                owners[ident] = None if ident in owners else descendant
        for owner in owners.values():
            if owner is not None:
                self._cache.set(owner.value, owner)
        return cached

    def _child_state(self, state: _BuildState, partial: PartialNode) -> _BuildState:
        if partial.renderer is None:
            return state
        return replace(state, renderer=partial.renderer)

    def _get_key(
        self,
        element: Element | None,
        value: Any,
        index: int,
        state: _BuildState,
        parent_node: Node | None,
    ) -> Key:
        """Determine the key of a node without an explicit key.

        Priority: key getter applied to the value, the element's key, the
        value's own ``key``/``id`` field, then a positional key for nodes
        that are not backed by a value.

        Raises:
            CollectionError: If a value-backed node has no resolvable key
        """
        if value is not None and state.get_key is not None:
            key = state.get_key(value)
            if key is not None:
                return key

        if element is not None and element.key is not None:
            return element.key

        if value is not None:
            key = _identifying_key(value)
            if key is None:
                raise CollectionError(f"No key found for item {value!r}")
            return key

        if parent_node is not None:
            return f"{parent_node.key}.{index}"
        return f"$.{index}"


def _key_changed(cached: Node, partial: PartialNode, state: _BuildState) -> bool:
    """Check whether a cached node's key no longer matches its seed."""
    key = partial.key
    if key is None and state.get_key is not None:
        key = state.get_key(partial.value)
    return key is not None and key != cached.key


def _is_render_function(children: Any) -> bool:
    return callable(children) and not isinstance(children, ElementType)


def _identifying_key(value: Any) -> Key | None:
    """Read the ``key`` or ``id`` field of a data value."""
    if isinstance(value, Mapping):
        key = value.get("key")
        if key is None:
            key = value.get("id")
    else:
        key = getattr(value, "key", None)
        if key is None or callable(key):
            key = getattr(value, "id", None)
    if key is None or callable(key):
        return None
    return key


def _compose(outer: Wrapper | None, inner: Wrapper | None) -> Wrapper | None:
    """Compose element wrappers, applying inner first."""
    if outer is not None and inner is not None:
        return lambda element: outer(inner(element))
    return outer or inner


def _set_level(node: Node, level: int) -> None:
    node.level = level
    for child in node.child_nodes:
        _set_level(child, level + 1)


def _flatten(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield each node followed by its descendants."""
    for node in nodes:
        yield node
        yield from node.descendants()


def _link(nodes: Iterable[Node]) -> Iterator[Node]:
    """Link prev/next keys in iteration order.

    Holds one node back so its ``next_key`` is set before it is yielded.
    """
    previous: Node | None = None
    for node in nodes:
        node.prev_key = previous.key if previous is not None else None
        node.next_key = None
        if previous is not None:
            previous.next_key = node.key
            yield previous
        previous = node
    if previous is not None:
        yield previous
