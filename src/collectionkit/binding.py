"""Reactive binding between collection inputs and a built collection.

The binding owns one CollectionBuilder (and therefore one node cache) and
rebuilds the collection only when a tracked input changed identity since
the last access. Replacing ``props.items`` with a new list triggers a
rebuild; mutating the list in place does not, call ``invalidate()`` for
that.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from collectionkit.core.builder import CollectionBuilder, CollectionProps
from collectionkit.core.collection import ListCollection
from collectionkit.core.context import CollectionContext
from collectionkit.core.node import Node
from collectionkit.core.types import KeyGetter

logger = logging.getLogger(__name__)

C = TypeVar("C")

CollectionFactory = Callable[[Iterable[Node]], C]


class CollectionBinding(Generic[C]):
    """Lazily computed collection derived from props."""

    def __init__(
        self,
        props: CollectionProps,
        factory: CollectionFactory[C],
        context: CollectionContext | None = None,
    ) -> None:
        """Initialize binding.

        Args:
            props: Collection inputs, read on every access
            factory: Wraps the built node sequence into a collection
            context: Ambient context passed to every build
        """
        self._props = props
        self._factory = factory
        self._context = context
        self._builder = CollectionBuilder()
        self._inputs: tuple[Any, ...] | None = None
        self._value: C | None = None
        self._key_getter: KeyGetter | None = None

    @property
    def builder(self) -> CollectionBuilder:
        """Builder owned by this binding."""
        return self._builder

    @property
    def value(self) -> C:
        """Current collection, rebuilt when tracked inputs changed."""
        props = self._props
        if props.collection is not None:
            return props.collection

        inputs = (props.children, props.items, props.get_key)
        if self._value is None or self._inputs is None or not _same_inputs(inputs, self._inputs):
            logger.debug("Collection inputs changed, rebuilding")
            if self._value is not None and props.get_key is not self._key_getter:
                # Cached nodes carry keys from the previous getter
                self._builder.cache.clear()
            self._key_getter = props.get_key
            nodes = self._builder.build(
                CollectionProps(children=props.children, items=props.items, get_key=props.get_key),
                self._context,
            )
            self._value = self._factory(nodes)
            self._inputs = inputs
        return self._value

    def invalidate(self) -> None:
        """Force a rebuild on next access."""
        self._inputs = None


def use_collection(
    props: CollectionProps,
    factory: CollectionFactory[Any] = ListCollection,
    context: CollectionContext | None = None,
) -> CollectionBinding[Any]:
    """Bind props to a lazily rebuilt collection.

    Args:
        props: Collection inputs
        factory: Collection factory (default: ListCollection)
        context: Ambient context for descriptors and invalidation

    Returns:
        CollectionBinding whose ``value`` is the current collection
    """
    return CollectionBinding(props, factory, context)


def _same_inputs(current: tuple[Any, ...], previous: tuple[Any, ...]) -> bool:
    return all(a is b for a, b in zip(current, previous, strict=True))
