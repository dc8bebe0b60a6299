"""Element descriptors: Item and Section.

Descriptors are tagged element types. They never produce output of their
own; the collection builder asks them to describe themselves as a partial
node plus a lazy sequence of child partial nodes. Dispatch goes through a
registry keyed by tag, so new variants register a function instead of
subclassing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from collectionkit.core.context import CollectionContext
from collectionkit.core.elements import FRAGMENT_TAG, Element, flatten_children, is_element
from collectionkit.core.errors import CollectionError
from collectionkit.core.node import PartialNode

logger = logging.getLogger(__name__)

TEXT_VALUE_WARNING = (
    "<Item> with non-plain text contents is unsupported by type to select "
    "for accessibility. Please add a `text_value` prop."
)

DescribeFn = Callable[[Mapping[str, Any], CollectionContext | None], Iterator[PartialNode]]

_registry: dict[str, DescribeFn] = {}


class ElementType:
    """Tagged element type usable as ``Element.type``.

    Calling an element type like a component yields nothing: descriptors
    only occupy a place in the authored structure.
    """

    __slots__ = ("tag",)

    def __init__(self, tag: str) -> None:
        self.tag = tag

    def __call__(self, props: Mapping[str, Any] | None = None) -> None:
        return None

    def __repr__(self) -> str:
        return f"<{self.tag.capitalize()}>"

    def get_collection_node(
        self,
        props: Mapping[str, Any],
        context: CollectionContext | None = None,
    ) -> Iterator[PartialNode]:
        """Describe an element of this type as partial nodes.

        Raises:
            LookupError: If no descriptor is registered for the tag
        """
        describe = get_descriptor(self.tag)
        if describe is None:
            raise LookupError(f"No collection descriptor registered for {self!r}")
        return describe(props, context)


def register_descriptor(tag: str, describe: DescribeFn) -> None:
    """Register the describe function for an element tag."""
    _registry[tag] = describe


def get_descriptor(tag: str) -> DescribeFn | None:
    """Get the describe function for an element tag."""
    return _registry.get(tag)


def descriptor_for(element: Element) -> DescribeFn | None:
    """Resolve the describe function of an element, None for plain tags."""
    tag = getattr(element.type, "tag", None)
    if tag is None:
        return None
    return get_descriptor(tag)


def describe_item(
    props: Mapping[str, Any],
    context: CollectionContext | None = None,
) -> Iterator[PartialNode]:
    """Describe an item element."""
    title = props.get("title")
    children = props.get("children")
    child_items = props.get("child_items")
    aria_label = props.get("aria_label")

    rendered = title if title is not None else children
    text_value = (
        props.get("text_value")
        or (rendered if isinstance(rendered, str) else "")
        or aria_label
        or ""
    )

    if not text_value and not _suppresses_diagnostics(context):
        logger.warning(TEXT_VALUE_WARNING)

    def child_nodes() -> Iterator[PartialNode]:
        if child_items is not None:
            for child in child_items:
                yield PartialNode(type="item", value=child)
        elif title is not None:
            for child in flatten_children(children):
                yield PartialNode(type="item", element=child)

    yield PartialNode(
        type="item",
        props=props,
        rendered=rendered,
        text_value=text_value,
        aria_label=aria_label,
        has_child_nodes=_has_child_items(props),
        child_nodes=child_nodes,
    )


def describe_section(
    props: Mapping[str, Any],
    context: CollectionContext | None = None,
) -> Iterator[PartialNode]:
    """Describe a section element."""
    children = props.get("children")
    items = props.get("items")

    def child_nodes() -> Iterator[PartialNode]:
        if callable(children) and not is_element(children):
            if items is None:
                raise CollectionError("props.children was a function but props.items is missing")
            for item in items:
                yield PartialNode(type="item", value=item, renderer=children)
        else:
            for child in flatten_children(children):
                yield PartialNode(type="item", element=child)

    yield PartialNode(
        type="section",
        props=props,
        rendered=props.get("title"),
        aria_label=props.get("aria_label"),
        has_child_nodes=True,
        child_nodes=child_nodes,
    )


def describe_content(content: Any, props: Mapping[str, Any] | None = None) -> PartialNode:
    """Describe content without a descriptor as an implicit item.

    Used for elements with plain tag types and for render functions that
    return something other than an element.
    """
    text = content
    if is_element(content):
        text = content.children
    return PartialNode(
        type="item",
        props=props,
        rendered=content,
        text_value=text if isinstance(text, str) else "",
    )


def _has_child_items(props: Mapping[str, Any]) -> bool:
    """Resolve whether an item declares children."""
    has_child_items = props.get("has_child_items")
    if has_child_items is not None:
        return bool(has_child_items)

    if props.get("child_items") is not None:
        return True

    if props.get("title") is not None:
        return any(True for _ in flatten_children(props.get("children")))

    return False


def _suppresses_diagnostics(context: CollectionContext | None) -> bool:
    if context is None:
        return False
    return context.suppress_text_value_warning or context.production


Item = ElementType("item")
Section = ElementType("section")
Fragment = ElementType(FRAGMENT_TAG)

register_descriptor(Item.tag, describe_item)
register_descriptor(Section.tag, describe_section)
