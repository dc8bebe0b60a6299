"""Element model for declarative collection content.

Elements are lightweight, inert descriptions of authored content: a type
(an element descriptor such as ``Item``/``Section``, or a plain tag name), a
props mapping, and an optional key. They are never rendered here; the
collection builder only inspects them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from collectionkit.core.types import Key

if TYPE_CHECKING:
    from collectionkit.core.descriptors import ElementType

# Tag of the transparent grouping wrapper whose children splice into the parent
FRAGMENT_TAG = "fragment"


@dataclass(frozen=True, eq=False)
class Element:
    """Authored element: descriptor or tag, props and optional key."""

    type: ElementType | str
    props: Mapping[str, Any] = field(default_factory=dict)
    key: Key | None = None

    @property
    def children(self) -> Any:
        """Children passed to the element, if any."""
        return self.props.get("children")


def create_element(
    type: ElementType | str,
    props: Mapping[str, Any] | None = None,
    *children: Any,
) -> Element:
    """Create an element.

    A ``key`` entry in props is lifted onto the element. Positional children
    replace ``props["children"]``: a single child is stored as-is, several
    children as a list.

    Args:
        type: Element descriptor or plain tag name
        props: Element props
        *children: Child content (elements, strings, render functions)

    Returns:
        New Element
    """
    element_props = dict(props or {})
    key = element_props.pop("key", None)
    if len(children) == 1:
        element_props["children"] = children[0]
    elif children:
        element_props["children"] = list(children)
    return Element(type=type, props=element_props, key=key)


def is_element(value: object) -> bool:
    """Check whether a value is a structural element."""
    return isinstance(value, Element)


def flatten_children(children: Any) -> Iterator[Element]:
    """Iterate structural children, splicing fragments in place.

    Strings, numbers, None and other non-element entries are dropped.
    """
    if is_element(children):
        if getattr(children.type, "tag", None) == FRAGMENT_TAG:
            yield from flatten_children(children.children)
        else:
            yield children
        return

    if isinstance(children, Iterable) and not isinstance(children, (str, bytes, Mapping)):
        for child in children:
            yield from flatten_children(child)
