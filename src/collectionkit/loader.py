"""Data document loading.

Turns a JSON or TOML document into collection props. A document holds
either a flat/nested ``items`` array or a ``sections`` array:

    {
        "label_field": "name",          # item field shown as title/text
        "children_field": "children",   # item field holding child items
        "key_field": "id",              # optional explicit key field
        "sections": [
            {"key": "fruits", "title": "Fruits", "items": [{"id": 1, "name": "Apple"}]}
        ]
    }
"""

import json
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from collectionkit.core.builder import CollectionProps
from collectionkit.core.descriptors import Item, Section
from collectionkit.core.elements import Element, create_element
from collectionkit.core.types import KeyGetter


def load_document(path: Path) -> CollectionProps:
    """Load collection props from a data document.

    Args:
        path: Path to a .json or .toml document

    Returns:
        CollectionProps ready for CollectionBuilder.build()

    Raises:
        ValueError: If the document is malformed
    """
    if path.suffix.lower() == ".toml":
        with path.open("rb") as f:
            data = tomllib.load(f)
    else:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return parse_document(data)


def parse_document(data: object) -> CollectionProps:
    """Convert a parsed document into collection props.

    Raises:
        ValueError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Document must be an object")

    label_field = _get_str(data, "label_field", "name")
    children_field = _get_str(data, "children_field", "children")
    key_field = data.get("key_field")
    if key_field is not None and not isinstance(key_field, str):
        raise ValueError("key_field must be a string")

    get_key = _make_key_getter(key_field)
    render = _make_renderer(label_field, children_field)

    if "sections" in data:
        sections = data["sections"]
        if not isinstance(sections, list):
            raise ValueError("sections must be a list")
        return CollectionProps(
            children=[_section_element(section, render) for section in sections],
            get_key=get_key,
        )

    items = data.get("items", [])
    if not isinstance(items, list):
        raise ValueError("items must be a list")
    return CollectionProps(children=render, items=items, get_key=get_key)


def _section_element(section: object, render: Callable[[Any], Element]) -> Element:
    if not isinstance(section, dict):
        raise ValueError("sections items must be objects")

    items = section.get("items", [])
    if not isinstance(items, list):
        raise ValueError("section items must be a list")

    return create_element(
        Section,
        {
            "key": section.get("key"),
            "title": section.get("title"),
            "aria_label": section.get("aria_label"),
            "items": items,
        },
        render,
    )


def _make_renderer(label_field: str, children_field: str) -> Callable[[Any], Element]:
    def render(item: Any) -> Element:
        if not isinstance(item, Mapping):
            return create_element(Item, {"title": str(item)})

        label = item.get(label_field)
        child_items = item.get(children_field)
        return create_element(
            Item,
            {
                "title": str(label) if label is not None else None,
                "text_value": item.get("text_value"),
                "child_items": child_items if isinstance(child_items, list) else None,
            },
        )

    return render


def _make_key_getter(key_field: str | None) -> KeyGetter:
    def get_key(item: Any) -> Any:
        # Scalar items are their own keys
        if isinstance(item, (str, int)):
            return item
        if key_field is None:
            return None
        if isinstance(item, Mapping):
            return item.get(key_field)
        return getattr(item, key_field, None)

    return get_key


def _get_str(data: dict[str, Any], name: str, default: str) -> str:
    value = data.get(name, default)
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value
