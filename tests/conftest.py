"""Shared test fixtures."""

import pytest
from collectionkit.core.builder import CollectionBuilder
from collectionkit.core.context import CollectionContext
from collectionkit.core.descriptors import Item, Section
from collectionkit.core.elements import Element, create_element


@pytest.fixture
def builder() -> CollectionBuilder:
    """Create a fresh builder with an empty node cache."""
    return CollectionBuilder()


@pytest.fixture
def quiet_context() -> CollectionContext:
    """Context that suppresses the text value warning."""
    return CollectionContext(suppress_text_value_warning=True)


@pytest.fixture
def fruits_section() -> Element:
    """Create a "Fruits" section with two static items."""
    return create_element(
        Section,
        {"key": "fruits", "title": "Fruits"},
        create_element(Item, {"text_value": "Apple"}, "Apple"),
        create_element(Item, {"text_value": "Banana"}, "Banana"),
    )
