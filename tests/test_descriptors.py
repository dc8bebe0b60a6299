"""Tests for Item and Section element descriptors."""

import logging

import pytest
from collectionkit.core.context import CollectionContext
from collectionkit.core.descriptors import (
    TEXT_VALUE_WARNING,
    Fragment,
    Item,
    Section,
    describe_content,
    get_descriptor,
)
from collectionkit.core.elements import create_element
from collectionkit.core.errors import CollectionError


def _describe(element_type, props, context=None):
    return next(element_type.get_collection_node(props, context))


class TestElementType:
    """Tests for ElementType."""

    def test__call__returns_none(self) -> None:
        """Produce no output when called like a component."""
        assert Item({"children": "Test item"}) is None
        assert Section({"children": "Test section"}) is None

    def test__registry__resolves_builtin_tags(self) -> None:
        """Register item and section descriptors, not fragments."""
        assert get_descriptor("item") is not None
        assert get_descriptor("section") is not None
        assert get_descriptor(Fragment.tag) is None

    def test__unregistered_tag__raises_lookup_error(self) -> None:
        """Fail when describing a type without a descriptor."""
        with pytest.raises(LookupError, match="No collection descriptor"):
            Fragment.get_collection_node({})

    def test__repr__shows_tag(self) -> None:
        """Show the tag in element notation."""
        assert repr(Item) == "<Item>"


class TestItemDescribe:
    """Tests for the item descriptor."""

    def test__basic_props__describes_item(self) -> None:
        """Describe a plain text item."""
        props = {"children": "Test item", "text_value": "Test item"}

        partial = _describe(Item, props, CollectionContext())

        assert partial.type == "item"
        assert partial.props is props
        assert partial.rendered == "Test item"
        assert partial.text_value == "Test item"
        assert partial.has_child_nodes is False

    def test__yields_single_partial(self) -> None:
        """Describe an item as exactly one partial node."""
        partials = list(Item.get_collection_node({"children": "A"}, CollectionContext()))

        assert len(partials) == 1

    def test__title__used_as_rendered(self) -> None:
        """Prefer the title over children for rendered content."""
        props = {"title": "Item Title", "children": "Child content"}

        partial = _describe(Item, props, CollectionContext())

        assert partial.rendered == "Item Title"
        assert partial.text_value == "Item Title"

    def test__string_children__used_as_text_value(self) -> None:
        """Derive the text value from string content."""
        partial = _describe(Item, {"children": "String content"}, CollectionContext())

        assert partial.text_value == "String content"

    def test__aria_label__fallback_text_value(self) -> None:
        """Fall back to the accessibility label for element content."""
        props = {
            "children": create_element("div", None, "Complex content"),
            "aria_label": "Accessible label",
        }

        partial = _describe(Item, props, CollectionContext())

        assert partial.text_value == "Accessible label"
        assert partial.aria_label == "Accessible label"

    def test__explicit_text_value__wins(self) -> None:
        """Prefer an explicit text value over content and label."""
        props = {"children": "Content", "aria_label": "Label", "text_value": "Explicit"}

        partial = _describe(Item, props, CollectionContext())

        assert partial.text_value == "Explicit"

    def test__no_text_value__warns_once(self, caplog: pytest.LogCaptureFixture) -> None:
        """Warn when no plain text value can be determined."""
        props = {"children": create_element("div", None, "Complex content")}

        with caplog.at_level(logging.WARNING):
            partial = _describe(Item, props, CollectionContext())

        assert partial.text_value == ""
        messages = [record.getMessage() for record in caplog.records]
        assert messages == [TEXT_VALUE_WARNING]

    def test__no_context__warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Warn when no context is supplied."""
        props = {"children": create_element("div")}

        with caplog.at_level(logging.WARNING):
            _describe(Item, props)

        assert len(caplog.records) == 1

    def test__warns_per_invocation(self, caplog: pytest.LogCaptureFixture) -> None:
        """Warn again for every description, without deduplication."""
        props = {"children": create_element("div")}

        with caplog.at_level(logging.WARNING):
            _describe(Item, props, CollectionContext())
            _describe(Item, props, CollectionContext())

        assert len(caplog.records) == 2

    def test__suppressed__does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Stay silent when the context suppresses the check."""
        props = {"children": create_element("div", None, "Complex content")}
        context = CollectionContext(suppress_text_value_warning=True)

        with caplog.at_level(logging.WARNING):
            _describe(Item, props, context)

        assert caplog.records == []

    def test__production__does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Stay silent in production mode."""
        props = {"children": create_element("div", None, "Complex content")}
        context = CollectionContext(production=True)

        with caplog.at_level(logging.WARNING):
            _describe(Item, props, context)

        assert caplog.records == []


class TestItemChildNodes:
    """Tests for item child sequences."""

    def test__child_items__yield_value_partials(self) -> None:
        """Yield one value partial per child item."""
        child_items = [{"id": 1, "name": "Child 1"}, {"id": 2, "name": "Child 2"}]
        props = {"children": "Parent item", "child_items": child_items}

        partial = _describe(Item, props, CollectionContext())
        children = list(partial.child_nodes())

        assert [child.type for child in children] == ["item", "item"]
        assert children[0].value is child_items[0]
        assert children[1].value is child_items[1]
        assert children[0].element is None

    def test__title_with_elements__yield_element_partials(self) -> None:
        """Yield one element partial per structural child when titled."""
        children = [
            create_element(Item, {"key": "1"}, "Child 1"),
            create_element(Item, {"key": "2"}, "Child 2"),
        ]
        props = {"title": "Parent title", "children": children}

        partial = _describe(Item, props, CollectionContext())
        child_partials = list(partial.child_nodes())

        assert len(child_partials) == 2
        assert child_partials[0].element is children[0]
        assert child_partials[1].element is children[1]

    def test__title_with_single_element__yields_one(self) -> None:
        """Handle a single element child."""
        child = create_element(Item, {"key": "1"}, "Single child")

        partial = _describe(Item, {"title": "Parent title", "children": child}, CollectionContext())

        assert [p.element for p in partial.child_nodes()] == [child]

    def test__no_title__yields_nothing(self) -> None:
        """Treat untitled children as content, not child items."""
        child = create_element(Item, None, "Nested")

        partial = _describe(Item, {"children": child, "text_value": "x"}, CollectionContext())

        assert list(partial.child_nodes()) == []

    def test__child_nodes__restartable(self) -> None:
        """Return a fresh iterator on every call."""
        props = {"children": "Parent", "child_items": [{"id": 1}]}

        partial = _describe(Item, props, CollectionContext())

        assert len(list(partial.child_nodes())) == 1
        assert len(list(partial.child_nodes())) == 1


class TestItemHasChildNodes:
    """Tests for item child presence."""

    def test__explicit_true(self) -> None:
        """Honour an explicit true override."""
        props = {"children": "Item", "has_child_items": True}

        assert _describe(Item, props, CollectionContext()).has_child_nodes is True

    def test__explicit_false_overrides_child_items(self) -> None:
        """Honour an explicit false override even with child items."""
        props = {"children": "Item", "child_items": [{"id": 1}], "has_child_items": False}

        assert _describe(Item, props, CollectionContext()).has_child_nodes is False

    def test__child_items(self) -> None:
        """Report children when child items are supplied."""
        props = {"children": "Item", "child_items": [{"id": 1}, {"id": 2}]}

        assert _describe(Item, props, CollectionContext()).has_child_nodes is True

    def test__title_and_elements(self) -> None:
        """Report children for a titled item with element children."""
        props = {"title": "Parent", "children": [create_element(Item, None, "Child")]}

        assert _describe(Item, props, CollectionContext()).has_child_nodes is True

    def test__title_without_elements(self) -> None:
        """Ignore non-structural children of a titled item."""
        props = {"title": "Parent", "children": ["text", None]}

        assert _describe(Item, props, CollectionContext()).has_child_nodes is False

    def test__no_indicators(self) -> None:
        """Report no children by default."""
        partial = _describe(Item, {"children": "Simple item"}, CollectionContext())

        assert partial.has_child_nodes is False


class TestSectionDescribe:
    """Tests for the section descriptor."""

    def test__basic_props__describes_section(self) -> None:
        """Describe a titled section."""
        props = {"title": "Section Title", "children": "Section content"}

        partial = _describe(Section, props)

        assert partial.type == "section"
        assert partial.props is props
        assert partial.has_child_nodes is True
        assert partial.rendered == "Section Title"

    def test__aria_label__passed_through(self) -> None:
        """Carry the accessibility label."""
        props = {"title": "Section Title", "aria_label": "Accessible section label"}

        assert _describe(Section, props).aria_label == "Accessible section label"

    def test__always_has_child_nodes(self) -> None:
        """Report children even without content."""
        assert _describe(Section, {"children": "Content"}).has_child_nodes is True

    def test__section_does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Never emit the item text value warning."""
        with caplog.at_level(logging.WARNING):
            _describe(Section, {"title": create_element("h2")})

        assert caplog.records == []


class TestSectionChildNodes:
    """Tests for section child sequences."""

    def test__render_function_with_items__yields_value_partials(self) -> None:
        """Yield value partials carrying the render function."""
        items = [{"id": 1, "name": "Item 1"}, {"id": 2, "name": "Item 2"}]

        def render_item(item):
            return create_element(Item, {"key": item["id"]}, item["name"])

        partial = _describe(Section, {"children": render_item, "items": items})
        children = list(partial.child_nodes())

        assert len(children) == 2
        assert children[0].type == "item"
        assert children[0].value is items[0]
        assert children[0].renderer is render_item
        assert children[1].value is items[1]
        assert children[1].renderer is render_item

    def test__render_function_without_items__raises_on_consumption(self) -> None:
        """Fail when the child sequence is consumed, not when described."""
        partial = _describe(Section, {"children": lambda item: create_element(Item, None, item)})

        with pytest.raises(
            CollectionError,
            match="props.children was a function but props.items is missing",
        ):
            list(partial.child_nodes())

    def test__element_children__yield_element_partials(self) -> None:
        """Wrap each static child element."""
        children = [
            create_element(Item, {"key": "1"}, "Child 1"),
            create_element(Item, {"key": "2"}, "Child 2"),
        ]

        partial = _describe(Section, {"children": children})
        child_partials = list(partial.child_nodes())

        assert [p.type for p in child_partials] == ["item", "item"]
        assert child_partials[0].element is children[0]
        assert child_partials[1].element is children[1]

    def test__single_element_child(self) -> None:
        """Handle a single element child."""
        child = create_element(Item, {"key": "1"}, "Single child")

        partial = _describe(Section, {"children": child})

        assert [p.element for p in partial.child_nodes()] == [child]

    def test__empty_children(self) -> None:
        """Yield nothing for an empty child list."""
        partial = _describe(Section, {"children": []})

        assert list(partial.child_nodes()) == []

    def test__non_element_children__filtered(self) -> None:
        """Drop strings and None from static children."""
        children = [
            create_element(Item, {"key": "1"}, "Valid child"),
            "string child",
            None,
            create_element(Item, {"key": "2"}, "Another valid child"),
        ]

        partial = _describe(Section, {"children": children})
        child_partials = list(partial.child_nodes())

        assert len(child_partials) == 2
        assert child_partials[0].element is children[0]
        assert child_partials[1].element is children[3]

    def test__fragment_children__spliced(self) -> None:
        """Splice fragment members into the section."""
        first = create_element(Item, None, "A")
        second = create_element(Item, None, "B")

        partial = _describe(Section, {"children": create_element(Fragment, None, first, second)})

        assert [p.element for p in partial.child_nodes()] == [first, second]


class TestDescribeContent:
    """Tests for implicit items."""

    def test__string_content(self) -> None:
        """Use plain string content as text value."""
        partial = describe_content("Plain")

        assert partial.type == "item"
        assert partial.rendered == "Plain"
        assert partial.text_value == "Plain"

    def test__plain_element__uses_string_children(self) -> None:
        """Use the string children of a plain element."""
        element = create_element("div", None, "Item 1")

        partial = describe_content(element, element.props)

        assert partial.rendered is element
        assert partial.text_value == "Item 1"
        assert partial.props is element.props

    def test__other_content__empty_text_value(self) -> None:
        """Leave the text value empty for non-text content."""
        assert describe_content(None).text_value == ""
        assert describe_content(42).text_value == ""
