"""Ambient context passed through collection building."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CollectionContext:
    """Flags consulted by element descriptors and invalidation predicates.

    Components without type-to-select support (e.g., tabs) set
    ``suppress_text_value_warning`` to silence the missing text value
    advisory. ``production`` disables development diagnostics entirely.
    """

    suppress_text_value_warning: bool = False
    production: bool = False
