"""Core type definitions."""

from collections.abc import Callable
from typing import Any

# Stable identifier of a node within one collection snapshot
Key = str | int

# Extracts a key from a data value (e.g., lambda item: item["slug"])
KeyGetter = Callable[[Any], Key]
