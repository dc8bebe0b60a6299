"""Errors raised while building collections."""


class CollectionError(ValueError):
    """Collection input violates the authoring contract.

    Raised for render-function children without an ``items`` data set and
    for data values whose key cannot be resolved.
    """
