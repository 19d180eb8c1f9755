from __future__ import annotations
"""
Typed errors raised by the engine.

Only genuinely invalid requests raise; a record with missing optional
fields is valid state and never ends up here.
"""

from typing import Iterable


class CatalogError(Exception):
    """Base class for engine failures."""


class EmptyInputError(CatalogError):
    """A share-of-total or rank computation was requested over zero rows."""


class InvalidFieldError(CatalogError, KeyError):
    """A requested field does not exist on the record shape."""

    def __init__(self, field: str, allowed: Iterable[str] = ()):
        self.field = field
        self.allowed = tuple(allowed)
        msg = f"Unknown field '{field}'"
        if self.allowed:
            msg += f". Expected one of {list(self.allowed)}"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])
