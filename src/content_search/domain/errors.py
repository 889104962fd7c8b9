"""Errors raised by query operations.

Build-time problems are reported as ``BuildWarning`` values instead of
exceptions; only query calls raise.
"""

from __future__ import annotations


class ContentSearchError(Exception):
    """Base error for the content search engine."""


class InvalidArgumentError(ContentSearchError, ValueError):
    """Raised when a query receives a malformed limit or filter value."""


class NotFoundError(ContentSearchError, LookupError):
    """Raised when a lookup references an item absent from the index."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item '{item_id}' not found in index")
