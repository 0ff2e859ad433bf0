"""Builds the bundle analysis request from the wishlist."""

from bookbundle.errors import BundleTooSmall
from bookbundle.selection import SelectionStore

MIN_BUNDLE_SIZE = 2


def can_analyze(store: SelectionStore) -> bool:
    return len(store) >= MIN_BUNDLE_SIZE


def build_request(store: SelectionStore) -> dict:
    """Return ``{"books": [...]}`` for the analysis service, in wishlist order.

    Raises:
        BundleTooSmall: Fewer than two books are selected.
    """
    if not can_analyze(store):
        raise BundleTooSmall(len(store), MIN_BUNDLE_SIZE)
    return {"books": [book.to_payload() for book in store.list()]}
