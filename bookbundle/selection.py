"""The shopper's wishlist: an insertion-ordered set of books keyed by item id."""

from collections.abc import Iterable, Iterator

from bookbundle.models import Condition, SelectedBook


class SelectionStore:
    """Ordered wishlist with no duplicate item ids.

    Adding a book that is already present is a no-op rather than an error,
    and entries handed out by :meth:`list` are copies, so the only way to
    change the wishlist is through the store's own methods.
    """

    def __init__(self, books: Iterable[SelectedBook] = ()):
        self._books: dict[int, SelectedBook] = {}
        self.extend(books)

    def add(self, book: SelectedBook) -> bool:
        """Append ``book`` unless its item id is already selected."""
        if book.item_id in self._books:
            return False
        self._books[book.item_id] = book.copy()
        return True

    def extend(self, books: Iterable[SelectedBook]) -> int:
        return sum(1 for book in books if self.add(book))

    def remove(self, item_id: int) -> bool:
        return self._books.pop(item_id, None) is not None

    def update_condition(self, item_id: int, condition: Condition) -> bool:
        book = self._books.get(item_id)
        if book is None:
            return False
        book.min_condition = condition
        return True

    def update_all_conditions(self, condition: Condition) -> None:
        for book in self._books.values():
            book.min_condition = condition

    def list(self) -> tuple[SelectedBook, ...]:
        return tuple(book.copy() for book in self._books.values())

    def get(self, item_id: int) -> SelectedBook | None:
        book = self._books.get(item_id)
        return book.copy() if book else None

    def clear(self) -> None:
        self._books.clear()

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._books

    def __iter__(self) -> Iterator[SelectedBook]:
        return iter(self.list())
