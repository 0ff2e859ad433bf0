"""In-memory state of one wishlist session."""

import logging

from bookbundle.bundle import build_request
from bookbundle.client import BookBundleClient
from bookbundle.codec import import_handoff
from bookbundle.errors import AnalysisFailed, SearchFailed
from bookbundle.models import DEFAULT_CONDITION, BundleResult, Condition, SearchResult, SelectedBook
from bookbundle.selection import SelectionStore

log = logging.getLogger(__name__)


class WishlistSession:
    """Wishlist, search results and the last analysis for one shopper.

    Searches and analyses are not cancelled when a newer one starts. Each call
    takes a generation number instead, and only the newest call of its kind
    may write its outcome back, so a slow stale response never replaces a
    fresher one.
    """

    def __init__(self, client: BookBundleClient):
        self.client = client
        self.store = SelectionStore()
        self.search_results: list[SearchResult] = []
        self.bundle_result: BundleResult | None = None
        self.error: str | None = None
        self.imported_count = 0
        self._search_generation = 0
        self._analyze_generation = 0

    def load_from_url(self, url: str) -> str:
        """Import books carried by a handoff URL; return the address to show."""
        handoff = import_handoff(url)
        if handoff.imported:
            self.imported_count = self.store.extend(handoff.books)
        return handoff.clean_url

    async def search(self, keyword: str) -> bool:
        """Run a title search. Returns False if a newer search superseded it."""
        self._search_generation += 1
        generation = self._search_generation

        try:
            results = await self.client.search(keyword)
        except SearchFailed as e:
            if generation != self._search_generation:
                return False
            self.error = str(e)
            return True

        if generation != self._search_generation:
            log.debug("Dropping stale results for %r", keyword)
            return False
        self.search_results = results
        self.error = None
        return True

    def add_result(self, index: int, min_condition: Condition = DEFAULT_CONDITION) -> bool:
        """Add the search result at ``index`` to the wishlist."""
        result = self.search_results[index]
        return self.store.add(SelectedBook.from_search(result, min_condition))

    async def analyze(self) -> bool:
        """Request a bundle analysis for the current wishlist.

        Raises:
            BundleTooSmall: Fewer than two books are selected.
        """
        request = build_request(self.store)

        self._analyze_generation += 1
        generation = self._analyze_generation
        self.error = None
        self.bundle_result = None

        try:
            result = await self.client.analyze(request)
        except AnalysisFailed as e:
            if generation != self._analyze_generation:
                return False
            self.error = str(e)
            return True

        if generation != self._analyze_generation:
            log.debug("Dropping stale analysis result")
            return False
        self.bundle_result = result
        return True

    def dismiss_error(self) -> None:
        self.error = None

    def dismiss_import_notice(self) -> None:
        self.imported_count = 0

    def close_result(self) -> None:
        self.bundle_result = None
