import asyncio

import pytest

from bookbundle.errors import AnalysisFailed, BundleTooSmall, SearchFailed
from bookbundle.models import BundleResult, Condition, SearchResult, SelectedBook
from bookbundle.session import WishlistSession


class _Client:
    """Backend double whose responses are released by the test."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}
        self.results: dict[str, list[SearchResult]] = {}
        self.analyze_calls: list[dict] = []
        self.analyze_error: Exception | None = None

    async def search(self, keyword: str) -> list[SearchResult]:
        gate = self.gates.get(keyword)
        if gate is not None:
            await gate.wait()
        if keyword == "boom":
            raise SearchFailed("Book search failed. Please try again.")
        return self.results.get(keyword, [])

    async def analyze(self, request: dict) -> BundleResult:
        self.analyze_calls.append(request)
        if self.analyze_error is not None:
            raise self.analyze_error
        return BundleResult(
            requested_books=request["books"],
            total_requested_count=len(request["books"]),
            sellers=[],
            has_complete_seller=False,
            analysis_time_ms=3,
        )


def _result(item_id: int, title: str) -> SearchResult:
    return SearchResult(item_id=item_id, title=title)


def test_stale_search_does_not_overwrite_newer_results():
    client = _Client()
    client.gates["slow"] = asyncio.Event()
    client.results = {"slow": [_result(1, "Old")], "fast": [_result(2, "New")]}
    session = WishlistSession(client)

    async def go():
        slow = asyncio.create_task(session.search("slow"))
        await asyncio.sleep(0)
        assert await session.search("fast") is True
        client.gates["slow"].set()
        return await slow

    applied = asyncio.run(go())

    assert applied is False
    assert [r.title for r in session.search_results] == ["New"]


def test_search_failure_sets_dismissible_error():
    client = _Client()
    client.results = {"dune": [_result(3, "Dune")]}
    session = WishlistSession(client)

    asyncio.run(session.search("boom"))
    assert session.error == "Book search failed. Please try again."

    asyncio.run(session.search("dune"))
    assert session.error is None
    assert [r.item_id for r in session.search_results] == [3]

    asyncio.run(session.search("boom"))
    session.dismiss_error()
    assert session.error is None


def test_add_result_uses_requested_condition_and_deduplicates():
    client = _Client()
    client.results = {"dune": [_result(3, "Dune"), _result(4, "Dune Messiah")]}
    session = WishlistSession(client)
    asyncio.run(session.search("dune"))

    assert session.add_result(1, Condition.BEST) is True
    assert session.add_result(1) is False

    assert [(b.item_id, b.min_condition) for b in session.store.list()] == [(4, Condition.BEST)]


def test_analyze_guard_makes_no_request():
    client = _Client()
    session = WishlistSession(client)
    session.store.add(SelectedBook(item_id=1, title="Only one"))

    with pytest.raises(BundleTooSmall):
        asyncio.run(session.analyze())

    assert client.analyze_calls == []


def test_analyze_forwards_wishlist_and_result():
    client = _Client()
    session = WishlistSession(client)
    session.store.extend(
        [SelectedBook(item_id=1, title="A"), SelectedBook(item_id=2, title="B", min_condition=Condition.FAIR)]
    )

    asyncio.run(session.analyze())

    assert client.analyze_calls == [
        {
            "books": [
                {"itemId": 1, "title": "A", "minQuality": "상"},
                {"itemId": 2, "title": "B", "minQuality": "중"},
            ]
        }
    ]
    assert session.bundle_result.total_requested_count == 2
    assert session.error is None

    session.close_result()
    assert session.bundle_result is None


def test_analysis_failure_is_retryable():
    client = _Client()
    client.analyze_error = AnalysisFailed("Analysis failed.")
    session = WishlistSession(client)
    session.store.extend([SelectedBook(item_id=1, title="A"), SelectedBook(item_id=2, title="B")])

    asyncio.run(session.analyze())
    assert session.error == "Analysis failed."
    assert session.bundle_result is None

    client.analyze_error = None
    asyncio.run(session.analyze())
    assert session.error is None
    assert session.bundle_result is not None
