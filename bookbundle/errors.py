"""Exceptions raised across the capture, handoff and analysis flow.

None of these are fatal: each one either disables an action, becomes a
retryable message, or is absorbed by the caller.
"""


class BookBundleError(Exception):
    """Base class for all bookbundle errors."""


class NotOnTargetPage(BookBundleError):
    """The page is not a marketplace cart page, so capture is unavailable."""


class ExtractionEmpty(BookBundleError):
    """The cart page was recognised but no rows could be parsed."""


class DecodeFailure(BookBundleError):
    """A handoff token could not be turned back into book records."""


class SearchFailed(BookBundleError):
    """The title search request failed or returned a non-2xx status."""


class AnalysisFailed(BookBundleError):
    """The bundle analysis request failed or returned a non-2xx status."""


class BundleTooSmall(BookBundleError):
    """A bundle analysis needs at least two selected books."""

    def __init__(self, size: int, minimum: int):
        super().__init__(f"Select at least {minimum} books to analyze (have {size}).")
        self.size = size
        self.minimum = minimum
