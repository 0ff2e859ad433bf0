"""Base adapter that all marketplace page adapters must implement."""

from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from bookbundle.models import BookRecord


class PageAdapter(ABC):
    """Interface for reading book rows out of a marketplace page.

    Adapters work on an already-parsed document, so they can be fed a live
    page, a saved file or a test fixture alike. To support another
    marketplace, subclass this and register it in the adapter registry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this marketplace (e.g. 'Aladin')."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL of the site."""

    @abstractmethod
    def matches_site(self, url: str) -> bool:
        """True if ``url`` belongs to this marketplace."""

    @abstractmethod
    def matches_page(self, url: str) -> bool:
        """True if ``url`` is the page this adapter knows how to read."""

    @abstractmethod
    def extract(self, document: BeautifulSoup) -> list[BookRecord]:
        """Return the book records found in ``document``, in document order."""

    def parse(self, html: str) -> list[BookRecord]:
        return self.extract(BeautifulSoup(html, "html.parser"))
