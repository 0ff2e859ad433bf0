"""Cart capture: runs a registered page adapter over a cart document."""

import logging

from bs4 import BeautifulSoup

from bookbundle.adapters import _browser
from bookbundle.adapters.aladin import AladinCartAdapter
from bookbundle.adapters.base import PageAdapter
from bookbundle.adapters.registry import find_adapter
from bookbundle.errors import ExtractionEmpty, NotOnTargetPage
from bookbundle.models import BookRecord

log = logging.getLogger(__name__)


def check_page(url: str) -> PageAdapter:
    """Return the adapter able to read ``url`` or explain why capture is unavailable."""
    adapter = find_adapter(url)
    if adapter is None:
        raise NotOnTargetPage("This is not a supported marketplace page.")
    if not adapter.matches_page(url):
        raise NotOnTargetPage(
            f"Open your {adapter.name} cart page on {adapter.base_url} to capture books."
        )
    return adapter


def capture_cart(
    html: str,
    page_url: str | None = None,
    adapter: PageAdapter | None = None,
) -> list[BookRecord]:
    """Extract the cart rows from ``html``.

    Args:
        html: Markup of the cart page.
        page_url: Address the markup came from. When given, it must point at
            a cart page and picks the adapter unless one is passed.
        adapter: Adapter to read the page with.

    Raises:
        NotOnTargetPage: ``page_url`` is not a supported cart page.
        ExtractionEmpty: The page was read but held no usable rows.
    """
    if page_url is not None:
        found = check_page(page_url)
        adapter = adapter or found
    adapter = adapter or AladinCartAdapter()

    records = adapter.extract(BeautifulSoup(html, "html.parser"))
    if not records:
        raise ExtractionEmpty(f"No books found in the {adapter.name} cart.")

    log.info("Captured %d books from %s", len(records), adapter.name)
    return records


async def fetch_cart_html(url: str, user_data_dir: str | None = None) -> str:
    """Render a cart page in a browser and return its markup.

    Raises:
        NotOnTargetPage: ``url`` is not a supported cart page.
        RuntimeError: The browser extra is not installed.
    """
    check_page(url)
    if not _browser.is_available():
        raise RuntimeError(_browser.INSTALL_HINT)
    return await _browser.fetch_rendered_html(url, user_data_dir=user_data_dir)
