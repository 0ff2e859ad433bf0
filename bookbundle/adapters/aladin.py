"""Aladin cart adapter.

The cart page renders one ``tr#CartTr_<n>`` per line item. Each row carries a
selection checkbox whose attributes hold the item id, sale price and quantity.
Used listings annotate their title with the grade, e.g. ``[중고-최상] Clean Code``.
"""

import logging
import re

from bs4 import BeautifulSoup, Tag

from bookbundle.adapters.base import PageAdapter
from bookbundle.covers import ALADIN_COVER_SIZES, resolve_cover_url
from bookbundle.models import DEFAULT_CONDITION, BookRecord, Condition, product_url

log = logging.getLogger(__name__)

CART_PATH = "/shop/wbasket.aspx"

_CHECKBOX_SELECTOR = "input.ShopCode_Basket_Check.basket_CheckBox"
_ROW_ID = re.compile(r"^CartTr_")
_GRADE_TAG = re.compile(r"\[중고-([^\]]+)\]\s*")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class AladinCartAdapter(PageAdapter):
    def __init__(self, cover_size: str = "sum"):
        if cover_size not in ALADIN_COVER_SIZES:
            raise ValueError(f"Unknown cover size {cover_size!r}")
        self.cover_size = cover_size

    @property
    def name(self) -> str:
        return "Aladin"

    @property
    def base_url(self) -> str:
        return "https://www.aladin.co.kr"

    def matches_site(self, url: str) -> bool:
        return "aladin.co.kr" in url

    def matches_page(self, url: str) -> bool:
        return f"aladin.co.kr{CART_PATH}" in url.lower()

    def extract(self, document: BeautifulSoup) -> list[BookRecord]:
        records: list[BookRecord] = []

        for checkbox in document.select(_CHECKBOX_SELECTOR):
            row = checkbox.find_parent("tr", id=_ROW_ID)
            if row is None:
                continue

            item_id = _parse_int(checkbox.get("itemid"))
            if item_id is None or item_id <= 0:
                log.debug("Skipping cart row %s without an item id", row.get("id"))
                continue

            price = _parse_int(checkbox.get("pricesales"))
            qty = _parse_int(checkbox.get("qty"))

            title, condition = _split_title(_row_title(row))

            cover_el = row.select_one('img[src*="aladin.co.kr/product"]')
            cover = str(cover_el.get("src", "")) if cover_el else ""

            records.append(
                BookRecord(
                    item_id=item_id,
                    title=title,
                    condition=condition,
                    unit_price=price if price and price > 0 else 0,
                    quantity=qty if qty and qty > 0 else 1,
                    cover_url=resolve_cover_url(cover, self.cover_size, ALADIN_COVER_SIZES),
                    product_url=product_url(item_id),
                )
            )

        return records


def _row_title(row: Tag) -> str:
    link = row.select_one("span.basket_tit a")
    return link.get_text().strip() if link else ""


def _split_title(full_title: str) -> tuple[str, Condition]:
    """Strip the grade annotation from a title and map it to a Condition."""
    match = _GRADE_TAG.search(full_title)
    if not match:
        return full_title.strip(), DEFAULT_CONDITION

    condition = Condition.parse(match.group(1))
    if condition is None:
        log.debug("Unrecognised grade %r, assuming %s", match.group(1), DEFAULT_CONDITION.name)
        condition = DEFAULT_CONDITION

    title = full_title[: match.start()] + full_title[match.end():]
    return title.strip(), condition


def _parse_int(value: object) -> int | None:
    """Read the leading integer of an attribute value, like ``parseInt``."""
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None
