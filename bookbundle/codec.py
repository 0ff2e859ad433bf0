"""Handoff codec: moves captured books from the cart to the wishlist app.

A record list is serialised to JSON, percent-encoded the way
``encodeURIComponent`` does it, then base64-encoded into a single token.
The token rides in the URL fragment (``#data=<token>``), which browsers never
send to the server, so the payload stays out of requests and access logs.
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from urllib.parse import parse_qs, quote, unquote, urlsplit, urlunsplit

from bookbundle.errors import DecodeFailure
from bookbundle.models import DEFAULT_CONDITION, BookRecord, Condition, SelectedBook

log = logging.getLogger(__name__)

MARKER_PARAM = "from"
MARKER_VALUE = "extension"
TOKEN_KEY = "data="

# Characters encodeURIComponent leaves alone besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass
class HandoffImport:
    """Outcome of loading the app from a handoff URL."""

    books: list[SelectedBook] = field(default_factory=list)
    clean_url: str = ""

    @property
    def imported(self) -> bool:
        return bool(self.books)


def encode(records: list[BookRecord]) -> str:
    """Turn a non-empty record list into an opaque, URL-safe-ish token."""
    if not records:
        raise ValueError("Cannot encode an empty book list")
    text = json.dumps(
        [r.to_wire() for r in records], ensure_ascii=False, separators=(",", ":")
    )
    quoted = quote(text, safe=_URI_COMPONENT_SAFE)
    return base64.b64encode(quoted.encode("ascii")).decode("ascii")


def build_handoff_url(base_url: str, records: list[BookRecord]) -> str:
    return f"{base_url.rstrip('/')}/?{MARKER_PARAM}={MARKER_VALUE}#{TOKEN_KEY}{encode(records)}"


def decode(token: str) -> list[BookRecord]:
    """Recover the record list from a token.

    Raises:
        DecodeFailure: On any malformed stage or an empty list.
    """
    return [_record_from_wire(item) for item in _decode_items(token)]


def decode_selection(token: str) -> list[SelectedBook]:
    """Like :func:`decode`, but produce wishlist entries.

    The minimum condition comes from ``minQuality`` when present, else the
    captured ``quality``, else the default grade.
    """
    books = []
    for item in _decode_items(token):
        record = _record_from_wire(item)
        min_condition = Condition.parse(item.get("minQuality")) or record.condition
        books.append(SelectedBook.from_record(record, min_condition=min_condition))
    return books


def is_handoff_url(url: str) -> bool:
    query = parse_qs(urlsplit(url).query)
    return MARKER_VALUE in query.get(MARKER_PARAM, [])


def extract_token(url: str) -> str | None:
    fragment = urlsplit(url).fragment
    if TOKEN_KEY not in fragment:
        return None
    token = unquote(fragment.split(TOKEN_KEY, 1)[1]).strip()
    return token or None


def strip_handoff(url: str) -> str:
    """Drop the marker and fragment so a reload cannot import twice."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))


def import_handoff(url: str) -> HandoffImport:
    """Load wishlist entries from a handoff URL.

    Decoding problems are not reported: a bad token simply means nothing is
    imported and the address is left as it was.
    """
    if not is_handoff_url(url):
        return HandoffImport(clean_url=url)

    token = extract_token(url)
    if token is None:
        log.debug("Handoff URL carried no token")
        return HandoffImport(clean_url=url)

    try:
        books = decode_selection(token)
    except DecodeFailure as e:
        log.debug("Ignoring handoff token: %s", e)
        return HandoffImport(clean_url=url)

    log.info("Imported %d books from the extension", len(books))
    return HandoffImport(books=books, clean_url=strip_handoff(url))


def _decode_items(token: str) -> list[dict]:
    try:
        raw = base64.b64decode(token.strip(), validate=True)
        text = unquote(raw.decode("ascii"), errors="strict")
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DecodeFailure(f"Malformed handoff token: {e}") from e

    if not isinstance(data, list):
        raise DecodeFailure(f"Expected a list of books, got {type(data).__name__}")
    if not data:
        raise DecodeFailure("Handoff token holds no books")
    return data


def _record_from_wire(item: object) -> BookRecord:
    if not isinstance(item, dict):
        raise DecodeFailure(f"Expected a book object, got {type(item).__name__}")

    item_id = item.get("itemId")
    if isinstance(item_id, bool) or not isinstance(item_id, int) or item_id <= 0:
        raise DecodeFailure(f"Invalid itemId {item_id!r}")
    title = item.get("title")
    if not isinstance(title, str):
        raise DecodeFailure(f"Invalid title for item {item_id}")

    price = item.get("price")
    qty = item.get("qty")
    cover = item.get("cover")
    url = item.get("productUrl")

    return BookRecord(
        item_id=item_id,
        title=title,
        condition=Condition.parse(item.get("quality")) or DEFAULT_CONDITION,
        unit_price=price if _is_int(price) and price >= 0 else 0,
        quantity=qty if _is_int(qty) and qty > 0 else 1,
        cover_url=cover if isinstance(cover, str) and cover else None,
        product_url=url if isinstance(url, str) else "",
    )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
