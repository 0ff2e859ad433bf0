import base64
import json
from urllib.parse import quote

import pytest

from bookbundle import codec
from bookbundle.errors import DecodeFailure
from bookbundle.models import BookRecord, Condition
from bookbundle.session import WishlistSession

APP_URL = "http://localhost:5173"

RECORDS = [
    BookRecord(item_id=3426110, title="Clean Code", condition=Condition.BEST, unit_price=15000),
    BookRecord(
        item_id=239876,
        title="리팩터링 2판 (Refactoring & more)",
        condition=Condition.FAIR,
        unit_price=22000,
        quantity=2,
        cover_url="https://image.aladin.co.kr/product/23/98/coversum/x.jpg",
    ),
    BookRecord(item_id=1985472, title="오브젝트", unit_price=0),
]


def _token(payload) -> str:
    return base64.b64encode(quote(json.dumps(payload), safe="").encode("ascii")).decode("ascii")


# A hundred thousand "[" overflow the JSON parser.
DEEPLY_NESTED = base64.b64encode(("%5B" * 100000).encode("ascii")).decode("ascii")


def test_round_trip_preserves_records():
    decoded = codec.decode(codec.encode(RECORDS))

    assert [(r.item_id, r.title, r.unit_price, r.quantity, r.condition) for r in decoded] == [
        (r.item_id, r.title, r.unit_price, r.quantity, r.condition) for r in RECORDS
    ]
    assert decoded == RECORDS


def test_encode_rejects_empty_list():
    with pytest.raises(ValueError):
        codec.encode([])


def test_token_is_base64_of_percent_encoded_json():
    token = codec.encode(RECORDS[:1])

    text = base64.b64decode(token).decode("ascii")
    assert "%" in text
    assert "Clean%20Code" in text


def test_handoff_url_carries_token_in_fragment_only():
    url = codec.build_handoff_url(APP_URL + "/", RECORDS)

    assert url.startswith("http://localhost:5173/?from=extension#data=")
    assert codec.is_handoff_url(url)
    assert codec.extract_token(url) == codec.encode(RECORDS)


@pytest.mark.parametrize(
    "token",
    [
        "%%%not-base64%%%",
        base64.b64encode(b"{not json").decode("ascii"),
        _token({"itemId": 1, "title": "not a list"}),
        _token([]),
        _token([{"title": "missing id"}]),
        _token([{"itemId": -4, "title": "negative id"}]),
        _token(["just a string"]),
        DEEPLY_NESTED,
    ],
)
def test_decode_rejects_malformed_tokens(token):
    with pytest.raises(DecodeFailure):
        codec.decode(token)


def test_decode_selection_condition_precedence():
    token = _token(
        [
            {"itemId": 1, "title": "A", "quality": "중", "minQuality": "최상"},
            {"itemId": 2, "title": "B", "quality": "중"},
            {"itemId": 3, "title": "C"},
        ]
    )

    books = codec.decode_selection(token)

    assert [b.min_condition for b in books] == [Condition.BEST, Condition.FAIR, Condition.GOOD]
    assert books[0].condition is Condition.FAIR


def test_import_handoff_strips_marker_and_fragment():
    url = codec.build_handoff_url(APP_URL, RECORDS)

    handoff = codec.import_handoff(url)

    assert handoff.imported
    assert [b.item_id for b in handoff.books] == [3426110, 239876, 1985472]
    assert handoff.clean_url == "http://localhost:5173/"


def test_import_handoff_requires_marker():
    url = f"{APP_URL}/#data={codec.encode(RECORDS)}"

    handoff = codec.import_handoff(url)

    assert not handoff.imported
    assert handoff.clean_url == url


def test_tampered_token_is_ignored_without_error():
    tampered = base64.b64encode(b"%5B%7B%22itemId%22%3A").decode("ascii")
    url = f"{APP_URL}/?from=extension#data={tampered}"
    session = WishlistSession(client=None)

    address = session.load_from_url(url)

    assert len(session.store) == 0
    assert session.imported_count == 0
    assert address == url


def test_session_imports_handoff_once():
    url = codec.build_handoff_url(APP_URL, RECORDS)
    session = WishlistSession(client=None)

    address = session.load_from_url(url)
    session.load_from_url(address)

    assert session.imported_count == 3
    assert [b.item_id for b in session.store.list()] == [3426110, 239876, 1985472]


def test_deeply_nested_token_is_ignored_without_error():
    url = f"{APP_URL}/?from=extension#data={DEEPLY_NESTED}"
    session = WishlistSession(client=None)

    address = session.load_from_url(url)

    assert len(session.store) == 0
    assert session.imported_count == 0
    assert address == url
