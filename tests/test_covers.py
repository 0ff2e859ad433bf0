import pytest

from bookbundle.covers import resolve_cover_url

MINI = "https://image.aladin.co.kr/product/342/61/covermini/8966260950_1.jpg"


def test_resolves_requested_size():
    assert resolve_cover_url(MINI, "sum") == MINI.replace("covermini", "coversum")
    assert resolve_cover_url(MINI, "500") == MINI.replace("covermini", "cover500")
    assert resolve_cover_url(MINI, "cover") == MINI.replace("covermini", "cover")


def test_whole_segment_only():
    url = "https://image.aladin.co.kr/product/342/61/cover/covermini_1.jpg"

    assert resolve_cover_url(url, "200") == "https://image.aladin.co.kr/product/342/61/cover200/covermini_1.jpg"


def test_unknown_url_and_empty_values():
    assert resolve_cover_url("https://example.com/a.jpg", "sum") == "https://example.com/a.jpg"
    assert resolve_cover_url("", "sum") is None
    assert resolve_cover_url(None, "sum") is None


def test_custom_size_table():
    tokens = {"small": "s", "large": "l"}

    assert resolve_cover_url("https://cdn.example/s/1.png", "large", tokens) == "https://cdn.example/l/1.png"


def test_unknown_size_is_rejected():
    with pytest.raises(ValueError):
        resolve_cover_url(MINI, "huge")


def test_larger_covers_are_never_shrunk():
    big = MINI.replace("covermini", "cover500")
    medium = MINI.replace("covermini", "cover200")
    summary = MINI.replace("covermini", "coversum")

    assert resolve_cover_url(big, "sum") == big
    assert resolve_cover_url(medium, "cover") == medium
    assert resolve_cover_url(summary, "sum") == summary
    assert resolve_cover_url(summary, "mini") == summary
    assert resolve_cover_url(medium, "500") == big
