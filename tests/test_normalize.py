import pytest

from RefXSS import normalize_url


def test_escaped_query_punctuation_is_undone():
    assert normalize_url(r"http://x/a\?q\=1\&r\=2") == "http://x/a?q=1&r=2"


def test_fully_escaped_url():
    assert normalize_url(r"http:\/\/x\/a\?q\=1\&r\=2") == "http://x/a?q=1&r=2"


def test_double_escaped_question_mark():
    assert normalize_url(r"http://x/a\\?q=1") == "http://x/a?q=1"


def test_plain_url_untouched():
    url = "https://example.com/search?q=a%20b&lang=en#top"
    assert normalize_url(url) == url


def test_no_percent_decoding_or_trimming():
    assert normalize_url(" http://x/?q=%3F ") == " http://x/?q=%3F "


def test_other_backslashes_kept():
    assert normalize_url(r"http://x/a?q=\n\t") == r"http://x/a?q=\n\t"


@pytest.mark.parametrize("raw", [
    "",
    r"http://x/a\?q\=1",
    r"http://x/a\\\?q=1",
    r"\\\\?\\=\\\&",
    r"http:\\/\\/x",
    "\\",
    r"a\\\\\\=b",
])
def test_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once
