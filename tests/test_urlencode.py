from urllib.parse import quote_from_bytes, unquote_to_bytes

import pytest
from hypothesis import given
from hypothesis import strategies as st

from boardkit.urlencode import url_encode


def test_unreserved_characters_are_kept():
    text = "AZaz09-._~"
    assert url_encode(text) == text


@pytest.mark.parametrize(
    ("text", "encoded"),
    [
        ("a b", "a%20b"),
        ("/", "%2F"),
        ("key=value&x", "key%3Dvalue%26x"),
    ],
)
def test_reserved_characters_are_escaped(text, encoded):
    assert url_encode(text) == encoded


def test_utf8_bytes_are_escaped_upper_case():
    assert url_encode("é") == "%C3%A9"


def test_accepts_bytes():
    assert url_encode(b"\x00\xff") == "%00%FF"


def test_empty():
    assert url_encode("") == ""


@given(st.binary(max_size=100))
def test_matches_stdlib_quoting(data):
    assert url_encode(data) == quote_from_bytes(data, safe="")


@given(st.text(max_size=100))
def test_round_trip(text):
    assert unquote_to_bytes(url_encode(text)) == text.encode("utf-8")