"""Percent-encoding of URL components."""

from __future__ import annotations

import string

_UNRESERVED = frozenset(
    (string.ascii_letters + string.digits + "-._~").encode("ascii")
)


def url_encode(text: str | bytes | bytearray) -> str:
    """Percent-encode every byte of ``text`` except unreserved characters.

    Letters, digits and ``-._~`` are kept; every other byte becomes ``%XX``
    with upper-case hex digits. Text is encoded as UTF-8 first.
    """
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return "".join(
        chr(byte) if byte in _UNRESERVED else f"%{byte:02X}" for byte in raw
    )