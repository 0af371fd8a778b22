"""Base64 encoding with the standard alphabet and '=' padding."""

from __future__ import annotations

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def b64_encode(data: bytes | bytearray | memoryview | str) -> str:
    """Encode ``data`` as Base64, padding the final group with '='.

    Text is encoded as UTF-8 first. Every 3 input bytes become 4 output
    characters.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    groups = []
    for start in range(0, len(raw), 3):
        chunk = raw[start:start + 3]
        value = int.from_bytes(chunk.ljust(3, b"\0"), "big")
        chars = [_ALPHABET[(value >> shift) & 0x3F] for shift in (18, 12, 6, 0)]
        chars[len(chunk) + 1:] = "=" * (3 - len(chunk))
        groups.append("".join(chars))
    return "".join(groups)