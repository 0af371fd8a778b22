"""Strict URL splitting into schema, host, port, path, query and more."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass, field as dataclass_field
from typing import Mapping, Optional

VERSION_MAJOR = 2
VERSION_MINOR = 7
VERSION_PATCH = 1

_ALPHA = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_ALNUM = _ALPHA | _DIGITS
_HEX = _DIGITS | frozenset("abcdefABCDEF")
_MARK = frozenset("-_.!~*'()")
_USERINFO = _ALNUM | _MARK | frozenset("%;:&=+$,")
_URL_CHAR = frozenset(chr(code) for code in range(0x21, 0x7F)) - {"#", "?"}
_HOST_CHAR = _ALNUM | frozenset(".-")
_ZONE_CHAR = _ALNUM | frozenset("%.-_~")
_BREAKING = frozenset(" \r\n\t\f")


class UrlField(enum.IntEnum):
    """The parts a URL is split into."""

    SCHEMA = 0
    HOST = 1
    PORT = 2
    PATH = 3
    QUERY = 4
    FRAGMENT = 5
    USERINFO = 6


class UrlParseError(ValueError):
    """Raised when a URL does not follow the accepted grammar."""


class _S(enum.Enum):
    DEAD = enum.auto()
    SPACES_BEFORE_URL = enum.auto()
    SCHEMA = enum.auto()
    SCHEMA_SLASH = enum.auto()
    SCHEMA_SLASH_SLASH = enum.auto()
    SERVER_START = enum.auto()
    SERVER = enum.auto()
    SERVER_WITH_AT = enum.auto()
    PATH = enum.auto()
    QUERY_START = enum.auto()
    QUERY = enum.auto()
    FRAGMENT_START = enum.auto()
    FRAGMENT = enum.auto()


_DELIMITERS = frozenset(
    {
        _S.SCHEMA_SLASH,
        _S.SCHEMA_SLASH_SLASH,
        _S.SERVER_START,
        _S.QUERY_START,
        _S.FRAGMENT_START,
    }
)

_FIELD_FOR_STATE = {
    _S.SCHEMA: UrlField.SCHEMA,
    _S.SERVER: UrlField.HOST,
    _S.SERVER_WITH_AT: UrlField.HOST,
    _S.PATH: UrlField.PATH,
    _S.QUERY: UrlField.QUERY,
    _S.FRAGMENT: UrlField.FRAGMENT,
}


def _url_char(state: _S, ch: str) -> _S:
    if ch in _BREAKING:
        return _S.DEAD

    if state is _S.SPACES_BEFORE_URL:
        if ch in "/*":
            return _S.PATH
        if ch in _ALPHA:
            return _S.SCHEMA
    elif state is _S.SCHEMA:
        if ch in _ALPHA:
            return _S.SCHEMA
        if ch == ":":
            return _S.SCHEMA_SLASH
    elif state is _S.SCHEMA_SLASH:
        if ch == "/":
            return _S.SCHEMA_SLASH_SLASH
    elif state is _S.SCHEMA_SLASH_SLASH:
        if ch == "/":
            return _S.SERVER_START
    elif state in (_S.SERVER_WITH_AT, _S.SERVER_START, _S.SERVER):
        if state is _S.SERVER_WITH_AT and ch == "@":
            return _S.DEAD
        if ch == "/":
            return _S.PATH
        if ch == "?":
            return _S.QUERY_START
        if ch == "@":
            return _S.SERVER_WITH_AT
        if ch in _USERINFO or ch in "[]":
            return _S.SERVER
    elif state is _S.PATH:
        if ch in _URL_CHAR:
            return _S.PATH
        if ch == "?":
            return _S.QUERY_START
        if ch == "#":
            return _S.FRAGMENT_START
    elif state in (_S.QUERY_START, _S.QUERY):
        if ch in _URL_CHAR or ch == "?":
            return _S.QUERY
        if ch == "#":
            return _S.FRAGMENT_START
    elif state is _S.FRAGMENT_START:
        if ch in _URL_CHAR or ch == "?":
            return _S.FRAGMENT
        if ch == "#":
            return _S.FRAGMENT_START
    elif state is _S.FRAGMENT:
        if ch in _URL_CHAR or ch in "?#":
            return _S.FRAGMENT
    return _S.DEAD


class _H(enum.Enum):
    DEAD = enum.auto()
    USERINFO_START = enum.auto()
    USERINFO = enum.auto()
    HOST_START = enum.auto()
    V6_START = enum.auto()
    HOST = enum.auto()
    V6 = enum.auto()
    V6_END = enum.auto()
    ZONE_START = enum.auto()
    ZONE = enum.auto()
    PORT_START = enum.auto()
    PORT = enum.auto()


_UNFINISHED_HOST = frozenset(
    {
        _H.HOST_START,
        _H.V6_START,
        _H.V6,
        _H.ZONE_START,
        _H.ZONE,
        _H.PORT_START,
        _H.USERINFO,
        _H.USERINFO_START,
    }
)


def _host_char(state: _H, ch: str) -> _H:
    if state in (_H.USERINFO, _H.USERINFO_START):
        if ch == "@":
            return _H.HOST_START
        if ch in _USERINFO:
            return _H.USERINFO
    elif state is _H.HOST_START:
        if ch == "[":
            return _H.V6_START
        if ch in _HOST_CHAR:
            return _H.HOST
    elif state in (_H.HOST, _H.V6_END):
        if state is _H.HOST and ch in _HOST_CHAR:
            return _H.HOST
        if ch == ":":
            return _H.PORT_START
    elif state in (_H.V6, _H.V6_START):
        if state is _H.V6 and ch == "]":
            return _H.V6_END
        if ch in _HEX or ch in ":.":
            return _H.V6
        if state is _H.V6 and ch == "%":
            return _H.ZONE_START
    elif state in (_H.ZONE, _H.ZONE_START):
        if state is _H.ZONE and ch == "]":
            return _H.V6_END
        if ch in _ZONE_CHAR:
            return _H.ZONE
    elif state in (_H.PORT, _H.PORT_START):
        if ch in _DIGITS:
            return _H.PORT
    return _H.DEAD


def _parse_host(url: str, spans: dict[UrlField, list[int]], found_at: bool) -> None:
    host = spans[UrlField.HOST]
    start, end = host[0], host[0] + host[1]
    host[1] = 0
    state = _H.USERINFO_START if found_at else _H.HOST_START

    for pos, ch in enumerate(url[start:end], start=start):
        new = _host_char(state, ch)
        if new is _H.DEAD:
            raise UrlParseError(f"invalid host character {ch!r} at offset {pos}")
        if new in (_H.HOST, _H.V6):
            if state is not new:
                host[0] = pos
            host[1] += 1
        elif new in (_H.ZONE_START, _H.ZONE):
            host[1] += 1
        elif new in (_H.PORT, _H.USERINFO):
            target = UrlField.PORT if new is _H.PORT else UrlField.USERINFO
            if state is not new:
                spans[target] = [pos, 0]
            spans[target][1] += 1
        state = new

    if state in _UNFINISHED_HOST:
        raise UrlParseError("host part ends unexpectedly")


@dataclass(frozen=True)
class UrlFields:
    """The result of :func:`parse_url`: spans of the parts found in ``url``."""

    url: str
    port: int = 0
    spans: Mapping[UrlField, tuple[int, int]] = dataclass_field(default_factory=dict)

    def get(self, field: UrlField) -> Optional[str]:
        """The text of ``field``, or None when the URL has no such part."""
        span = self.spans.get(UrlField(field))
        if span is None:
            return None
        offset, length = span
        return self.url[offset:offset + length]

    def __contains__(self, field: object) -> bool:
        return field in self.spans


def parse_url(url: str, is_connect: bool = False) -> UrlFields:
    """Split ``url`` into its parts, raising :class:`UrlParseError` if invalid.

    With ``is_connect`` the URL must be exactly ``host:port``, as in the
    target of a CONNECT request.
    """
    spans: dict[UrlField, list[int]] = {}
    state = _S.SERVER_START if is_connect else _S.SPACES_BEFORE_URL
    current: Optional[UrlField] = None
    found_at = False

    for pos, ch in enumerate(url):
        state = _url_char(state, ch)
        if state is _S.DEAD:
            raise UrlParseError(f"invalid character {ch!r} at offset {pos}")
        if state in _DELIMITERS:
            continue
        if state is _S.SERVER_WITH_AT:
            found_at = True
        field = _FIELD_FOR_STATE[state]
        if field is current:
            spans[field][1] += 1
            continue
        spans[field] = [pos, 1]
        current = field

    if UrlField.SCHEMA in spans and UrlField.HOST not in spans:
        raise UrlParseError("a URL with a schema needs a host")

    if UrlField.HOST in spans:
        _parse_host(url, spans, found_at)

    if is_connect and set(spans) != {UrlField.HOST, UrlField.PORT}:
        raise UrlParseError("a CONNECT target must be host:port")

    port = 0
    if UrlField.PORT in spans:
        offset, length = spans[UrlField.PORT]
        port = int(url[offset:offset + length])
        if port > 0xFFFF:
            raise UrlParseError(f"port {port} is out of range")

    return UrlFields(
        url=url,
        port=port,
        spans={key: (value[0], value[1]) for key, value in spans.items()},
    )


def parser_version() -> int:
    """The parser version: major in bits 16-23, minor 8-15, patch 0-7."""
    return VERSION_MAJOR << 16 | VERSION_MINOR << 8 | VERSION_PATCH


class ParsedUrl:
    """The parts of a URL needed to make an HTTP request.

    Missing parts are empty strings, the path defaults to "/" and the port
    to 443 for https and wss, 80 otherwise.
    """

    def __init__(self, url: str) -> None:
        url = url.split("\0", 1)[0]
        fields = parse_url(url)
        self.schema: str = fields.get(UrlField.SCHEMA) or ""
        self.host: str = fields.get(UrlField.HOST) or ""
        self.path: str = fields.get(UrlField.PATH) or "/"
        self.query: str = fields.get(UrlField.QUERY) or ""
        self.userinfo: str = fields.get(UrlField.USERINFO) or ""
        self.port: int = fields.port or (
            443 if self.schema in ("https", "wss") else 80
        )

    def __repr__(self) -> str:
        return (
            f"ParsedUrl(schema={self.schema!r}, host={self.host!r}, "
            f"port={self.port}, path={self.path!r}, query={self.query!r})"
        )