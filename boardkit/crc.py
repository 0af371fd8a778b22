"""CRC-32 accumulation and the OTA image header layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass

HEADER_VERSION_SIZE = 8
OTA_HEADER_SIZE = 20
MAGIC_NUMBER_OFFSET = 8

_POLYNOMIAL = 0xEDB88320


def _make_table() -> tuple[int, ...]:
    table = []
    for index in range(256):
        value = index
        for _ in range(8):
            value = (value >> 1) ^ _POLYNOMIAL if value & 1 else value >> 1
        table.append(value)
    return tuple(table)


_TABLE = _make_table()


def crc_update(crc: int, data: bytes | bytearray | memoryview) -> int:
    """Feed ``data`` into a running CRC-32 value.

    No initial value or final inversion is applied: start from 0xFFFFFFFF
    and XOR the result with 0xFFFFFFFF for a standard CRC-32.
    """
    crc &= 0xFFFFFFFF
    for byte in bytes(data):
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc & 0xFFFFFFFF


_VERSION_FIELDS = (
    ("header_version", 6),
    ("compression", 1),
    ("signature", 1),
    ("spare", 4),
    ("payload_target", 4),
    ("payload_major", 8),
    ("payload_minor", 8),
    ("payload_patch", 8),
    ("payload_build_num", 24),
)


@dataclass(frozen=True)
class HeaderVersion:
    """The 8-byte packed version block of an OTA header."""

    header_version: int
    compression: bool
    signature: bool
    spare: int
    payload_target: int
    payload_major: int
    payload_minor: int
    payload_patch: int
    payload_build_num: int

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> HeaderVersion:
        """Unpack the little-endian bit fields of an 8-byte version block."""
        raw = bytes(data)
        if len(raw) != HEADER_VERSION_SIZE:
            raise ValueError(
                f"header version needs {HEADER_VERSION_SIZE} bytes, got {len(raw)}"
            )
        value = int.from_bytes(raw, "little")
        fields = {}
        shift = 0
        for name, width in _VERSION_FIELDS:
            fields[name] = (value >> shift) & ((1 << width) - 1)
            shift += width
        fields["compression"] = bool(fields["compression"])
        fields["signature"] = bool(fields["signature"])
        return cls(**fields)

    def _to_bytes(self) -> bytes:
        value = 0
        shift = 0
        for name, width in _VERSION_FIELDS:
            value |= (int(getattr(self, name)) & ((1 << width) - 1)) << shift
            shift += width
        return value.to_bytes(HEADER_VERSION_SIZE, "little")


@dataclass(frozen=True)
class OtaHeader:
    """The 20-byte header that precedes an OTA payload."""

    length: int
    crc32: int
    magic_number: int
    version: HeaderVersion

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> OtaHeader:
        """Unpack a 20-byte little-endian OTA header."""
        raw = bytes(data)
        if len(raw) != OTA_HEADER_SIZE:
            raise ValueError(
                f"OTA header needs {OTA_HEADER_SIZE} bytes, got {len(raw)}"
            )
        length, crc32, magic = struct.unpack_from("<III", raw)
        version = HeaderVersion.from_bytes(raw[12:])
        return cls(length, crc32, magic, version)

    def checked_bytes(self) -> bytes:
        """The header bytes covered by the CRC: magic number onwards."""
        return struct.pack("<I", self.magic_number) + self.version._to_bytes()