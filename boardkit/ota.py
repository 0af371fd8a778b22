"""Incremental decoding and checking of LZSS-compressed OTA firmware images.

An image is a 20-byte :class:`~boardkit.crc.OtaHeader` followed by an LZSS
stream. The CRC-32 in the header covers the header from its magic number
onwards plus the compressed payload.
"""

from __future__ import annotations

import enum
from typing import Callable, Optional

from boardkit.crc import MAGIC_NUMBER_OFFSET, OTA_HEADER_SIZE, OtaHeader, crc_update
from boardkit.lzss import LZSSDecoder

ESP32_OTA_MAGIC = 0x45535033
NANO_ESP32_OTA_MAGIC = 0x23410070

_CRC_INIT = 0xFFFFFFFF


class OtaError(enum.IntEnum):
    """Error codes of an OTA update."""

    NONE = 0
    NO_OTA_STORAGE = -2
    OTA_STORAGE_INIT = -3
    OTA_STORAGE_END = -4
    URL_PARSE_ERROR = -5
    SERVER_CONNECT_ERROR = -6
    HTTP_HEADER_ERROR = -7
    PARSE_HTTP_HEADER = -8
    OTA_HEADER_LENGTH = -9
    OTA_HEADER_CRC = -10
    OTA_HEADER_MAGIC_NUMBER = -11
    OTA_DOWNLOAD = -12
    OTA_HEADER_TIMEOUT = -13
    HTTP_RESPONSE = -14


class OtaDownloadState(enum.Enum):
    """Where a download stands."""

    HEADER = enum.auto()
    FILE = enum.auto()
    COMPLETED = enum.auto()
    MAGIC_NUMBER_MISMATCH = enum.auto()
    ERROR = enum.auto()


class OtaFailure(Exception):
    """Raised when an OTA image cannot be downloaded or verified."""

    def __init__(self, error: OtaError) -> None:
        super().__init__(f"OTA failed: {error.name} ({int(error)})")
        self.error = error


class OtaImageDecoder:
    """Consumes an OTA image chunk by chunk and writes the decoded firmware.

    ``content_length`` is the total image size announced by the server;
    ``None`` means it was not announced. Each decoded byte is passed to
    ``sink``.
    """

    def __init__(
        self,
        content_length: Optional[int],
        magic: int = ESP32_OTA_MAGIC,
        sink: Optional[Callable[[int], object]] = None,
    ) -> None:
        if content_length is None:
            raise OtaFailure(OtaError.HTTP_HEADER_ERROR)
        self.content_length = content_length
        self.magic = magic
        self._sink = sink
        self.state = OtaDownloadState.HEADER
        self.header: Optional[OtaHeader] = None
        self.written_bytes = 0
        self._header_bytes = bytearray()
        self._downloaded = 0
        self._crc = _CRC_INIT
        self._decoder = LZSSDecoder(self._put)

    def _put(self, byte: int) -> None:
        self.written_bytes += 1
        if self._sink is not None:
            self._sink(byte)

    def _fail(self, state: OtaDownloadState, error: OtaError) -> OtaFailure:
        self.state = state
        return OtaFailure(error)

    def feed(self, data: bytes | bytearray | memoryview) -> bool:
        """Consume the next chunk; return True once the whole image arrived.

        Raises :class:`OtaFailure` on a wrong magic number or when more data
        arrives than announced.
        """
        if self.state is OtaDownloadState.COMPLETED:
            return True
        if self.state in (OtaDownloadState.ERROR, OtaDownloadState.MAGIC_NUMBER_MISMATCH):
            raise OtaFailure(OtaError.OTA_DOWNLOAD)

        chunk = bytes(data)
        if not chunk:
            return False
        rest = memoryview(chunk)

        if self.state is OtaDownloadState.HEADER:
            needed = OTA_HEADER_SIZE - len(self._header_bytes)
            self._header_bytes += rest[:needed]
            rest = rest[needed:]
            if len(self._header_bytes) == OTA_HEADER_SIZE:
                raw = bytes(self._header_bytes)
                self.header = OtaHeader.from_bytes(raw)
                self._crc = crc_update(self._crc, raw[MAGIC_NUMBER_OFFSET:])
                if self.header.magic_number != self.magic:
                    raise self._fail(
                        OtaDownloadState.MAGIC_NUMBER_MISMATCH,
                        OtaError.OTA_HEADER_MAGIC_NUMBER,
                    )
                self.state = OtaDownloadState.FILE

        self._downloaded += len(chunk)

        if self.state is OtaDownloadState.HEADER:
            if self._downloaded >= self.content_length:
                raise self._fail(OtaDownloadState.ERROR, OtaError.OTA_HEADER_LENGTH)
            return False

        if rest:
            self._decoder.decompress(rest)
            self._crc = crc_update(self._crc, rest)

        if self._downloaded == self.content_length:
            self.state = OtaDownloadState.COMPLETED
            return True
        if self._downloaded > self.content_length:
            raise self._fail(OtaDownloadState.ERROR, OtaError.OTA_DOWNLOAD)
        return False

    def progress(self) -> int:
        """Number of image bytes received so far."""
        return self._downloaded

    def verify(self) -> OtaHeader:
        """Check the CRC-32 of the received image and return its header."""
        if self.header is None:
            raise OtaFailure(OtaError.OTA_HEADER_LENGTH)
        if self.header.crc32 != self._crc ^ _CRC_INIT:
            raise OtaFailure(OtaError.OTA_HEADER_CRC)
        return self.header


def decode_ota_image(
    data: bytes | bytearray | memoryview, magic: int = ESP32_OTA_MAGIC
) -> bytes:
    """Decode and verify a complete OTA image held in memory."""
    output = bytearray()
    decoder = OtaImageDecoder(len(data), magic, output.append)
    if not decoder.feed(data):
        error = (
            OtaError.OTA_HEADER_LENGTH if decoder.header is None else OtaError.OTA_DOWNLOAD
        )
        raise OtaFailure(error)
    decoder.verify()
    return bytes(output)