import struct
import zlib

import pytest
from hypothesis import given, strategies as st

from boardkit.ota import (
    ESP32_OTA_MAGIC,
    NANO_ESP32_OTA_MAGIC,
    OtaDownloadState,
    OtaError,
    OtaFailure,
    OtaImageDecoder,
    decode_ota_image,
)


def _literal_stream(payload: bytes) -> bytes:
    bits = "".join("1" + format(byte, "08b") for byte in payload)
    bits += "0" * (-len(bits) % 8)
    if not bits:
        return b""
    return int(bits, 2).to_bytes(len(bits) // 8, "big")


def _image(payload: bytes, magic: int = ESP32_OTA_MAGIC, version: bytes = bytes(8)) -> bytes:
    tail = struct.pack("<I", magic) + version + _literal_stream(payload)
    return struct.pack("<II", len(tail), zlib.crc32(tail)) + tail


def test_decode_round_trip():
    payload = b"hello firmware"
    assert decode_ota_image(_image(payload)) == payload


def test_decode_with_other_magic():
    payload = b"nano image"
    assert decode_ota_image(_image(payload, NANO_ESP32_OTA_MAGIC), NANO_ESP32_OTA_MAGIC) == payload


def test_chunked_feed_tracks_progress_and_written_bytes():
    payload = bytes(range(200))
    image = _image(payload)
    out = bytearray()
    decoder = OtaImageDecoder(len(image), ESP32_OTA_MAGIC, out.append)
    results = [decoder.feed(image[i:i + 64]) for i in range(0, len(image), 64)]
    assert results[-1] is True
    assert not any(results[:-1])
    assert decoder.state is OtaDownloadState.COMPLETED
    assert decoder.progress() == len(image)
    assert decoder.written_bytes == len(payload)
    assert bytes(out) == payload
    assert decoder.verify().magic_number == ESP32_OTA_MAGIC


@given(st.binary(max_size=300), st.lists(st.integers(min_value=1, max_value=50), max_size=20))
def test_arbitrary_chunking_round_trip(payload, sizes):
    image = _image(payload)
    out = bytearray()
    decoder = OtaImageDecoder(len(image), ESP32_OTA_MAGIC, out.append)
    pos = 0
    for size in sizes:
        if pos >= len(image):
            break
        decoder.feed(image[pos:pos + size])
        pos += size
    if pos < len(image):
        decoder.feed(image[pos:])
    assert decoder.state is OtaDownloadState.COMPLETED
    assert bytes(out) == payload
    assert decoder.verify().crc32 == zlib.crc32(image[8:])


def test_feed_after_completion_is_idempotent():
    image = _image(b"abc")
    decoder = OtaImageDecoder(len(image))
    assert decoder.feed(image) is True
    assert decoder.feed(b"more") is True
    assert decoder.progress() == len(image)


def test_wrong_magic_number():
    image = _image(b"payload", magic=NANO_ESP32_OTA_MAGIC)
    decoder = OtaImageDecoder(len(image), ESP32_OTA_MAGIC)
    with pytest.raises(OtaFailure) as info:
        decoder.feed(image)
    assert info.value.error is OtaError.OTA_HEADER_MAGIC_NUMBER
    assert int(info.value.error) == -11
    assert decoder.state is OtaDownloadState.MAGIC_NUMBER_MISMATCH
    with pytest.raises(OtaFailure) as again:
        decoder.feed(b"x")
    assert again.value.error is OtaError.OTA_DOWNLOAD


def test_crc_mismatch_detected():
    image = bytearray(_image(b"firmware bytes"))
    image[-1] ^= 0x01
    with pytest.raises(OtaFailure) as info:
        decode_ota_image(bytes(image))
    assert info.value.error is OtaError.OTA_HEADER_CRC


def test_more_data_than_announced():
    image = _image(b"firmware")
    decoder = OtaImageDecoder(len(image) - 3)
    with pytest.raises(OtaFailure) as info:
        decoder.feed(image)
    assert info.value.error is OtaError.OTA_DOWNLOAD
    assert decoder.state is OtaDownloadState.ERROR


def test_missing_content_length():
    with pytest.raises(OtaFailure) as info:
        OtaImageDecoder(None)
    assert info.value.error is OtaError.HTTP_HEADER_ERROR


def test_image_shorter_than_header():
    with pytest.raises(OtaFailure) as info:
        decode_ota_image(b"\x00" * 10)
    assert info.value.error is OtaError.OTA_HEADER_LENGTH


def test_verify_before_header():
    decoder = OtaImageDecoder(100)
    decoder.feed(b"\x00" * 5)
    assert decoder.progress() == 5
    with pytest.raises(OtaFailure) as info:
        decoder.verify()
    assert info.value.error is OtaError.OTA_HEADER_LENGTH