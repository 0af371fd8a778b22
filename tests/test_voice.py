import pytest

from boardkit.voice import COMMANDS, FRAME_SIZE, command_reply, detect_voice


class _FakeSerial:
    def __init__(self, data: bytes) -> None:
        self.buffer = bytearray(data)

    @property
    def in_waiting(self) -> int:
        return len(self.buffer)

    def read(self, size: int) -> bytes:
        chunk = bytes(self.buffer[:size])
        del self.buffer[:size]
        return chunk


def test_reply_for_known_code():
    assert command_reply(bytes([0x5A, 0x03, 0x00, 0x00, 0x00])) == "ok, turn on the air conditioner"


def test_reply_for_first_and_last_codes():
    assert command_reply(bytes([0, 0x00, 0, 0, 0])) == "Hi, how can I help?|Hi, what's up?"
    assert command_reply(bytes([0, 0x2C, 0, 0, 0])) == "ok, warm light turn off"


def test_every_command_round_trips():
    for command in COMMANDS:
        assert command_reply(bytes([0, command.code, 0, 0, 0])) == command.reply


def test_unknown_code_raises():
    with pytest.raises(ValueError, match="Command not found"):
        command_reply(bytes([0, 0x7F, 0, 0, 0]))


def test_short_frame_raises():
    with pytest.raises(ValueError):
        command_reply(b"\x01")


def test_detect_voice_needs_whole_frame():
    port = _FakeSerial(b"\x01\x02\x03")
    assert detect_voice(port) is None
    assert port.in_waiting == 3


def test_detect_voice_reads_one_frame():
    port = _FakeSerial(bytes([1, 2, 3, 4, 5, 6, 7]))
    frame = detect_voice(port)
    assert frame == bytes([1, 2, 3, 4, 5])
    assert len(frame) == FRAME_SIZE
    assert port.in_waiting == 2
    assert detect_voice(port) is None


def test_detected_frame_gives_reply():
    port = _FakeSerial(bytes([0x5A, 0x27, 0x00, 0x00, 0x00]))
    assert command_reply(detect_voice(port)) == "ok, turn on the light"