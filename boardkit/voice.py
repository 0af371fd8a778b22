"""Frames from an offline voice-recognition sensor and their replies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

FRAME_SIZE = 5


@dataclass(frozen=True)
class VoiceCommand:
    """A command the sensor recognises: its code and the spoken reply."""

    reply: str
    code: int


COMMANDS: tuple[VoiceCommand, ...] = tuple(
    VoiceCommand(reply, code)
    for code, reply in enumerate(
        (
            "Hi, how can I help?|Hi, what's up?",
            "see you later",
            "ok, match the air conditioner",
            "ok, turn on the air conditioner",
            "ok, turn off the air conditioner",
            "ok, automatic mode",
            "ok, cold mode",
            "ok, heat mode",
            "ok, dry mode",
            "ok, fan mode",
            "ok, sleeping mode",
            "ok, automatic fan",
            "ok, low fan",
            "ok, medium fan",
            "ok, high fan",
            "ok, higher the fan",
            "ok, lower the fan",
            "ok, sixteen centigrade",
            "ok, seventeen centigrade",
            "ok, eighteen centigrade",
            "ok, nineteen centigrade",
            "ok, twenty centigrade",
            "ok, twenty one centigrade",
            "ok, twenty two centigrade",
            "ok, twenty three centigrade",
            "ok, twenty four centigrade",
            "ok, twenty five centigrade",
            "ok, twenty six centigrade",
            "ok, twenty seven centigrade",
            "ok, twenty eight centigrade",
            "ok, twenty nine centigrade",
            "ok, thirty centigrade",
            "ok, warmer",
            "ok, cooler",
            "ok, start to fan",
            "ok, stop to fan",
            "ok, air swing up and down",
            "ok, air swing left and right",
            "ok, air conditioner reset",
            "ok, turn on the light",
            "ok, turn off the light",
            "ok, cold light turn on",
            "ok, cold light turn off",
            "ok, warm light turn on",
            "ok, warm light turn off",
        )
    )
)

_BY_CODE = {command.code: command for command in COMMANDS}


class SerialPort(Protocol):
    """The part of a serial port that :func:`detect_voice` needs."""

    @property
    def in_waiting(self) -> int: ...

    def read(self, size: int) -> bytes: ...


def command_reply(frame: bytes | bytearray | memoryview) -> str:
    """The reply for a sensor frame; the command code is its second byte.

    Raises ValueError when the frame is too short or the code is unknown.
    """
    raw = bytes(frame)
    if len(raw) < 2:
        raise ValueError("Command not found, improper Hex code found")
    command = _BY_CODE.get(raw[1])
    if command is None:
        raise ValueError("Command not found, improper Hex code found")
    return command.reply


def detect_voice(serial: SerialPort) -> Optional[bytes]:
    """Read one 5-byte frame if the port holds a whole one, else None."""
    if serial.in_waiting < FRAME_SIZE:
        return None
    return bytes(serial.read(FRAME_SIZE))