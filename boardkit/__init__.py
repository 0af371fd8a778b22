"""Pure-Python helpers for microcontroller boards: encoding, URL parsing,
CRC-32, LZSS and OTA image decoding, thermistors, voice-sensor frames and
I2C character LCDs."""

__version__ = "0.1.0"

__all__ = [
    "b64",
    "urlencode",
    "crc",
    "lzss",
    "urlparser",
    "ota",
    "voice",
    "thermistor",
    "lcd",
]