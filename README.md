# boardkit

boardkit is a set of small pure-Python tools for work with microcontroller
boards. You can use them to check firmware-side logic on a desktop, or run
them wherever Python runs. The package has no runtime dependencies.

## What it contains

| Module | Purpose |
| --- | --- |
| `boardkit.b64` | `b64_encode(data)`: standard Base64 with `=` padding. Text is encoded as UTF-8 first. |
| `boardkit.urlencode` | `url_encode(text)`: percent-encodes every byte except letters, digits and `-._~`, with upper-case hex digits. |
| `boardkit.crc` | `crc_update(crc, data)`: a running CRC-32. Also the `OtaHeader` (20 bytes) and `HeaderVersion` (8 bytes) image header layouts, each with `from_bytes`. |
| `boardkit.lzss` | `LZSSDecoder`, a streaming LZSS decoder (11-bit positions, 4-bit lengths) that reports a `DecodeStatus`, and `lzss_decode(data)` for a whole stream held in memory. |
| `boardkit.urlparser` | `parse_url(url, is_connect=False)` returns `UrlFields` and raises `UrlParseError` on a malformed URL. `ParsedUrl` fills in the default path and port. `parser_version()` gives the parser version. |
| `boardkit.ota` | `OtaImageDecoder` checks the header and magic number of an OTA firmware image, decompresses it and verifies its CRC. `decode_ota_image(data, magic)` does the same for a complete image. |
| `boardkit.voice` | `command_reply(frame)` and `detect_voice(serial)` handle the 5-byte frames of an offline voice-recognition sensor. `COMMANDS` lists the known `VoiceCommand`s. |
| `boardkit.thermistor` | `NTCThermistor` and `NTCThermistorESP32` give temperature readings. `AverageThermistor` and `SmoothThermistor` wrap them. Also unit conversion helpers. |
| `boardkit.lcd` | `LiquidCrystalI2C` drives an HD44780 character LCD in 4-bit mode through an I2C port expander. |

## Installation

```
pip install boardkit
```

## Examples

### Encoding

```python
from boardkit.b64 import b64_encode
from boardkit.urlencode import url_encode

b64_encode(b"hello")    # "aGVsbG8="
url_encode("a b&c")     # "a%20b%26c"
```

### CRC-32

`crc_update` applies no initial value and no final inversion. For a standard
CRC-32, start from `0xFFFFFFFF` and XOR the result with `0xFFFFFFFF`:

```python
from boardkit.crc import crc_update

crc_update(0xFFFFFFFF, b"123456789") ^ 0xFFFFFFFF   # 0xCBF43926
```

### Parsing a URL

```python
from boardkit.urlparser import ParsedUrl, UrlField, parse_url

url = ParsedUrl("https://example.com/firmware.ota")
url.host, url.port, url.path   # ("example.com", 443, "/firmware.ota")

fields = parse_url("http://example.com:8080/a?b=1")
fields.get(UrlField.QUERY)     # "b=1"
fields.port                    # 8080
```

`ParsedUrl` leaves a missing part as an empty string. A missing path becomes
`"/"`. A missing port becomes 443 for `https` and `wss`, and 80 for anything
else.

### Decoding an OTA image

```python
from boardkit.ota import OtaFailure, OtaImageDecoder, decode_ota_image

payload = decode_ota_image(image_bytes, magic=0x45535033)

# or chunk by chunk, as the data arrives:
decoder = OtaImageDecoder(content_length, 0x45535033, sink)
for chunk in chunks:
    if decoder.feed(chunk):
        break
header = decoder.verify()
```

`feed` returns `True` once all announced bytes have arrived. `progress()`
reports how many bytes have been received so far. Failures raise
`OtaFailure`, whose `error` attribute holds an `OtaError`:

- a missing content length,
- a wrong magic number,
- more data than announced,
- a truncated header,
- a CRC mismatch.

### Reading a thermistor

Pass in any function that returns the raw ADC count:

```python
from boardkit.thermistor import NTCThermistor, SmoothThermistor

sensor = NTCThermistor(read_adc, 8000, 100000, 25, 3950, 1023)
smooth = SmoothThermistor(sensor, 5)
smooth.read_celsius()
```

`NTCThermistorESP32` takes a function that returns millivolts, together with
the ADC reference voltage.

`AverageThermistor(origin, readings_number, delay_ms, sleep)` averages several
readings and pauses between them.

### Voice-sensor frames

```python
from boardkit.voice import command_reply, detect_voice

frame = detect_voice(port)   # None until 5 bytes are waiting
if frame is not None:
    print(command_reply(frame))
```

`port` needs an `in_waiting` count and a `read(size)` method. A frame with an
unknown command code makes `command_reply` raise `ValueError`.

### Driving an LCD

Pass in an object with a `write_byte(address, value)` method:

```python
from boardkit.lcd import LiquidCrystalI2C

lcd = LiquidCrystalI2C(bus, 0x27, 16, 2)
lcd.init()
lcd.backlight()
lcd.set_cursor(0, 1)
lcd.print("Hello")
```

## What it does not do

boardkit does not touch hardware or the network by itself:

- It has no HTTP or WebSocket client and does not download firmware. You feed
  an `OtaImageDecoder` the bytes you have fetched, and you write the decoded
  firmware to storage through your own `sink`.
- It does not flash firmware or restart a board.
- The LCD, the thermistors and the voice sensor work only through the bus
  object, reading functions and serial port that you pass in.

## Running the tests

```
pip install boardkit[test]
pytest
```