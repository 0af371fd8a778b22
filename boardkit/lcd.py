"""HD44780 character LCD driven through an 8-bit I2C port expander.

The expander's low nibble carries the control lines: bit 0 selects the
register (RS), bit 1 is read/write, bit 2 is the enable strobe and bit 3
switches the backlight. The high nibble carries the 4-bit data bus.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, Protocol, Sequence, runtime_checkable

# commands
LCD_CLEARDISPLAY = 0x01
LCD_RETURNHOME = 0x02
LCD_ENTRYMODESET = 0x04
LCD_DISPLAYCONTROL = 0x08
LCD_CURSORSHIFT = 0x10
LCD_FUNCTIONSET = 0x20
LCD_SETCGRAMADDR = 0x40
LCD_SETDDRAMADDR = 0x80

# entry mode flags
LCD_ENTRYRIGHT = 0x00
LCD_ENTRYLEFT = 0x02
LCD_ENTRYSHIFTINCREMENT = 0x01
LCD_ENTRYSHIFTDECREMENT = 0x00

# display on/off control flags
LCD_DISPLAYON = 0x04
LCD_DISPLAYOFF = 0x00
LCD_CURSORON = 0x02
LCD_CURSOROFF = 0x00
LCD_BLINKON = 0x01
LCD_BLINKOFF = 0x00

# display/cursor shift flags
LCD_DISPLAYMOVE = 0x08
LCD_CURSORMOVE = 0x00
LCD_MOVERIGHT = 0x04
LCD_MOVELEFT = 0x00

# function set flags
LCD_8BITMODE = 0x10
LCD_4BITMODE = 0x00
LCD_2LINE = 0x08
LCD_1LINE = 0x00
LCD_5x10DOTS = 0x04
LCD_5x8DOTS = 0x00

# backlight control
LCD_BACKLIGHT = 0x08
LCD_NOBACKLIGHT = 0x00

# expander control bits
EN = 0x04
RW = 0x02
RS = 0x01

ROW_OFFSETS = (0x00, 0x40, 0x14, 0x54)
CGRAM_ROWS = 8


@runtime_checkable
class I2CBus(Protocol):
    """Anything that can send a single byte to a device on an I2C bus."""

    def write_byte(self, address: int, value: int) -> object:
        """Send ``value`` to the device at ``address`` in one transmission."""
        ...


class LiquidCrystalI2C:
    """A character LCD behind a PCF8574-style I2C expander, in 4-bit mode.

    ``sleep`` takes a delay in seconds and is used for the timing the
    controller requires between commands.
    """

    def __init__(
        self,
        bus: I2CBus,
        address: int,
        cols: int,
        rows: int,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        self.bus = bus
        self.address = address
        self.cols = cols
        self.rows = rows
        self._sleep = sleep
        self._backlight = LCD_NOBACKLIGHT
        self._display_function = LCD_4BITMODE | LCD_1LINE | LCD_5x8DOTS
        self._display_control = 0
        self._display_mode = 0
        self._num_lines = rows

    # ---------------------------------------------------------------- setup

    def init(self) -> None:
        """Reset the function flags and run the power-up sequence."""
        self._display_function = LCD_4BITMODE | LCD_1LINE | LCD_5x8DOTS
        self.begin(self.cols, self.rows)

    def begin(self, cols: int, lines: int, dotsize: int = LCD_5x8DOTS) -> None:
        """Put the controller into 4-bit mode and set lines and font."""
        if lines > 1:
            self._display_function |= LCD_2LINE
        self._num_lines = lines
        if dotsize != 0 and lines == 1:
            self._display_function |= LCD_5x10DOTS

        # The controller needs more than 40 ms after power rises.
        self._sleep(0.050)
        self._expander_write(self._backlight)
        self._sleep(1.0)

        # Three attempts at 8-bit mode, then switch to 4-bit (datasheet fig. 24).
        self._write4bits(0x03 << 4)
        self._sleep(0.0045)
        self._write4bits(0x03 << 4)
        self._sleep(0.0045)
        self._write4bits(0x03 << 4)
        self._sleep(0.000150)
        self._write4bits(0x02 << 4)

        self.command(LCD_FUNCTIONSET | self._display_function)

        self._display_control = LCD_DISPLAYON | LCD_CURSOROFF | LCD_BLINKOFF
        self.display()
        self.clear()

        self._display_mode = LCD_ENTRYLEFT | LCD_ENTRYSHIFTDECREMENT
        self.command(LCD_ENTRYMODESET | self._display_mode)
        self.home()

    # ------------------------------------------------------ high level commands

    def clear(self) -> None:
        """Clear the display and move the cursor to the origin."""
        self.command(LCD_CLEARDISPLAY)
        self._sleep(0.002)

    def home(self) -> None:
        """Move the cursor to the origin."""
        self.command(LCD_RETURNHOME)
        self._sleep(0.002)

    def set_cursor(self, col: int, row: int) -> None:
        """Move the cursor to ``col`` on ``row``, both counted from 0."""
        if row > self._num_lines:
            row = self._num_lines - 1
        if not 0 <= row < len(ROW_OFFSETS):
            raise ValueError(f"row {row} is outside the display")
        self.command(LCD_SETDDRAMADDR | ((col + ROW_OFFSETS[row]) & 0xFF))

    def _update_control(self, flag: int, on: bool) -> None:
        if on:
            self._display_control |= flag
        else:
            self._display_control &= ~flag & 0xFF
        self.command(LCD_DISPLAYCONTROL | self._display_control)

    def display(self) -> None:
        """Turn the display on."""
        self._update_control(LCD_DISPLAYON, True)

    def no_display(self) -> None:
        """Turn the display off without losing its contents."""
        self._update_control(LCD_DISPLAYON, False)

    def cursor(self) -> None:
        """Show the underline cursor."""
        self._update_control(LCD_CURSORON, True)

    def no_cursor(self) -> None:
        """Hide the underline cursor."""
        self._update_control(LCD_CURSORON, False)

    def blink(self) -> None:
        """Turn on the blinking cursor."""
        self._update_control(LCD_BLINKON, True)

    def no_blink(self) -> None:
        """Turn off the blinking cursor."""
        self._update_control(LCD_BLINKON, False)

    def scroll_display_left(self) -> None:
        """Shift the whole display one position left without changing RAM."""
        self.command(LCD_CURSORSHIFT | LCD_DISPLAYMOVE | LCD_MOVELEFT)

    def scroll_display_right(self) -> None:
        """Shift the whole display one position right without changing RAM."""
        self.command(LCD_CURSORSHIFT | LCD_DISPLAYMOVE | LCD_MOVERIGHT)

    def _update_mode(self, flag: int, on: bool) -> None:
        if on:
            self._display_mode |= flag
        else:
            self._display_mode &= ~flag & 0xFF
        self.command(LCD_ENTRYMODESET | self._display_mode)

    def left_to_right(self) -> None:
        """Make text flow from left to right."""
        self._update_mode(LCD_ENTRYLEFT, True)

    def right_to_left(self) -> None:
        """Make text flow from right to left."""
        self._update_mode(LCD_ENTRYLEFT, False)

    def autoscroll(self) -> None:
        """Right-justify text from the cursor by shifting the display."""
        self._update_mode(LCD_ENTRYSHIFTINCREMENT, True)

    def no_autoscroll(self) -> None:
        """Left-justify text from the cursor."""
        self._update_mode(LCD_ENTRYSHIFTINCREMENT, False)

    def create_char(self, location: int, charmap: Sequence[int]) -> None:
        """Store an 8-row glyph in one of the 8 custom character slots."""
        rows = list(charmap)[:CGRAM_ROWS]
        if len(rows) < CGRAM_ROWS:
            raise ValueError(f"a custom character needs {CGRAM_ROWS} rows, got {len(rows)}")
        location &= 0x7
        self.command(LCD_SETCGRAMADDR | (location << 3))
        for row in rows:
            self.write(row)

    def backlight(self) -> None:
        """Switch the backlight on."""
        self._backlight = LCD_BACKLIGHT
        self._expander_write(0)

    def no_backlight(self) -> None:
        """Switch the backlight off."""
        self._backlight = LCD_NOBACKLIGHT
        self._expander_write(0)

    def set_backlight(self, value: int) -> None:
        """Switch the backlight on for a true ``value``, off otherwise."""
        if value:
            self.backlight()
        else:
            self.no_backlight()

    # ------------------------------------------------------- data and commands

    def command(self, value: int) -> None:
        """Send an instruction byte to the controller."""
        self._send(value, 0)

    def write(self, value: int) -> int:
        """Send a character byte to display RAM; returns the count written."""
        self._send(value, RS)
        return 1

    def print(self, text: str | bytes | bytearray | Iterable[int] | object) -> int:
        """Write text at the cursor and return the number of bytes sent.

        Strings are sent as Latin-1 bytes; other objects as their ``str``.
        """
        if isinstance(text, str):
            raw = text.encode("latin-1")
        elif isinstance(text, (bytes, bytearray, memoryview)):
            raw = bytes(text)
        else:
            raw = str(text).encode("latin-1")
        return sum(self.write(byte) for byte in raw)

    # ------------------------------------------------------------- low level

    def _send(self, value: int, mode: int) -> None:
        value &= 0xFF
        high = value & 0xF0
        low = (value << 4) & 0xF0
        self._write4bits(high | mode)
        self._write4bits(low | mode)

    def _write4bits(self, value: int) -> None:
        self._expander_write(value)
        self._pulse_enable(value)

    def _expander_write(self, data: int) -> None:
        self.bus.write_byte(self.address, (data | self._backlight) & 0xFF)

    def _pulse_enable(self, data: int) -> None:
        self._expander_write(data | EN)
        self._sleep(0.000001)
        self._expander_write(data & ~EN & 0xFF)
        self._sleep(0.000050)