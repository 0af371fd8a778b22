"""NTC thermistor temperature readings, with averaging and smoothing wrappers."""

from __future__ import annotations

import abc
import math
import time
from typing import Callable

KELVIN_OFFSET = 273.15

DEFAULT_ADC_RESOLUTION = 1023
DEFAULT_ESP32_ADC_RESOLUTION = 4095
DEFAULT_READINGS_NUMBER = 10
DEFAULT_DELAY_MS = 1
MIN_SMOOTHING_FACTOR = 2


def celsius_to_kelvin(celsius: float) -> float:
    """K = C + 273.15"""
    return celsius + KELVIN_OFFSET


def kelvin_to_celsius(kelvin: float) -> float:
    """C = K - 273.15"""
    return kelvin - KELVIN_OFFSET


def celsius_to_fahrenheit(celsius: float) -> float:
    """F = C * 1.8 + 32"""
    return celsius * 1.8 + 32


def kelvin_to_fahrenheit(kelvin: float) -> float:
    """F = (K - 273.15) * 1.8 + 32"""
    return celsius_to_fahrenheit(kelvin_to_celsius(kelvin))


class Thermistor(abc.ABC):
    """A sensor that reports a temperature in Celsius, Kelvin and Fahrenheit."""

    @abc.abstractmethod
    def read_celsius(self) -> float:
        """Temperature in degrees Celsius."""

    @abc.abstractmethod
    def read_kelvin(self) -> float:
        """Temperature in Kelvin."""

    @abc.abstractmethod
    def read_fahrenheit(self) -> float:
        """Temperature in degrees Fahrenheit."""


class NTCThermistor(Thermistor):
    """An NTC thermistor in a voltage divider, read through an ADC.

    ``read_adc`` returns the raw ADC reading (0 .. ``adc_resolution``).
    Temperatures follow the B-parameter equation
    ``1/K = 1/K0 + ln(R/R0)/B``.
    """

    def __init__(
        self,
        read_adc: Callable[[], float],
        reference_resistance: float,
        nominal_resistance: float,
        nominal_temperature_celsius: float,
        b_value: float,
        adc_resolution: int = DEFAULT_ADC_RESOLUTION,
    ) -> None:
        self._read_adc = read_adc
        self.reference_resistance = reference_resistance
        self.nominal_resistance = nominal_resistance
        self.nominal_temperature = celsius_to_kelvin(nominal_temperature_celsius)
        self.b_value = b_value
        self.adc_resolution = max(adc_resolution, 0)

    def read_celsius(self) -> float:
        return kelvin_to_celsius(self.read_kelvin())

    def read_fahrenheit(self) -> float:
        return kelvin_to_fahrenheit(self.read_kelvin())

    def read_kelvin(self) -> float:
        return self._resistance_to_kelvin(self.read_resistance())

    def _resistance_to_kelvin(self, resistance: float) -> float:
        inverse = (
            1.0 / self.nominal_temperature
            + math.log(resistance / self.nominal_resistance) / self.b_value
        )
        return 1.0 / inverse

    def read_resistance(self) -> float:
        """Thermistor resistance: R = Rref / (ADC / V - 1)."""
        return self.reference_resistance / (self.adc_resolution / self.read_voltage() - 1)

    def read_voltage(self) -> float:
        """The divider voltage in ADC counts."""
        return float(self._read_adc())


class NTCThermistorESP32(NTCThermistor):
    """An NTC thermistor read through a calibrated millivolt ADC reading.

    The millivolt value is converted back to ADC counts using ``adc_vref``.
    """

    def __init__(
        self,
        read_millivolts: Callable[[], float],
        reference_resistance: float,
        nominal_resistance: float,
        nominal_temperature_celsius: float,
        b_value: float,
        adc_vref: int,
        adc_resolution: int = DEFAULT_ESP32_ADC_RESOLUTION,
    ) -> None:
        super().__init__(
            read_millivolts,
            reference_resistance,
            nominal_resistance,
            nominal_temperature_celsius,
            b_value,
            adc_resolution,
        )
        self.vref_mv = adc_vref

    def read_voltage(self) -> float:
        return float(self._read_adc()) / float(self.vref_mv) * self.adc_resolution


class AverageThermistor(Thermistor):
    """Averages several readings of another thermistor, pausing between them.

    Non-positive ``readings_number`` or ``delay_ms`` fall back to the
    defaults (10 readings, 1 ms). ``sleep`` takes a delay in seconds.
    """

    def __init__(
        self,
        origin: Thermistor,
        readings_number: int = DEFAULT_READINGS_NUMBER,
        delay_ms: int = DEFAULT_DELAY_MS,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        self.origin = origin
        self.readings_number = readings_number if readings_number > 0 else DEFAULT_READINGS_NUMBER
        self.delay_ms = delay_ms if delay_ms > 0 else DEFAULT_DELAY_MS
        self._sleep = sleep

    def _average(self, read: Callable[[], float]) -> float:
        total = 0.0
        for _ in range(self.readings_number):
            total += read()
            self._sleep(self.delay_ms / 1000)
        return total / self.readings_number

    def read_celsius(self) -> float:
        return self._average(self.origin.read_celsius)

    def read_kelvin(self) -> float:
        return self._average(self.origin.read_kelvin)

    def read_fahrenheit(self) -> float:
        return self._average(self.origin.read_fahrenheit)


class SmoothThermistor(Thermistor):
    """Exponentially smooths the readings of another thermistor.

    Each unit keeps its own running value; the first reading is passed
    through. The smoothing factor is at least 2.
    """

    def __init__(self, origin: Thermistor, smoothing_factor: int = MIN_SMOOTHING_FACTOR) -> None:
        self.origin = origin
        self.smoothing_factor = max(smoothing_factor, MIN_SMOOTHING_FACTOR)
        self._celsius = 0.0
        self._kelvin = 0.0
        self._fahrenheit = 0.0

    def _smooth(self, value: float, previous: float) -> float:
        if previous == 0:
            return value
        factor = self.smoothing_factor
        return (previous * (factor - 1) + value) / factor

    def read_celsius(self) -> float:
        self._celsius = self._smooth(self.origin.read_celsius(), self._celsius)
        return self._celsius

    def read_kelvin(self) -> float:
        self._kelvin = self._smooth(self.origin.read_kelvin(), self._kelvin)
        return self._kelvin

    def read_fahrenheit(self) -> float:
        self._fahrenheit = self._smooth(self.origin.read_fahrenheit(), self._fahrenheit)
        return self._fahrenheit