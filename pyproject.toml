[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boardkit"
version = "0.1.0"
description = "Pure-Python helpers for microcontroller boards: base64, URL encoding and parsing, CRC-32, LZSS and OTA image decoding, thermistors, voice-command frames and HD44780 I2C LCD control."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "embedded",
    "base64",
    "url-parser",
    "crc32",
    "lzss",
    "ota",
    "thermistor",
    "hd44780",
    "lcd",
    "i2c",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["boardkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
