[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wdc65816"
version = "0.1.0"
description = "An interpreting emulator of the WDC 65C816 CPU with pluggable memory"
requires-python = ">=3.10"
dependencies = []
keywords = ["65816", "65c816", "cpu", "emulator", "snes", "6502"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wdc65816"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
