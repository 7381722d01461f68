[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serialline"
version = "0.1.0"
description = "POSIX serial port access with termios configuration, timed reads and writes, and port discovery"
requires-python = ">=3.10"
dependencies = []
keywords = ["serial", "uart", "tty", "termios", "rs232", "com port"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["serialline"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
