"""POSIX serial port access, line settings, and serial device discovery."""

__version__ = "0.1.0"