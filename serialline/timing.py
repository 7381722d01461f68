"""Monotonic deadline helpers used by timed reads and writes."""

import time


class MillisecondTimer:
    """A deadline a number of milliseconds from now, on the monotonic clock."""

    def __init__(self, millis):
        self._expiry_ns = time.monotonic_ns() + int(millis) * 1_000_000

    def remaining(self):
        """Whole milliseconds left before the deadline; zero or negative once passed."""
        return int((self._expiry_ns - time.monotonic_ns()) / 1_000_000)


def ms_to_seconds(millis):
    """Convert milliseconds to seconds, treating negative values as zero."""
    return max(0, millis) / 1000