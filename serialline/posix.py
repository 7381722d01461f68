"""Serial port access on POSIX systems through file descriptors and termios."""

import errno
import fcntl
import os
import select
import struct
import sys
import termios
import threading
import time

from .errors import PortNotOpenedError, SerialError, SerialIOError
from .settings import (
    MAX_TIMEOUT,
    ByteSize,
    FlowControl,
    Parity,
    StopBits,
    Timeout,
    byte_time_ns,
)
from .termios_config import baud_constant, configure_attributes
from .timing import MillisecondTimer, ms_to_seconds

_TIOCINQ = getattr(termios, "TIOCINQ", getattr(termios, "FIONREAD", 0x541B))

# Linux serial_struct access for custom divisors.
_TIOCGSERIAL = getattr(termios, "TIOCGSERIAL", 0x541E)
_TIOCSSERIAL = getattr(termios, "TIOCSSERIAL", 0x541F)
_ASYNC_SPD_MASK = 0x1030
_ASYNC_SPD_CUST = 0x0030
_SERIAL_FLAGS_OFFSET = 16
_SERIAL_DIVISOR_OFFSET = 24
_SERIAL_BAUD_BASE_OFFSET = 28

# macOS arbitrary speed ioctl.
_IOSSIOSPEED = 0x80045402

_TIOCM_DTR = getattr(termios, "TIOCM_DTR", 0x002)
_TIOCM_RTS = getattr(termios, "TIOCM_RTS", 0x004)
_TIOCM_CTS = getattr(termios, "TIOCM_CTS", 0x020)
_TIOCM_CD = getattr(termios, "TIOCM_CD", getattr(termios, "TIOCM_CAR", 0x040))
_TIOCM_RI = getattr(termios, "TIOCM_RI", getattr(termios, "TIOCM_RNG", 0x080))
_TIOCM_DSR = getattr(termios, "TIOCM_DSR", 0x100)

_READ_DISCONNECTED = (
    "device reports readiness to read but returned no data (device disconnected?)"
)
_WRITE_DISCONNECTED = (
    "device reports readiness to write but returned no data (device disconnected?)"
)


def _ioctl_request(name):
    request = getattr(termios, name, None)
    if request is None:
        raise SerialIOError(errno.ENOSYS, f"{name} is not available on this system")
    return request


class PosixSerialPort:
    """A serial device opened as a raw, non-blocking terminal.

    The port is opened immediately when a non-empty path is given.
    ``read_lock`` and ``write_lock`` let callers serialise readers and writers.
    """

    def __init__(
        self,
        port="",
        baudrate=9600,
        bytesize=ByteSize.EIGHTBITS,
        parity=Parity.NONE,
        stopbits=StopBits.ONE,
        flowcontrol=FlowControl.NONE,
    ):
        self._port = port
        self._fd = None
        self._is_open = False
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits
        self._flowcontrol = flowcontrol
        self._timeout = Timeout()
        self._byte_time_ns = 0
        self.read_lock = threading.Lock()
        self.write_lock = threading.Lock()
        if port:
            self.open()

    def open(self):
        """Open and configure the device."""
        if not self._port:
            raise ValueError("Empty port is invalid.")
        if self._is_open:
            raise SerialError("Serial port already open.")
        while True:
            try:
                fd = os.open(self._port, os.O_RDWR | os.O_NOCTTY | os.O_NONBLOCK)
                break
            except InterruptedError:
                continue
            except OSError as exc:
                if exc.errno in (errno.ENFILE, errno.EMFILE):
                    raise SerialIOError(exc.errno, "Too many file handles open.") from exc
                raise SerialIOError(exc.errno, exc.strerror) from exc
        self._fd = fd
        try:
            self.reconfigure()
        except BaseException:
            os.close(fd)
            self._fd = None
            raise
        self._is_open = True

    def reconfigure(self):
        """Apply the current line settings to the open descriptor."""
        if self._fd is None:
            raise SerialIOError("Invalid file descriptor, is the serial port open?")
        try:
            attrs = termios.tcgetattr(self._fd)
        except termios.error as exc:
            raise SerialIOError(*exc.args) from exc

        new_attrs = configure_attributes(
            attrs,
            self._baudrate,
            self._bytesize,
            self._parity,
            self._stopbits,
            self._flowcontrol,
        )
        if baud_constant(self._baudrate) is None:
            self._set_custom_baud()

        try:
            termios.tcsetattr(self._fd, termios.TCSANOW, new_attrs)
        except termios.error:
            # Applying the attributes is best effort, as with the system call.
            pass

        self._byte_time_ns = byte_time_ns(
            self._baudrate, self._bytesize, self._parity, self._stopbits
        )

    def _set_custom_baud(self):
        if sys.platform == "darwin":
            try:
                fcntl.ioctl(self._fd, _IOSSIOSPEED, struct.pack("i", int(self._baudrate)))
            except OSError as exc:
                raise SerialIOError(exc.errno, exc.strerror) from exc
        elif sys.platform.startswith("linux"):
            buffer = bytearray(128)
            try:
                fcntl.ioctl(self._fd, _TIOCGSERIAL, buffer)
            except OSError as exc:
                raise SerialIOError(exc.errno, exc.strerror) from exc
            (baud_base,) = struct.unpack_from("i", buffer, _SERIAL_BAUD_BASE_OFFSET)
            (flags,) = struct.unpack_from("i", buffer, _SERIAL_FLAGS_OFFSET)
            struct.pack_into(
                "i", buffer, _SERIAL_DIVISOR_OFFSET, int(baud_base / int(self._baudrate))
            )
            flags = (flags & ~_ASYNC_SPD_MASK) | _ASYNC_SPD_CUST
            struct.pack_into("i", buffer, _SERIAL_FLAGS_OFFSET, flags)
            try:
                fcntl.ioctl(self._fd, _TIOCSSERIAL, buffer)
            except OSError as exc:
                raise SerialIOError(exc.errno, exc.strerror) from exc
        else:
            raise ValueError("OS does not currently support custom bauds")

    def close(self):
        """Close the device; closing a closed port does nothing."""
        if not self._is_open:
            return
        if self._fd is not None:
            try:
                os.close(self._fd)
            except OSError as exc:
                raise SerialIOError(exc.errno, exc.strerror) from exc
            self._fd = None
        self._is_open = False

    @property
    def is_open(self):
        """Whether the port is open."""
        return self._is_open

    def available(self):
        """Number of bytes waiting in the input buffer; zero when closed."""
        if not self._is_open:
            return 0
        try:
            result = fcntl.ioctl(self._fd, _TIOCINQ, struct.pack("i", 0))
        except OSError as exc:
            raise SerialIOError(exc.errno, exc.strerror) from exc
        return struct.unpack("i", result)[0]

    def wait_readable(self, timeout_ms):
        """Block until data can be read or ``timeout_ms`` passes; True if readable."""
        if self._fd is None:
            raise PortNotOpenedError("wait_readable")
        try:
            ready, _, _ = select.select([self._fd], [], [], ms_to_seconds(timeout_ms))
        except InterruptedError:
            return False
        except OSError as exc:
            raise SerialIOError(exc.errno, exc.strerror) from exc
        return bool(ready)

    def wait_byte_times(self, count):
        """Sleep for as long as it takes to transmit ``count`` characters."""
        time.sleep(self._byte_time_ns * count / 1e9)

    def read(self, size):
        """Read up to ``size`` bytes within the configured read timeout."""
        if not self._is_open:
            raise PortNotOpenedError("read")
        timeout = self._timeout
        deadline = MillisecondTimer(
            timeout.read_timeout_constant + timeout.read_timeout_multiplier * size
        )
        data = bytearray()
        try:
            data += os.read(self._fd, size)
        except OSError:
            pass

        while len(data) < size:
            remaining = deadline.remaining()
            if remaining <= 0:
                break
            wait_ms = min(remaining, timeout.inter_byte_timeout)
            if not self.wait_readable(wait_ms):
                continue
            if size > 1 and timeout.inter_byte_timeout == MAX_TIMEOUT:
                pending = self.available() + len(data)
                if pending < size:
                    self.wait_byte_times(size - pending)
            try:
                chunk = os.read(self._fd, size - len(data))
            except OSError:
                chunk = b""
            if not chunk:
                raise SerialError(_READ_DISCONNECTED)
            data += chunk
        return bytes(data)

    def write(self, data):
        """Write bytes within the configured write timeout; returns the count written."""
        if not self._is_open:
            raise PortNotOpenedError("write")
        view = memoryview(data).cast("B")
        length = len(view)
        timeout = self._timeout
        deadline = MillisecondTimer(
            timeout.write_timeout_constant + timeout.write_timeout_multiplier * length
        )
        written = 0
        first_iteration = True
        while written < length:
            remaining = deadline.remaining()
            # A zero timeout still allows one attempt.
            if not first_iteration and remaining <= 0:
                break
            first_iteration = False
            try:
                _, ready, _ = select.select([], [self._fd], [], ms_to_seconds(remaining))
            except InterruptedError:
                continue
            except OSError as exc:
                raise SerialIOError(exc.errno, exc.strerror) from exc
            if not ready:
                break
            try:
                count = os.write(self._fd, view[written:])
            except OSError:
                count = 0
            if count < 1:
                raise SerialError(_WRITE_DISCONNECTED)
            written += count
        return written

    @property
    def port(self):
        """Device path; changing it takes effect on the next open."""
        return self._port

    @port.setter
    def port(self, value):
        self._port = value

    @property
    def timeout(self):
        """The read and write timeouts."""
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        self._timeout = value

    @property
    def baudrate(self):
        """Line speed in bits per second."""
        return self._baudrate

    @baudrate.setter
    def baudrate(self, value):
        self._baudrate = value
        if self._is_open:
            self.reconfigure()

    @property
    def bytesize(self):
        """Data bits per character."""
        return self._bytesize

    @bytesize.setter
    def bytesize(self, value):
        self._bytesize = value
        if self._is_open:
            self.reconfigure()

    @property
    def parity(self):
        """Parity mode."""
        return self._parity

    @parity.setter
    def parity(self, value):
        self._parity = value
        if self._is_open:
            self.reconfigure()

    @property
    def stopbits(self):
        """Stop bits per character."""
        return self._stopbits

    @stopbits.setter
    def stopbits(self, value):
        self._stopbits = value
        if self._is_open:
            self.reconfigure()

    @property
    def flowcontrol(self):
        """Flow control mode."""
        return self._flowcontrol

    @flowcontrol.setter
    def flowcontrol(self, value):
        self._flowcontrol = value
        if self._is_open:
            self.reconfigure()

    def _require_open(self, operation):
        if not self._is_open:
            raise PortNotOpenedError(operation)

    def flush(self):
        """Wait until all written output has been transmitted."""
        self._require_open("flush")
        termios.tcdrain(self._fd)

    def flush_input(self):
        """Discard received data not yet read."""
        self._require_open("flush_input")
        termios.tcflush(self._fd, termios.TCIFLUSH)

    def flush_output(self):
        """Discard written data not yet transmitted."""
        self._require_open("flush_output")
        termios.tcflush(self._fd, termios.TCOFLUSH)

    def send_break(self, duration):
        """Transmit a break; ``duration`` is passed on divided by four."""
        self._require_open("send_break")
        termios.tcsendbreak(self._fd, int(duration / 4))

    def set_break(self, level):
        """Set or clear the break condition."""
        self._require_open("set_break")
        name = "TIOCSBRK" if level else "TIOCCBRK"
        try:
            fcntl.ioctl(self._fd, _ioctl_request(name))
        except OSError as exc:
            raise SerialError(
                f"set_break failed on a call to ioctl({name}): {exc.errno} {exc.strerror}"
            ) from exc

    def _set_modem_line(self, operation, bit, level):
        self._require_open(operation)
        name = "TIOCMBIS" if level else "TIOCMBIC"
        try:
            fcntl.ioctl(self._fd, _ioctl_request(name), struct.pack("I", bit))
        except OSError as exc:
            raise SerialError(
                f"{operation} failed on a call to ioctl({name}): {exc.errno} {exc.strerror}"
            ) from exc

    def set_rts(self, level):
        """Set the RTS line."""
        self._set_modem_line("set_rts", _TIOCM_RTS, level)

    def set_dtr(self, level):
        """Set the DTR line."""
        self._set_modem_line("set_dtr", _TIOCM_DTR, level)

    def _modem_status(self, operation):
        try:
            result = fcntl.ioctl(self._fd, _ioctl_request("TIOCMGET"), struct.pack("I", 0))
        except OSError as exc:
            raise SerialError(
                f"{operation} failed on a call to ioctl(TIOCMGET): {exc.errno} {exc.strerror}"
            ) from exc
        return struct.unpack("I", result)[0]

    def wait_for_change(self):
        """Block until CTS, DSR, RI or CD changes; False if the port closed first."""
        mask = _TIOCM_CD | _TIOCM_DSR | _TIOCM_RI | _TIOCM_CTS
        miwait = getattr(termios, "TIOCMIWAIT", None)
        if miwait is not None:
            try:
                fcntl.ioctl(self._fd, miwait, mask)
            except (OSError, TypeError) as exc:
                code = getattr(exc, "errno", None)
                reason = getattr(exc, "strerror", str(exc))
                raise SerialError(
                    f"wait_for_change failed on a call to ioctl(TIOCMIWAIT): {code} {reason}"
                ) from exc
            return True
        while self._is_open:
            if self._modem_status("wait_for_change") & mask:
                return True
            time.sleep(0.001)
        return False

    def _line_state(self, operation, bit):
        self._require_open(operation)
        return bool(self._modem_status(operation) & bit)

    def cts(self):
        """State of the CTS line."""
        return self._line_state("cts", _TIOCM_CTS)

    def dsr(self):
        """State of the DSR line."""
        return self._line_state("dsr", _TIOCM_DSR)

    def ri(self):
        """State of the RI line."""
        return self._line_state("ri", _TIOCM_RI)

    def cd(self):
        """State of the CD line."""
        return self._line_state("cd", _TIOCM_CD)