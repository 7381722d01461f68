# serialline

Open, configure, read from and write to serial ports on POSIX systems,
and find the serial devices attached to the machine.

## Installing

```
pip install serialline
```

## Opening a port

`serialline.posix.PosixSerialPort` opens the device as soon as it is
constructed with a non-empty path. The device is put in raw, non-blocking
mode with the given line settings.

```python
from serialline.posix import PosixSerialPort
from serialline.settings import ByteSize, FlowControl, Parity, StopBits, Timeout

port = PosixSerialPort(
    "/dev/ttyUSB0",
    baudrate=115200,
    bytesize=ByteSize.EIGHTBITS,
    parity=Parity.NONE,
    stopbits=StopBits.ONE,
    flowcontrol=FlowControl.NONE,
)
port.timeout = Timeout.simple(1000)
try:
    port.write(b"hello\n")
    reply = port.read(16)
finally:
    port.close()
```

`read(size)` returns the bytes that arrived before the read timeout ran
out. This can be fewer than `size`. The total read time is
`read_timeout_constant + read_timeout_multiplier * size` milliseconds.
No more than `inter_byte_timeout` passes between bytes. `write(data)`
returns the number of bytes written within the write timeout. It always
makes at least one attempt, even with a zero timeout.

`Timeout.simple(ms)` sets one total limit for reads and writes and no
inter-byte limit. The default `Timeout()` is all zeros.

Other members:

- `baudrate`, `bytesize`, `parity`, `stopbits` and `flowcontrol` are
  properties. Setting one on an open port reconfigures it at once.
- `port` is the device path. A change takes effect on the next `open()`.
- Standard baud rates go through termios. Other rates are set with a
  custom divisor on Linux and with the arbitrary-speed ioctl on macOS.
  Elsewhere they raise `ValueError`.
- `available()` returns the number of bytes waiting. `wait_readable(ms)`
  and `wait_byte_times(count)` wait for input or for the transmission
  time of `count` characters.
- `flush()`, `flush_input()` and `flush_output()` drain or discard
  buffers. `send_break(duration)` and `set_break(level)` control breaks.
- `set_rts(level)` and `set_dtr(level)` drive the output lines.
- `cts()`, `dsr()`, `ri()` and `cd()` report the input lines.
  `wait_for_change()` blocks until one of them changes.
- `read_lock` and `write_lock` are `threading.Lock` objects. Callers can
  use them to keep readers and writers from overlapping.

## Building blocks

- `serialline.termios_config.configure_attributes(attrs, baudrate, bytesize, parity, stopbits, flowcontrol)`
  returns a raw-mode copy of a `termios.tcgetattr` list.
  `baud_constant(rate)` gives the termios speed constant, or `None` for a
  non-standard rate.
- `serialline.settings.byte_time_ns(baudrate, bytesize, parity, stopbits)`
  gives the time to send one character.
- `serialline.timing.MillisecondTimer(ms).remaining()` counts down on the
  monotonic clock.
- `serialline.windows_config` computes values in the shape the Windows
  communications API expects:
  - `prefix_port(port)`
  - `dcb_settings(...)`, which returns a `DcbSettings`
  - `comm_timeouts(timeout)`, which returns a `CommTimeouts`

## Errors

Failures raise exceptions from `serialline.errors`:

- `SerialError` is the base class.
- `SerialIOError` is also an `OSError`. It is raised when the operating
  system reports a failure.
- `PortNotOpenedError` is raised when an operation needs an open port.

Invalid byte size, parity or stop bits raise `ValueError`.

## Finding ports

```python
from serialline.list_ports import list_ports

for info in list_ports():
    print(info.port, info.description, info.hardware_id)
```

`list_ports(dev_root="/dev", sysfs_root="/sys")` returns `PortInfo`
entries. It lists `ttyACM*`, `ttyS*`, `ttyUSB*`, `tty.*` and `cu.*`, in
that order.

The description and hardware id come from sysfs. USB adapters report
manufacturer, product, serial number, and vendor and product ids. Without
a description the device name is used. Without a hardware id, `n/a` is
used.

`serialline.port_descriptions` builds `PortInfo` entries from registry
properties gathered elsewhere:

- `describe_usb_port(...)` takes the properties of a USB parent device.
- `windows_port_entries(entries)` takes `(port_name, friendly_name, hardware_id)`
  registry values and leaves out parallel ports.

## What it does not do

- There is no higher-level port object. Nothing offers line-oriented
  reading such as reading up to an end-of-line marker, or context-manager
  use. `PosixSerialPort` reads and writes bytes only.
- Ports can be opened only on POSIX systems. On Windows the package
  computes configuration values but does not open devices.
- It does not query the macOS or Windows device registries itself.

## Testing

```
pip install serialline[test]
pytest
```