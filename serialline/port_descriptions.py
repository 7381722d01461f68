"""Descriptions and hardware ids for serial ports found through system registries.

The values come from the USB device registry on macOS or the device
registry on Windows. These helpers turn those raw properties into
:class:`~serialline.list_ports.PortInfo` entries.
"""

from .list_ports import PortInfo

_WHITESPACE = " \t\f\v\n\r"
_HARDWARE_ID_LIMIT = 128
_UNKNOWN = "n/a"


def rtrim(text):
    """``text`` without trailing spaces, tabs, form feeds or line breaks."""
    return text.rstrip(_WHITESPACE)


def usb_description(vendor_name, product_name):
    """Vendor and product name joined by a space, or "n/a" when both are blank."""
    vendor = rtrim(vendor_name or "")
    product = rtrim(product_name or "")
    description = rtrim(f"{vendor} {product}")
    return description or _UNKNOWN


def usb_hardware_id(vendor_id, product_id, serial_number):
    """USB vendor id, product id and serial number, or "n/a" if the ids are unknown.

    Ids of zero or ``None`` count as unknown. A missing serial number is
    written as "None". A result that would not fit in 127 characters is
    also given as "n/a".
    """
    vid = (vendor_id or 0) & 0xFFFF
    pid = (product_id or 0) & 0xFFFF
    if not (vid and pid):
        return _UNKNOWN
    serial = rtrim(serial_number or "") or "None"
    hardware_id = f"USB VID:PID={vid:04x}:{pid:04x} SNR={serial}"
    if len(hardware_id) >= _HARDWARE_ID_LIMIT:
        return _UNKNOWN
    return hardware_id


def describe_usb_port(
    port,
    vendor_name="",
    product_name="",
    serial_number="",
    vendor_id=0,
    product_id=0,
):
    """A :class:`PortInfo` for a device path and the properties of its USB parent.

    Properties that could not be found may be given as empty or ``None``.
    """
    if not port:
        raise ValueError("a serial port needs a device path")
    return PortInfo(
        port=port,
        description=usb_description(vendor_name, product_name),
        hardware_id=usb_hardware_id(vendor_id, product_id, serial_number),
    )


def registry_string(raw):
    """Text of a registry string value, cut at its terminating NUL.

    ``raw`` may be text or UTF-16-LE encoded bytes; ``None`` or an empty
    value gives "".
    """
    if not raw:
        return ""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        raw = bytes(raw).decode("utf-16-le", errors="replace")
    return raw.split("\0", 1)[0]


def is_parallel_port(name):
    """Whether a port name belongs to a parallel (LPT) port."""
    return "LPT" in name


def windows_port_entries(entries):
    """Serial ports from ``(port_name, friendly_name, hardware_id)`` registry values.

    Entries whose port name could not be read (``None``) and parallel
    ports are left out; the rest keep their order.
    """
    ports = []
    for port_name, friendly_name, hardware_id in entries:
        if port_name is None:
            continue
        name = registry_string(port_name)
        if is_parallel_port(name):
            continue
        ports.append(
            PortInfo(
                port=name,
                description=registry_string(friendly_name),
                hardware_id=registry_string(hardware_id),
            )
        )
    return ports