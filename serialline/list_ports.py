"""Discovery of serial devices on Linux through /dev and sysfs."""

import glob
import os
from dataclasses import dataclass

_SEARCH_PATTERNS = ("ttyACM*", "ttyS*", "ttyUSB*", "tty.*", "cu.*")


@dataclass
class PortInfo:
    """A serial device with a readable description and a hardware id."""

    port: str
    description: str
    hardware_id: str


def _basename(path):
    pos = path.rfind("/")
    if pos == -1:
        return path
    return path[pos + 1:]


def _dirname(path):
    pos = path.rfind("/")
    if pos == -1:
        return path
    if pos == 0:
        return "/"
    return path[:pos]


def _realpath(path):
    if not os.path.exists(path):
        return ""
    return os.path.realpath(path)


def read_first_line(path):
    """First line of a file without its newline, or "" if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return handle.readline().rstrip("\n")
    except OSError:
        return ""


def usb_friendly_name(usb_path):
    """Manufacturer, product and serial of a USB device, or "" if none is known."""
    manufacturer = read_first_line(f"{usb_path}/manufacturer")
    product = read_first_line(f"{usb_path}/product")
    serial = read_first_line(f"{usb_path}/serial")
    if not (manufacturer or product or serial):
        return ""
    return f"{manufacturer} {product} {serial}"


def usb_hardware_id(usb_path):
    """Vendor id, product id and serial number of a USB device."""
    serial = read_first_line(f"{usb_path}/serial")
    if serial:
        serial = f"SNR={serial}"
    vid = read_first_line(f"{usb_path}/idVendor")
    pid = read_first_line(f"{usb_path}/idProduct")
    return f"USB VID:PID={vid}:{pid} {serial}"


def sysfs_info(device_path, sysfs_root="/sys"):
    """Return ``(description, hardware_id)`` for a tty device from sysfs."""
    device_name = _basename(device_path)
    friendly_name = ""
    hardware_id = ""
    sys_device_path = f"{sysfs_root}/class/tty/{device_name}/device"

    if device_name.startswith("ttyUSB"):
        usb_path = _dirname(_dirname(_realpath(sys_device_path)))
        if os.path.exists(usb_path):
            friendly_name = usb_friendly_name(usb_path)
            hardware_id = usb_hardware_id(usb_path)
    elif device_name.startswith("ttyACM"):
        usb_path = _dirname(_realpath(sys_device_path))
        if os.path.exists(usb_path):
            friendly_name = usb_friendly_name(usb_path)
            hardware_id = usb_hardware_id(usb_path)
    else:
        id_path = f"{sys_device_path}/id"
        if os.path.exists(id_path):
            hardware_id = read_first_line(id_path)

    return friendly_name or device_name, hardware_id or "n/a"


def list_ports(dev_root="/dev", sysfs_root="/sys"):
    """Every serial device found under ``dev_root``, grouped by device kind."""
    results = []
    for pattern in _SEARCH_PATTERNS:
        for device in sorted(glob.glob(os.path.join(dev_root, pattern))):
            description, hardware_id = sysfs_info(device, sysfs_root)
            results.append(PortInfo(device, description, hardware_id))
    return results