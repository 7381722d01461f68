import pytest

from serialline.list_ports import PortInfo
from serialline.port_descriptions import (
    describe_usb_port,
    is_parallel_port,
    registry_string,
    rtrim,
    usb_description,
    usb_hardware_id,
    windows_port_entries,
)


def test_rtrim_strips_only_trailing_whitespace():
    assert rtrim("abc \t\f\v\n\r") == "abc"
    assert rtrim(" a b ") == " a b"


def test_rtrim_of_blank_text_is_empty():
    assert rtrim(" \t\r\n") == ""
    assert rtrim("") == ""


def test_usb_description_joins_trimmed_names():
    assert usb_description("Acme ", "Widget\n") == "Acme Widget"


def test_usb_description_blank_is_unknown():
    assert usb_description("", "") == "n/a"
    assert usb_description(None, "  ") == "n/a"


def test_usb_description_keeps_leading_space_without_vendor():
    assert usb_description("", "Widget") == " Widget"


def test_usb_hardware_id_format():
    assert usb_hardware_id(0x0403, 0x6001, "TEST0001") == "USB VID:PID=0403:6001 SNR=TEST0001"


def test_usb_hardware_id_without_serial():
    assert usb_hardware_id(0x0403, 0x6001, "").endswith("SNR=None")
    assert usb_hardware_id(0x0403, 0x6001, None).endswith("SNR=None")


@pytest.mark.parametrize("vid, pid", [(0, 0x6001), (0x0403, 0), (None, None)])
def test_usb_hardware_id_unknown_ids(vid, pid):
    assert usb_hardware_id(vid, pid, "TEST0001") == "n/a"


def test_usb_hardware_id_length_limit():
    fits = usb_hardware_id(0x0403, 0x6001, "X" * 101)
    assert len(fits) == 127
    assert usb_hardware_id(0x0403, 0x6001, "X" * 102) == "n/a"


def test_describe_usb_port_builds_port_info():
    info = describe_usb_port("/dev/cu.usbserial", "Acme", "Widget", "TEST0001", 0x0403, 0x6001)
    assert info == PortInfo(
        "/dev/cu.usbserial", "Acme Widget", "USB VID:PID=0403:6001 SNR=TEST0001"
    )


def test_describe_usb_port_without_parent_device():
    info = describe_usb_port("/dev/cu.Bluetooth")
    assert info.description == "n/a"
    assert info.hardware_id == "n/a"


def test_describe_usb_port_rejects_empty_path():
    with pytest.raises(ValueError):
        describe_usb_port("")


def test_registry_string_cuts_at_nul():
    assert registry_string("COM3\0") == "COM3"
    assert registry_string("COM3\0garbage") == "COM3"


def test_registry_string_decodes_utf16_bytes():
    assert registry_string("COM7\0".encode("utf-16-le")) == "COM7"


def test_registry_string_empty_values():
    assert registry_string(None) == ""
    assert registry_string(b"") == ""


def test_is_parallel_port():
    assert is_parallel_port("LPT1") is True
    assert is_parallel_port("COM1") is False


def test_windows_port_entries_filters_and_keeps_order():
    entries = [
        ("COM1\0", "Communications Port (COM1)\0", "ACPI\\PNP0501\0"),
        ("LPT1\0", "Printer Port (LPT1)\0", "ACPI\\PNP0400\0"),
        (None, "Broken\0", "x\0"),
        ("COM4\0", None, None),
    ]
    ports = windows_port_entries(entries)
    assert [p.port for p in ports] == ["COM1", "COM4"]
    assert ports[0].description == "Communications Port (COM1)"
    assert ports[0].hardware_id == "ACPI\\PNP0501"
    assert ports[1].description == ""
    assert ports[1].hardware_id == ""


def test_windows_port_entries_empty():
    assert windows_port_entries([]) == []