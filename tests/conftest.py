"""Shared pytest fixtures for the Sonos exporter test suite."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Dict, TypeVar

import pytest

from config_loader import get_default_config

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine synchronously for testing."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


BR0_BLOCK = (
    "br0       Link encap:Ethernet  HWaddr 78:28:CA:0F:8B:0A\n"
    "          inet addr:192.168.78.35  Bcast:192.168.78.255  Mask:255.255.255.0\n"
    "          UP BROADCAST RUNNING MULTICAST  MTU:1500  Metric:1\n"
    "          RX packets:591245 errors:0 dropped:9258 overruns:0 frame:0\n"
    "          TX packets:30434 errors:0 dropped:0 overruns:0 carrier:0\n"
    "          collisions:0 txqueuelen:0\n"
    "          RX bytes:555177988 (529.4 MiB)  TX bytes:19272833 (18.3 MiB)"
)

LO_BLOCK = (
    "lo        Link encap:Local Loopback\n"
    "          inet addr:127.0.0.1  Mask:255.0.0.0\n"
    "          UP LOOPBACK RUNNING  MTU:16436  Metric:1\n"
    "          RX packets:1558 errors:0 dropped:0 overruns:0 frame:0\n"
    "          TX packets:1558 errors:0 dropped:0 overruns:0 carrier:0\n"
    "          collisions:0 txqueuelen:0\n"
    "          RX bytes:263284 (257.1 KiB)  TX bytes:263284 (257.1 KiB)"
)


def device_description_xml(
    *,
    room_name: str = "Living Room",
    serial_num: str = "00-0E-58-28-3B-6C:8",
    model_name: str = "Sonos One",
    model_number: str = "S13",
    udn: str = "uuid:RINCON_000E58283B6C01400",
) -> bytes:
    """A namespaced UPnP description shaped like a ZonePlayer's."""
    return f"""<?xml version="1.0" encoding="utf-8" ?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <device>
    <deviceType>urn:schemas-upnp-org:device:ZonePlayer:1</deviceType>
    <friendlyName>192.168.1.20 - Sonos One</friendlyName>
    <roomName>{room_name}</roomName>
    <displayVersion>15.9</displayVersion>
    <hardwareVersion>1.20.1.6-2</hardwareVersion>
    <modelName>{model_name}</modelName>
    <modelNumber>{model_number}</modelNumber>
    <serialNum>{serial_num}</serialNum>
    <softwareVersion>74.2-43280</softwareVersion>
    <UDN>{udn}</UDN>
    <deviceList>
      <device><deviceType>urn:schemas-upnp-org:device:MediaServer:1</deviceType></device>
    </deviceList>
  </device>
</root>
""".encode("utf-8")


def ifconfig_xml(text: str) -> bytes:
    """Wrap ifconfig output the way /status/ifconfig does."""
    escaped = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return (
        '<?xml version="1.0" ?>\n'
        f"<Command cmdline='/sbin/ifconfig'>{escaped}</Command>\n"
    ).encode("utf-8")


@pytest.fixture
def make_config():
    """Factory for a defaulted config with selective overrides."""

    def _make(targets=None, discovery_enabled: bool = True) -> Dict:
        config = get_default_config()
        config["exporter"]["targets"] = list(targets or [])
        config["discovery"]["enabled"] = discovery_enabled
        config["http"]["request_timeout"] = 5
        return config

    return _make
