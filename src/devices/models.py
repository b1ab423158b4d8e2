"""
Device identity and interface counter models
"""

from typing import Dict
from dataclasses import dataclass, fields

@dataclass(frozen=True)
class DeviceDescriptor:
    """Identity fields from a device description document"""
    room_name: str = ""
    display_version: str = ""
    hardware_version: str = ""
    model_name: str = ""
    model_number: str = ""
    serial_num: str = ""  # stable across cycles
    software_version: str = ""
    udn: str = ""
    device_type: str = ""

@dataclass
class InterfaceStats:
    """Cumulative counters for one network interface, 0 when not reported"""
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_packet_errors: int = 0
    rx_packet_drops: int = 0
    rx_packet_overruns: int = 0
    rx_packet_frames: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_packet_errors: int = 0
    tx_packet_drops: int = 0
    tx_packet_overruns: int = 0
    tx_packet_carriers: int = 0

COUNTER_FIELDS = tuple(f.name for f in fields(InterfaceStats))

# interface name -> counters
InterfaceStatsSet = Dict[str, InterfaceStats]
