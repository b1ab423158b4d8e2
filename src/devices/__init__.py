"""
Device module for Sonos identity and interface counter collection
"""

from .models import DeviceDescriptor, InterfaceStats, InterfaceStatsSet, COUNTER_FIELDS
from .descriptor import DescriptorFetcher, parse_device_description
from .ifconfig import InterfaceStatsFetcher, parse_ifconfig, extract_command_text, ifconfig_url

__all__ = ['DeviceDescriptor', 'InterfaceStats', 'InterfaceStatsSet', 'COUNTER_FIELDS',
           'DescriptorFetcher', 'parse_device_description',
           'InterfaceStatsFetcher', 'parse_ifconfig', 'extract_command_text', 'ifconfig_url']
