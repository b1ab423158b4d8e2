"""
Interface counters from a device's /status/ifconfig report

The report wraps plain ifconfig output in a <Command> element, one
interface per blank-line separated block:

    lo        Link encap:Local Loopback
              inet addr:127.0.0.1  Mask:255.0.0.0
              UP LOOPBACK RUNNING  MTU:16436  Metric:1
              RX packets:1558 errors:0 dropped:0 overruns:0 frame:0
              TX packets:1558 errors:0 dropped:0 overruns:0 carrier:0
              collisions:0 txqueuelen:0
              RX bytes:263284 (257.1 KiB)  TX bytes:263284 (257.1 KiB)
"""

import logging
import re
from typing import Dict, Optional, Pattern
import xml.etree.ElementTree as ET
import aiohttp
from yarl import URL

from .models import InterfaceStats, InterfaceStatsSet
from .descriptor import http_get_document
from .xml_helper import parse_document, local_name, find_descendant

from discovery.targets import parse_target
from errors import DecodeError

logger = logging.getLogger(__name__)

IFCONFIG_PATH = "/status/ifconfig"

BLOCK_SEPARATOR_RE = re.compile(r'\n[ \t]*\n')
IFACE_NAME_RE = re.compile(r'^\S+')

def _counter_pattern(direction: str, keyword: str) -> Pattern:
    # Keyword must follow its own direction tag on the same line with no
    # opposite tag in between, so "RX bytes:1  TX bytes:2" splits correctly
    opposite = 'TX' if direction == 'RX' else 'RX'
    return re.compile(rf'{direction}(?:(?!{opposite})[^\n])*?{keyword}:(\d+)', re.ASCII)

COUNTER_PATTERNS: Dict[str, Pattern] = {
    'rx_bytes': _counter_pattern('RX', 'bytes'),
    'rx_packets': _counter_pattern('RX', 'packets'),
    'rx_packet_errors': _counter_pattern('RX', 'errors'),
    'rx_packet_drops': _counter_pattern('RX', 'dropped'),
    'rx_packet_overruns': _counter_pattern('RX', 'overruns'),
    'rx_packet_frames': _counter_pattern('RX', 'frame'),
    'tx_bytes': _counter_pattern('TX', 'bytes'),
    'tx_packets': _counter_pattern('TX', 'packets'),
    'tx_packet_errors': _counter_pattern('TX', 'errors'),
    'tx_packet_drops': _counter_pattern('TX', 'dropped'),
    'tx_packet_overruns': _counter_pattern('TX', 'overruns'),
    'tx_packet_carriers': _counter_pattern('TX', 'carrier'),
}

def _extract_counter(pattern: Pattern, text: str) -> int:
    match = pattern.search(text)
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0

def parse_ifconfig(text: str) -> InterfaceStatsSet:
    """
    Extract per-interface counters from ifconfig output
    Never raises; unmatched counters are 0 and unnamed blocks are dropped
    """
    stats: InterfaceStatsSet = {}
    if not text:
        return stats

    text = text.replace('\r\n', '\n')
    for block in BLOCK_SEPARATOR_RE.split(text):
        block = block.lstrip('\n')
        if not block.strip():
            continue

        name_match = IFACE_NAME_RE.match(block)
        if not name_match:
            continue

        stats[name_match.group(0)] = InterfaceStats(**{
            field_name: _extract_counter(pattern, block)
            for field_name, pattern in COUNTER_PATTERNS.items()
        })

    return stats

def find_command(root: ET.Element) -> Optional[ET.Element]:
    """The <Command> element, whether it is the root or nested"""
    if local_name(root.tag) == 'Command':
        return root
    return find_descendant(root, 'Command')

def extract_command_text(document: bytes, url: str = "") -> str:
    """Return the text of the <Command> element, root or nested"""
    command = find_command(parse_document(url, document))
    if command is None:
        raise DecodeError(url, "no <Command> element in report")
    return command.text or ""

def ifconfig_url(target: str) -> str:
    """Status report URL on the same host as the description locator"""
    base: URL = parse_target(target)
    return str(base.with_path(IFCONFIG_PATH).with_query(base.query))

class InterfaceStatsFetcher:
    """Retrieves and parses the ifconfig status report of a device"""

    async def fetch(self, session: aiohttp.ClientSession, target: str) -> InterfaceStatsSet:
        url = ifconfig_url(target)
        document = await http_get_document(session, url)
        try:
            root = parse_document(url, document)
        except DecodeError as e:
            logger.warning(f"Decode {url}: {e.reason}")
            raise

        command = find_command(root)
        if command is None:
            logger.debug(f"No <Command> element in {url}")
            return {}
        return parse_ifconfig(command.text or "")
