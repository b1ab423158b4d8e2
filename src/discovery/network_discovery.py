"""
SSDP multicast discovery for Sonos devices
"""

import socket
import asyncio
import time
import logging
from typing import List, Optional
from .models import SearchResponse, DiscoveryResult

from errors import DiscoveryError

logger = logging.getLogger(__name__)

SSDP_MULTICAST_GROUP = '239.255.255.250'
SSDP_PORT = 1900
ZONE_PLAYER_URN = 'urn:schemas-upnp-org:device:ZonePlayer:1'

def build_search_request(service_type: str, host: str = SSDP_MULTICAST_GROUP,
                         port: int = SSDP_PORT, mx: int = 1) -> bytes:
    """Build an M-SEARCH request for one service type"""
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {host}:{port}",
        'MAN: "ssdp:discover"',
        f"ST: {service_type}",
        f"MX: {mx}",
    ]
    return ("\r\n".join(lines) + "\r\n\r\n").encode('utf-8')

def parse_search_response(data: bytes) -> Optional[SearchResponse]:
    """
    Parse an HTTP-framed SSDP response datagram
    Returns None for anything that is not a well-formed HTTP response head
    """
    # header octets, not necessarily UTF-8
    text = data.decode('latin-1')
    head = text.split('\r\n\r\n', 1)[0]
    lines = head.replace('\r\n', '\n').split('\n')

    status_line = lines[0].strip()
    parts = status_line.split(None, 2)
    if len(parts) < 2 or not parts[0].startswith('HTTP/') or not parts[1].isdigit():
        return None

    headers = {}
    for line in lines[1:]:
        if not line.strip():
            break
        name, sep, value = line.partition(':')
        if not sep or not name.strip():
            return None
        headers.setdefault(name.strip().lower(), []).append(value.strip())

    return SearchResponse(status_line=status_line, headers=headers)

class SSDPDiscovery:
    """Finds device description locators with an SSDP M-SEARCH"""

    def __init__(self, config: dict):
        self.config = config
        self.multicast_group = config.get('multicast_group', SSDP_MULTICAST_GROUP)
        self.multicast_port = config.get('multicast_port', SSDP_PORT)
        self.mx = config.get('mx', 1)
        self.window_seconds = config.get('window_seconds', 2)
        self.last_result: Optional[DiscoveryResult] = None

    async def async_search(self, service_type: str) -> List[str]:
        """Run search() off the event loop"""
        return await asyncio.to_thread(self.search, service_type)

    def search(self, service_type: str) -> List[str]:
        """
        Send one M-SEARCH and collect Location headers for the search window
        Zero responses is a normal outcome; only socket setup and send failures raise
        """
        start_time = time.monotonic()
        result = DiscoveryResult(service_type=service_type)

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise DiscoveryError(f"Cannot open SSDP socket: {e}") from e

        try:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
                sock.bind(('', 0))

                request = build_search_request(service_type, self.multicast_group,
                                               self.multicast_port, self.mx)
                logger.debug(f"Sending SSDP search for {service_type} to {self.multicast_group}:{self.multicast_port}")
                sock.sendto(request, (self.multicast_group, self.multicast_port))
            except OSError as e:
                raise DiscoveryError(f"Cannot send SSDP search: {e}") from e

            deadline = start_time + self.window_seconds
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                sock.settimeout(remaining)

                try:
                    data, addr = sock.recvfrom(65536)
                except socket.timeout:
                    break
                except OSError as e:
                    logger.warning(f"SSDP read failed, ending search early: {e}")
                    break

                result.datagrams_seen += 1
                response = parse_search_response(data)
                if response is None:
                    logger.debug(f"Skipping malformed SSDP response from {addr[0]}")
                    continue

                if service_type not in response.get_all('st'):
                    continue

                location = response.get('location')
                if not location:
                    logger.debug(f"Skipping SSDP response without Location from {addr[0]}")
                    continue

                result.targets.append(location)
                result.responses_accepted += 1
                logger.debug(f"SSDP response from {addr[0]}: {location}")
        finally:
            sock.close()

        result.duration_seconds = time.monotonic() - start_time
        self.last_result = result
        logger.info(f"SSDP search found {len(result.targets)} devices "
                    f"({result.datagrams_seen} datagrams in {result.duration_seconds:.1f}s)")
        return list(result.targets)
