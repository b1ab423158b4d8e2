"""
Device description fetch and decode
"""

import asyncio
import logging
import aiohttp

from .models import DeviceDescriptor
from .xml_helper import parse_document, find_child, child_text

from errors import DecodeError, FetchError

logger = logging.getLogger(__name__)

def parse_device_description(document: bytes, url: str = "") -> DeviceDescriptor:
    """
    Decode the <device> element of a UPnP device description
    Missing identity fields decode to empty strings
    """
    root = parse_document(url, document)
    device = find_child(root, 'device')
    if device is None:
        raise DecodeError(url, "no <device> element in description")

    return DeviceDescriptor(
        room_name=child_text(device, 'roomName'),
        display_version=child_text(device, 'displayVersion'),
        hardware_version=child_text(device, 'hardwareVersion'),
        model_name=child_text(device, 'modelName'),
        model_number=child_text(device, 'modelNumber'),
        serial_num=child_text(device, 'serialNum'),
        software_version=child_text(device, 'softwareVersion'),
        udn=child_text(device, 'UDN'),
        device_type=child_text(device, 'deviceType'),
    )

async def http_get_document(session: aiohttp.ClientSession, url: str) -> bytes:
    """GET a device document, raising FetchError on transport or HTTP failure"""
    try:
        async with session.get(url) as response:
            if response.status != 200:
                raise FetchError(url, f"HTTP {response.status}")
            return await response.read()
    except aiohttp.ClientError as e:
        raise FetchError(url, str(e) or type(e).__name__) from e
    except asyncio.TimeoutError as e:
        raise FetchError(url, "request timed out") from e

class DescriptorFetcher:
    """Retrieves DeviceDescriptor records from device description URLs"""

    async def fetch(self, session: aiohttp.ClientSession, target: str) -> DeviceDescriptor:
        document = await http_get_document(session, target)
        try:
            return parse_device_description(document, target)
        except DecodeError as e:
            logger.error(f"Decode {target}: {e.reason}")
            raise
