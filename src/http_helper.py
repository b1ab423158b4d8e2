# HTTP Helper for Sonos device connections
# Session configuration for plain-HTTP local device endpoints

import aiohttp
import logging
from typing import Optional

logger = logging.getLogger(__name__)

def create_device_session(timeout_seconds: Optional[float] = None) -> aiohttp.ClientSession:
    """
    Create aiohttp session for local device connections (always HTTP)
    One session is shared by every target of a collection cycle
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,           # Max 2 connections per device
        ssl=False,                  # Devices serve plain HTTP
        force_close=True            # No keep-alive between cycles
    )

    session_kwargs = {'connector': connector}
    if timeout_seconds:
        session_kwargs['timeout'] = aiohttp.ClientTimeout(total=timeout_seconds)
    else:
        logger.debug("No request timeout configured, using aiohttp default")

    return aiohttp.ClientSession(**session_kwargs)
