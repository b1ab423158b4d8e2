"""
Device locators: static target expansion and validation
"""

from typing import Iterable, List
from yarl import URL

from errors import TargetParseError


DESCRIPTION_PATH = "/xml/device_description.xml"

def build_static_targets(host_ports: Iterable[str]) -> List[str]:
    """Turn host:port pairs into device description locators"""
    targets = []
    for host_port in host_ports:
        host_port = host_port.strip()
        if not host_port:
            continue
        targets.append(f"http://{host_port}{DESCRIPTION_PATH}")
    return targets

def parse_target(locator: str) -> URL:
    """
    Validate a locator and return it as a URL
    Raises TargetParseError for anything that is not an absolute http(s) URL
    """
    try:
        url = URL(locator)
        # Port is parsed lazily; force it so bad ports fail here
        url.port
    except (TypeError, ValueError) as e:
        raise TargetParseError(str(locator), str(e)) from e

    if url.scheme not in ('http', 'https'):
        raise TargetParseError(locator, f"unsupported scheme {url.scheme!r}")
    if not url.host:
        raise TargetParseError(locator, "missing host")

    return url
