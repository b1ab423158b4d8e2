"""
Error types raised by discovery and device collection
"""


class ExporterError(Exception):
    """Base class for collection failures"""


class DiscoveryError(ExporterError):
    """SSDP search could not be performed (socket open or send failed)"""


class TargetParseError(ExporterError):
    """A device locator is not a usable http(s) URL"""

    def __init__(self, target: str, reason: str):
        super().__init__(f"invalid target {target!r}: {reason}")
        self.target = target
        self.reason = reason


class FetchError(ExporterError):
    """Transport or HTTP failure while fetching a device document"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class DecodeError(FetchError):
    """A device document could not be decoded"""
