"""
Discovery data structures and models
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field

@dataclass
class SearchResponse:
    """Parsed SSDP response datagram"""
    status_line: str
    headers: Dict[str, List[str]]  # lower-case header name -> values in order

    def get(self, name: str) -> Optional[str]:
        values = self.headers.get(name.lower())
        return values[0] if values else None

    def get_all(self, name: str) -> List[str]:
        return self.headers.get(name.lower(), [])

@dataclass
class DiscoveryResult:
    """Results from one SSDP search window"""
    service_type: str
    targets: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    datagrams_seen: int = 0
    responses_accepted: int = 0
