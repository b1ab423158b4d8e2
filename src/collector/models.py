"""
Collection cycle data structures
"""

from datetime import datetime
from typing import List, Optional, Tuple
from dataclasses import dataclass, field

from devices.models import DeviceDescriptor, InterfaceStatsSet

@dataclass
class TargetOutcome:
    """What one per-target task produced"""
    target: str
    descriptor: Optional[DeviceDescriptor] = None
    interfaces: Optional[InterfaceStatsSet] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

@dataclass
class CollectionResult:
    """Summary of one collection cycle"""
    started_at: datetime
    target_mode: str  # "static", "ssdp", "disabled"
    targets: int = 0
    failures: int = 0
    duration_seconds: float = 0.0
    devices: List[Tuple[DeviceDescriptor, InterfaceStatsSet]] = field(default_factory=list)
    discovery_failed: bool = False
