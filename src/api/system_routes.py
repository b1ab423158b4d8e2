"""
System health and collection status API routes
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime, timezone
import logging

from devices.models import COUNTER_FIELDS

logger = logging.getLogger(__name__)

# Response models
class CollectionStatusResponse(BaseModel):
    target_mode: str
    errors_total: float
    last_cycle_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    targets: Optional[int] = None
    devices: Optional[int] = None
    failures: Optional[int] = None
    discovery_failed: bool = False

class DeviceResponse(BaseModel):
    room_name: str
    model_name: str
    model_number: str
    serial_num: str
    software_version: str
    udn: str
    interfaces: Dict[str, Dict[str, int]]

def create_system_routes(orchestrator, config):
    """Create health and collection status routes"""
    router = APIRouter(prefix="/api", tags=["system"])

    @router.get("/system/health")
    async def system_health():
        """Exporter health check"""
        return {
            "status": "healthy",
            "target_mode": orchestrator.target_mode,
            "static_targets": len(orchestrator.targets),
            "listen_address": config['exporter']['address'],
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @router.get("/collection/status", response_model=CollectionStatusResponse)
    async def collection_status():
        """Summary of the most recent collection cycle"""
        result = orchestrator.last_result
        if result is None:
            return CollectionStatusResponse(
                target_mode=orchestrator.target_mode,
                errors_total=orchestrator.errors_total
            )

        return CollectionStatusResponse(
            target_mode=result.target_mode,
            errors_total=orchestrator.errors_total,
            last_cycle_at=result.started_at,
            duration_seconds=result.duration_seconds,
            targets=result.targets,
            devices=len(result.devices),
            failures=result.failures,
            discovery_failed=result.discovery_failed
        )

    @router.get("/collection/devices", response_model=List[DeviceResponse])
    async def collection_devices():
        """Devices and interface counters seen in the most recent cycle"""
        result = orchestrator.last_result
        if result is None:
            raise HTTPException(status_code=404, detail="No collection cycle has run yet")

        return [
            DeviceResponse(
                room_name=device.room_name,
                model_name=device.model_name,
                model_number=device.model_number,
                serial_num=device.serial_num,
                software_version=device.software_version,
                udn=device.udn,
                interfaces={
                    name: {field_name: getattr(stats, field_name) for field_name in COUNTER_FIELDS}
                    for name, stats in interfaces.items()
                }
            )
            for device, interfaces in result.devices
        ]

    return router
