"""
Exporter Server - wires the collection orchestrator to the HTTP API
"""

import logging
from typing import Dict, Optional
import uvicorn

from prometheus_client import CollectorRegistry

# Local imports
from config_loader import parse_address
from collector.orchestrator import CollectionOrchestrator
from api.main_api import ExporterAPI

logger = logging.getLogger(__name__)

class ExporterServer:
    """Main server owning the orchestrator, its metric registry and the API"""

    def __init__(self, config: Dict):
        self.config = config

        self.orchestrator = CollectionOrchestrator(self.config)
        # Dedicated registry: only exporter metrics, no process/platform collectors
        self.registry = CollectorRegistry()
        self.orchestrator.register(self.registry)

        self.api = ExporterAPI(self.orchestrator, self.registry, self.config)
        self.server: Optional[uvicorn.Server] = None

    async def start(self):
        """Serve the API until stopped"""
        host, port = parse_address(self.config['exporter']['address'])

        if self.orchestrator.targets:
            logger.info(f"Static targets configured ({len(self.orchestrator.targets)}), SSDP discovery disabled")
        elif self.orchestrator.discovery_enabled:
            logger.info(f"SSDP discovery enabled for {self.orchestrator.service_type}")
        else:
            logger.warning("No static targets and discovery disabled - scrapes will report no devices")

        config = uvicorn.Config(
            self.api.app,
            host=host,
            port=port,
            log_level="info",
            access_log=False  # We handle our own logging
        )
        self.server = uvicorn.Server(config)

        logger.info(f"Sonos exporter listening on {host}:{port}")
        await self.server.serve()

    async def stop(self):
        """Ask uvicorn to exit"""
        if self.server:
            self.server.should_exit = True
        logger.info("Server stopped")
