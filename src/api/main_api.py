"""
Main FastAPI application setup
Serves the Prometheus scrape endpoint plus JSON collection status
"""

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from typing import Dict
import logging

from prometheus_client import CollectorRegistry, CONTENT_TYPE_LATEST, generate_latest

from .system_routes import create_system_routes

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>Sonos Exporter</title></head>
<body>
<h1>Sonos Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
<p><a href="/api/collection/status">Last collection</a></p>
</body>
</html>
"""

class ExporterAPI:
    """HTTP surface for scrapes and collection monitoring"""

    def __init__(self, orchestrator, registry: CollectorRegistry, config: Dict):
        self.orchestrator = orchestrator
        self.registry = registry
        self.config = config
        self.app = FastAPI(
            title="Sonos Exporter",
            description="Prometheus exporter for Sonos speaker identity and network interface counters",
            version="1.0.0"
        )
        self._setup_routes()

    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        system_router = create_system_routes(self.orchestrator, self.config)
        self.app.include_router(system_router)

        self._setup_metrics_routes()

    def _setup_metrics_routes(self):
        """Setup scrape and landing routes"""

        @self.app.get("/metrics")
        def metrics():
            """Run one collection cycle and return the Prometheus exposition"""
            # Plain def: FastAPI runs it in a worker thread, where the
            # collector can start its own event loop for the cycle
            data = generate_latest(self.registry)
            return Response(content=data, media_type=CONTENT_TYPE_LATEST)

        @self.app.get("/", response_class=HTMLResponse)
        async def index():
            return LANDING_PAGE
