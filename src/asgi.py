"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line:

    CONFIG_FILE=config/config.yaml uvicorn asgi:app --port 1915
"""

import logging
import os

from config_loader import load_config, setup_logging
from services.exporter_server import ExporterServer

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE'))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing exporter components...")

server = ExporterServer(config)

# Expose the FastAPI app for uvicorn
app = server.api.app

logger.info("ASGI app ready for uvicorn")
