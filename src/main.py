"""
Sonos Exporter - Main Entry Point
"""

import argparse
import asyncio
import sys
import logging
import os
from typing import List, Optional

from config_loader import load_config, apply_overrides, setup_logging
from services.exporter_server import ExporterServer

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sonos_exporter",
        description="Prometheus exporter for Sonos speakers"
    )
    parser.add_argument(
        "--address",
        default=None,
        help="Listen address (host:port). Default: localhost:1915"
    )
    parser.add_argument(
        "--targets",
        default=None,
        help="Sonos target addresses (host:port, comma separated). Disables SSDP discovery"
    )
    parser.add_argument(
        "--config",
        default=os.environ.get('CONFIG_FILE'),
        help="YAML configuration file. Default: $CONFIG_FILE"
    )
    return parser

async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    server = None
    try:
        config = load_config(args.config)
        config = apply_overrides(config, address=args.address, targets=args.targets)
        setup_logging(config)

        server = ExporterServer(config)
        await server.start()

    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error(f"Server failed: {e}")
        return 1
    finally:
        if server:
            await server.stop()

    return 0

def run():
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nExporter stopped by user")
        sys.exit(0)

if __name__ == "__main__":
    run()
