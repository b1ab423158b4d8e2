"""
Configuration loader for the Sonos exporter
Loads and validates configuration from YAML files, command-line values override file values
"""

import copy
import yaml
import logging
from typing import Dict, Any, List, Optional, Tuple
from pathlib import Path
from datetime import datetime
import pytz

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "localhost:1915"
DEFAULT_SERVICE_TYPE = "urn:schemas-upnp-org:device:ZonePlayer:1"

def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation
    Without a path the built-in defaults are used
    """
    if not config_path:
        config = _apply_defaults({})
        _validate_config(config)
        return config

    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError("Configuration root must be a mapping")

        # Apply defaults
        config = _apply_defaults(config)

        # Validate sections
        _validate_config(config)

        logger.info(f"Configuration loaded from {config_path}")
        return config

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

def apply_overrides(config: Dict, address: Optional[str] = None, targets: Optional[str] = None) -> Dict:
    """Apply command-line address and comma separated targets on top of a loaded config"""
    if address:
        config['exporter']['address'] = address
    if targets:
        config['exporter']['targets'] = parse_targets(targets)
    _validate_config(config)
    return config

def parse_targets(value: str) -> List[str]:
    """Split 'host:port,host:port' into a list, ignoring empty entries"""
    return [t.strip() for t in value.split(',') if t.strip()]

def parse_address(address: str) -> Tuple[str, int]:
    """Split a listen address 'host:port'; an empty host listens on all interfaces"""
    host, sep, port = address.rpartition(':')
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address (expected host:port): {address}")
    port_number = int(port)
    if not 0 < port_number < 65536:
        raise ValueError(f"Listen port out of range: {address}")
    host = host.strip('[]') or '0.0.0.0'
    return host, port_number

def _validate_config(config: Dict) -> None:
    """Validate exporter, discovery and logging sections"""
    exporter = config['exporter']
    parse_address(exporter['address'])

    targets = exporter['targets']
    if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
        raise ValueError("exporter.targets must be a list of host:port strings")

    discovery = config['discovery']
    if not discovery['service_type']:
        raise ValueError("discovery.service_type must not be empty")
    if discovery['window_seconds'] <= 0:
        raise ValueError("discovery.window_seconds must be positive")

    timeout = config['http']['request_timeout']
    if timeout is not None and timeout <= 0:
        raise ValueError("http.request_timeout must be positive or null")

    level = str(config['logging']['level']).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown logging level: {config['logging']['level']}")

    tz_name = config['logging']['timezone']
    if tz_name not in pytz.all_timezones_set:
        raise ValueError(f"Unknown logging timezone: {tz_name}")

def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""
    defaults = get_sample_config()

    for section, section_defaults in defaults.items():
        if config.get(section) is None:
            config[section] = {}
        for key, default_value in section_defaults.items():
            if key not in config[section]:
                config[section][key] = copy.deepcopy(default_value)

    return config

def get_default_config() -> Dict:
    """Fully defaulted configuration (discovery enabled, no static targets)"""
    return _apply_defaults({})


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders timestamps in a configured timezone"""

    def __init__(self, fmt=None, tz_name: str = 'UTC'):
        super().__init__(fmt)
        self.tz = pytz.timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            # Default format: YYYY-MM-DD HH:MM:SS TZ
            return dt.strftime('%Y-%m-%d %H:%M:%S %Z')

def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, log_config.get('timezone', 'UTC'))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Console handler
    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler
    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={level}, console={log_config.get('console_output', True)}, file={log_file}")

def get_sample_config() -> Dict:
    """Return a sample configuration for reference"""
    return {
        "exporter": {
            "address": DEFAULT_ADDRESS,
            "targets": []                   # host:port list; replaces SSDP discovery
        },
        "discovery": {
            "enabled": True,
            "service_type": DEFAULT_SERVICE_TYPE,
            "multicast_group": "239.255.255.250",
            "multicast_port": 1900,
            "mx": 1,
            "window_seconds": 2
        },
        "http": {
            "request_timeout": None         # None keeps the aiohttp default
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "console_output": True,
            "timezone": "UTC"
        }
    }
