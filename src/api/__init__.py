"""
API module for scrapes and collection monitoring
"""

from .main_api import ExporterAPI
from .system_routes import create_system_routes

__all__ = ['ExporterAPI', 'create_system_routes']
