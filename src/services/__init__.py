"""
Services module for the exporter server lifecycle
"""

from .exporter_server import ExporterServer

__all__ = ['ExporterServer']
