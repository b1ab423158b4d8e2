"""
Discovery module for Sonos device location
"""

from .models import SearchResponse, DiscoveryResult
from .network_discovery import SSDPDiscovery, ZONE_PLAYER_URN, build_search_request, parse_search_response
from .targets import build_static_targets, parse_target

__all__ = ['SSDPDiscovery', 'SearchResponse', 'DiscoveryResult', 'ZONE_PLAYER_URN',
           'build_search_request', 'parse_search_response', 'build_static_targets', 'parse_target']
