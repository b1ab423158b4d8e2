"""Tests for SSDP search request/response handling and static targets."""

from __future__ import annotations

import socket
import threading
from typing import List

import pytest

from discovery import network_discovery
from discovery.network_discovery import (
    ZONE_PLAYER_URN,
    SSDPDiscovery,
    build_search_request,
    parse_search_response,
)
from discovery.targets import build_static_targets, parse_target
from errors import DiscoveryError, TargetParseError


def ssdp_response(st: str, location: str = "http://192.168.1.20:1400/xml/device_description.xml") -> bytes:
    lines = [
        "HTTP/1.1 200 OK",
        "CACHE-CONTROL: max-age = 1800",
        "EXT:",
        f"LOCATION: {location}",
        "SERVER: Linux UPnP/1.0 Sonos/74.2-43280 (ZPS13)",
        f"ST: {st}",
        "USN: uuid:RINCON_000E58283B6C01400::urn:schemas-upnp-org:device:ZonePlayer:1",
    ]
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


class LoopbackResponder:
    """Answers the first datagram it receives with canned SSDP replies."""

    def __init__(self, replies: List[bytes]):
        self.replies = replies
        self.requests: List[bytes] = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(5)
        self.port = self.sock.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self):
        try:
            data, addr = self.sock.recvfrom(65536)
        except OSError:
            return
        self.requests.append(data)
        for reply in self.replies:
            self.sock.sendto(reply, addr)

    def __enter__(self):
        self.thread.start()
        return self

    def __exit__(self, *exc):
        self.thread.join(timeout=5)
        self.sock.close()


def loopback_discovery(port: int, window: float = 0.5) -> SSDPDiscovery:
    return SSDPDiscovery({
        "multicast_group": "127.0.0.1",
        "multicast_port": port,
        "window_seconds": window,
    })


# ═══════════════════════════════════════════════════════════════════════════
#  Wire format
# ═══════════════════════════════════════════════════════════════════════════


class TestWireFormat:
    def test_search_request(self):
        request = build_search_request(ZONE_PLAYER_URN).decode("utf-8")
        lines = request.split("\r\n")

        assert lines[0] == "M-SEARCH * HTTP/1.1"
        assert "HOST: 239.255.255.250:1900" in lines
        assert 'MAN: "ssdp:discover"' in lines
        assert f"ST: {ZONE_PLAYER_URN}" in lines
        assert "MX: 1" in lines
        assert request.endswith("\r\n\r\n")

    def test_parse_response_headers(self):
        response = parse_search_response(ssdp_response(ZONE_PLAYER_URN))

        assert response is not None
        assert response.status_line == "HTTP/1.1 200 OK"
        assert response.get("Location") == "http://192.168.1.20:1400/xml/device_description.xml"
        assert response.get_all("st") == [ZONE_PLAYER_URN]
        assert response.get("ext") == ""

    def test_repeated_headers_kept(self):
        data = b"HTTP/1.1 200 OK\r\nST: a\r\nST: b\r\n\r\n"
        assert parse_search_response(data).get_all("ST") == ["a", "b"]

    def test_non_utf8_header_value(self):
        data = ssdp_response(ZONE_PLAYER_URN).replace(b"Sonos/74.2", b"Sonos\xe9/74.2")
        response = parse_search_response(data)

        assert response is not None
        assert response.get("location") == "http://192.168.1.20:1400/xml/device_description.xml"

    @pytest.mark.parametrize("data", [
        b"",
        b"NOTIFY * HTTP/1.1\r\nNT: x\r\n\r\n",
        b"HTTP/1.1 OK\r\n\r\n",
        b"HTTP/1.1 200 OK\r\nno colon here\r\n\r\n",
        b"\xff\xfe\x00garbage",
    ])
    def test_malformed_responses(self, data):
        assert parse_search_response(data) is None


# ═══════════════════════════════════════════════════════════════════════════
#  Search window
# ═══════════════════════════════════════════════════════════════════════════


class TestSearch:
    def test_collects_matching_locations_in_order(self):
        replies = [
            ssdp_response(ZONE_PLAYER_URN, "http://10.0.0.1:1400/xml/device_description.xml"),
            ssdp_response("upnp:rootdevice", "http://10.0.0.9:1400/xml/device_description.xml"),
            b"not an http response",
            ssdp_response(ZONE_PLAYER_URN, "http://10.0.0.2:1400/xml/device_description.xml"),
            ssdp_response(ZONE_PLAYER_URN, "http://10.0.0.1:1400/xml/device_description.xml"),
        ]
        with LoopbackResponder(replies) as responder:
            discovery = loopback_discovery(responder.port)
            targets = discovery.search(ZONE_PLAYER_URN)

        assert targets == [
            "http://10.0.0.1:1400/xml/device_description.xml",
            "http://10.0.0.2:1400/xml/device_description.xml",
            "http://10.0.0.1:1400/xml/device_description.xml",
        ]
        assert f"ST: {ZONE_PLAYER_URN}".encode() in responder.requests[0]
        assert discovery.last_result.datagrams_seen == 5
        assert discovery.last_result.responses_accepted == 3

    def test_no_responses_is_empty(self):
        with LoopbackResponder([]) as responder:
            discovery = loopback_discovery(responder.port, window=0.2)
            assert discovery.search(ZONE_PLAYER_URN) == []

    def test_response_without_location_skipped(self):
        reply = f"HTTP/1.1 200 OK\r\nST: {ZONE_PLAYER_URN}\r\n\r\n".encode()
        with LoopbackResponder([reply]) as responder:
            assert loopback_discovery(responder.port).search(ZONE_PLAYER_URN) == []

    def test_socket_failure_raises(self, monkeypatch):
        def broken_socket(*args, **kwargs):
            raise OSError("no sockets left")

        monkeypatch.setattr(network_discovery.socket, "socket", broken_socket)
        with pytest.raises(DiscoveryError):
            SSDPDiscovery({}).search(ZONE_PLAYER_URN)


# ═══════════════════════════════════════════════════════════════════════════
#  Static targets
# ═══════════════════════════════════════════════════════════════════════════


class TestTargets:
    def test_static_targets_expand_to_description_urls(self):
        assert build_static_targets(["10.0.0.5:1400", " ", " 10.0.0.6:1400 "]) == [
            "http://10.0.0.5:1400/xml/device_description.xml",
            "http://10.0.0.6:1400/xml/device_description.xml",
        ]

    def test_parse_valid_target(self):
        url = parse_target("http://10.0.0.5:1400/xml/device_description.xml")
        assert url.host == "10.0.0.5"
        assert url.port == 1400

    @pytest.mark.parametrize("locator", [
        "",
        "not a url",
        "ftp://10.0.0.5/desc.xml",
        "http:///xml/device_description.xml",
    ])
    def test_parse_invalid_target(self, locator):
        with pytest.raises(TargetParseError):
            parse_target(locator)
