"""
Metric descriptors and the per-cycle sample sink
"""

import threading
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from devices.models import DeviceDescriptor, InterfaceStatsSet

METRIC_PREFIX = "sonos"

SPEAKER_LABELS = (
    "room_name",
    "display_version",
    "hardware_version",
    "model_name",
    "model_number",
    "serial_num",
    "software_version",
    "udn",
)

INTERFACE_LABELS = ("player", "device", "serial_num")

# (InterfaceStats field, metric suffix, help)
INTERFACE_COUNTERS: Tuple[Tuple[str, str, str], ...] = (
    ("rx_bytes", "rx_bytes_total", "Received bytes"),
    ("tx_bytes", "tx_bytes_total", "Transmitted bytes"),
    ("rx_packets", "rx_packets_total", "Received packets"),
    ("rx_packet_errors", "rx_packet_errors_total", "Received packet errors"),
    ("rx_packet_drops", "rx_packet_drops_total", "Received packet drops"),
    ("rx_packet_overruns", "rx_packet_overruns_total", "Received packet overruns"),
    ("rx_packet_frames", "rx_packet_frames_total", "Received packet frame errors"),
    ("tx_packets", "tx_packets_total", "Transmitted packets"),
    ("tx_packet_errors", "tx_packet_errors_total", "Transmitted packet errors"),
    ("tx_packet_drops", "tx_packet_drops_total", "Transmitted packet drops"),
    ("tx_packet_overruns", "tx_packet_overruns_total", "Transmitted packet overruns"),
    ("tx_packet_carriers", "tx_packet_carriers_total", "Transmitted packet carrier errors"),
)

MetricFamily = Union[CounterMetricFamily, GaugeMetricFamily]

@dataclass(frozen=True)
class MetricSpec:
    """Shape of one emitted metric: name, help text, label names"""
    name: str
    documentation: str
    labels: Tuple[str, ...]
    kind: str = "gauge"

    def family(self) -> MetricFamily:
        if self.kind == "counter":
            return CounterMetricFamily(self.name, self.documentation, labels=self.labels)
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labels)

class MetricDescriptors:
    """All device metric specs, built once per orchestrator"""

    def __init__(self, prefix: str = METRIC_PREFIX):
        self.speaker_info = MetricSpec(f"{prefix}_speaker", "Sonos speaker info", SPEAKER_LABELS)
        self.interface_counters: Dict[str, MetricSpec] = {
            field_name: MetricSpec(f"{prefix}_{suffix}", help_text, INTERFACE_LABELS, "counter")
            for field_name, suffix, help_text in INTERFACE_COUNTERS
        }

    def all(self) -> List[MetricSpec]:
        return [self.speaker_info] + list(self.interface_counters.values())

    def empty_families(self) -> List[MetricFamily]:
        return [spec.family() for spec in self.all()]

class MetricSink:
    """Collects samples from concurrent collection tasks into metric families"""

    def __init__(self, descriptors: MetricDescriptors):
        self._lock = threading.Lock()
        self._order = [spec.name for spec in descriptors.all()]
        self._families: Dict[str, MetricFamily] = {spec.name: spec.family() for spec in descriptors.all()}
        self._samples = 0

    def emit(self, spec: MetricSpec, value: float, label_values: Sequence[str]) -> None:
        if len(label_values) != len(spec.labels):
            raise ValueError(f"{spec.name} expects {len(spec.labels)} labels, got {len(label_values)}")
        with self._lock:
            self._families[spec.name].add_metric(list(label_values), value)
            self._samples += 1

    def families(self) -> List[MetricFamily]:
        with self._lock:
            return [self._families[name] for name in self._order]

    def sample_count(self) -> int:
        with self._lock:
            return self._samples

def emit_speaker(sink: MetricSink, descriptors: MetricDescriptors, device: DeviceDescriptor) -> None:
    sink.emit(descriptors.speaker_info, 1, (
        device.room_name,
        device.display_version,
        device.hardware_version,
        device.model_name,
        device.model_number,
        device.serial_num,
        device.software_version,
        device.udn,
    ))

def emit_interfaces(sink: MetricSink, descriptors: MetricDescriptors,
                    device: DeviceDescriptor, interfaces: InterfaceStatsSet) -> None:
    for iface_name, stats in interfaces.items():
        labels = (device.room_name, iface_name, device.serial_num)
        for field_name, spec in descriptors.interface_counters.items():
            sink.emit(spec, getattr(stats, field_name), labels)
