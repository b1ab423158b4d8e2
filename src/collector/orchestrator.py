"""
Collection orchestrator - drives one discovery + fetch + emit cycle per scrape
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram

from .metrics import METRIC_PREFIX, MetricDescriptors, MetricSink, emit_speaker, emit_interfaces
from .models import CollectionResult, TargetOutcome

from devices.descriptor import DescriptorFetcher
from devices.ifconfig import InterfaceStatsFetcher
from discovery.network_discovery import SSDPDiscovery, ZONE_PLAYER_URN
from discovery.targets import build_static_targets, parse_target
from errors import DiscoveryError, ExporterError
from http_helper import create_device_session

logger = logging.getLogger(__name__)

class CollectionOrchestrator:
    """Resolves targets and collects every device concurrently, isolating per-target failures"""

    def __init__(self, config: Dict, discovery: Optional[SSDPDiscovery] = None,
                 descriptor_fetcher: Optional[DescriptorFetcher] = None,
                 stats_fetcher: Optional[InterfaceStatsFetcher] = None):
        self.config = config
        discovery_config = config.get('discovery', {})

        # Static targets replace SSDP entirely
        self.targets = build_static_targets(config.get('exporter', {}).get('targets', []))
        self.discovery_enabled = discovery_config.get('enabled', True)
        self.service_type = discovery_config.get('service_type', ZONE_PLAYER_URN)
        self.discovery = discovery or SSDPDiscovery(discovery_config)
        self.request_timeout = config.get('http', {}).get('request_timeout')

        self.descriptor_fetcher = descriptor_fetcher or DescriptorFetcher()
        self.stats_fetcher = stats_fetcher or InterfaceStatsFetcher()

        self.metrics = MetricDescriptors(METRIC_PREFIX)
        self.collection_duration = Histogram(
            f"{METRIC_PREFIX}_collection_duration_seconds",
            "Time spent collecting from all devices",
            registry=None,
        )
        self.collection_errors = Counter(
            f"{METRIC_PREFIX}_collection_errors",
            "Errors observed when collecting devices",
            registry=None,
        )

        self.last_result: Optional[CollectionResult] = None

    @property
    def target_mode(self) -> str:
        if self.targets:
            return "static"
        return "ssdp" if self.discovery_enabled else "disabled"

    @property
    def errors_total(self) -> float:
        """Current value of the collection error counter"""
        for metric in self.collection_errors.collect():
            for sample in metric.samples:
                if sample.name.endswith('_total'):
                    return sample.value
        return 0.0

    def register(self, registry: CollectorRegistry) -> None:
        """Register the cycle collector first so a scrape sees this cycle's counters"""
        registry.register(ExporterCollector(self))
        registry.register(self.collection_errors)
        registry.register(self.collection_duration)

    async def _resolve_targets(self) -> List[str]:
        if self.targets:
            return list(self.targets)
        if not self.discovery_enabled:
            return []
        return await self.discovery.async_search(self.service_type)

    async def run_cycle(self, sink: MetricSink) -> CollectionResult:
        """Run one full collection cycle, emitting every sample into sink"""
        start_time = time.monotonic()
        result = CollectionResult(started_at=datetime.now(timezone.utc), target_mode=self.target_mode)

        try:
            targets = await self._resolve_targets()
        except DiscoveryError as e:
            logger.error(f"Search: {e}")
            self.collection_errors.inc()
            result.failures = 1
            result.discovery_failed = True
            result.duration_seconds = time.monotonic() - start_time
            self.last_result = result
            return result

        result.targets = len(targets)
        logger.debug(f"Collecting from {len(targets)} targets ({result.target_mode})")

        async with create_device_session(self.request_timeout) as session:
            outcomes = await asyncio.gather(
                *(self._collect_target(session, sink, target) for target in targets)
            )

        for outcome in outcomes:
            if outcome.failed:
                result.failures += 1
            if outcome.descriptor is not None:
                result.devices.append((outcome.descriptor, outcome.interfaces or {}))

        result.duration_seconds = time.monotonic() - start_time
        self.collection_duration.observe(result.duration_seconds)
        self.last_result = result

        logger.info(f"Collection cycle: {len(result.devices)}/{result.targets} devices, "
                    f"{result.failures} failures in {result.duration_seconds:.2f}s")
        return result

    async def _collect_target(self, session, sink: MetricSink, target: str) -> TargetOutcome:
        """Collect one device; any failure is counted and confined to this target"""
        outcome = TargetOutcome(target=target)
        step = "Parse"
        try:
            parse_target(target)

            step = "Get info"
            outcome.descriptor = await self.descriptor_fetcher.fetch(session, target)
            emit_speaker(sink, self.metrics, outcome.descriptor)

            step = "Get ifconfig"
            outcome.interfaces = await self.stats_fetcher.fetch(session, target)
            emit_interfaces(sink, self.metrics, outcome.descriptor, outcome.interfaces)

        except ExporterError as e:
            logger.error(f"{step} {target}: {e}")
            outcome.error = str(e)
            self.collection_errors.inc()
        except Exception as e:
            logger.exception(f"{step} {target}: unexpected error")
            outcome.error = str(e) or type(e).__name__
            self.collection_errors.inc()

        return outcome

class ExporterCollector:
    """prometheus_client collector that runs one collection cycle per scrape"""

    def __init__(self, orchestrator: CollectionOrchestrator):
        self.orchestrator = orchestrator

    def describe(self):
        return self.orchestrator.metrics.empty_families()

    def collect(self):
        # Scrapes arrive on worker threads, so each cycle gets its own event loop
        sink = MetricSink(self.orchestrator.metrics)
        asyncio.run(self.orchestrator.run_cycle(sink))
        yield from sink.families()
