"""
Collector module: collection cycles and Prometheus emission
"""

from .metrics import MetricDescriptors, MetricSink, MetricSpec
from .models import CollectionResult, TargetOutcome
from .orchestrator import CollectionOrchestrator, ExporterCollector

__all__ = ['CollectionOrchestrator', 'ExporterCollector', 'CollectionResult', 'TargetOutcome',
           'MetricDescriptors', 'MetricSink', 'MetricSpec']
