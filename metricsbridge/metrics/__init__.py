"""Metrics package public interface.

Stable import surfaces:
    from metricsbridge.metrics import PrometheusMetricsSystem, MetricCategory
    from metricsbridge.metrics import create_metrics_system
    from metricsbridge.metrics.testing import isolated_metrics_system
"""
from __future__ import annotations

from .categories import MetricCategory, StandardMetricCategory
from .collectors import ExternalSummary, Quantile
from .factory import create_metrics_system
from .handles import Counter, LabelledMetric, LabelledSuppliedMetric, OperationTimer, TimingContext
from .naming import NameCodec
from .observations import Observation
from .system import PrometheusMetricsSystem

__all__ = [
    "MetricCategory",
    "StandardMetricCategory",
    "ExternalSummary",
    "Quantile",
    "create_metrics_system",
    "Counter",
    "LabelledMetric",
    "LabelledSuppliedMetric",
    "OperationTimer",
    "TimingContext",
    "NameCodec",
    "Observation",
    "PrometheusMetricsSystem",
]
