"""Testing helpers for metrics isolation.

``isolated_metrics_system()`` builds a PrometheusMetricsSystem on a private
CollectorRegistry (never the prometheus_client default) and shuts it down on
exit so counters and collector sets do not bleed across tests.
"""
from __future__ import annotations

import contextlib
from collections.abc import Iterable, Iterator

from prometheus_client import CollectorRegistry

from .categories import MetricCategory
from .system import PrometheusMetricsSystem


@contextlib.contextmanager
def isolated_metrics_system(categories: Iterable[MetricCategory], timers_enabled: bool = True) -> Iterator[PrometheusMetricsSystem]:
    system = PrometheusMetricsSystem(categories, timers_enabled=timers_enabled,
                                     registry=CollectorRegistry(auto_describe=True))
    try:
        yield system
    finally:
        system.shutdown()


__all__ = ["isolated_metrics_system"]
