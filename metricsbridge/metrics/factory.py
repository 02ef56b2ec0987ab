"""Build a PrometheusMetricsSystem from runtime settings."""
from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import CollectorRegistry

from metricsbridge.config.runtime_config import MetricsSettings, get_runtime_config

from .categories import MetricCategory, StandardMetricCategory
from .gating import resolve_enabled_categories
from .system import PrometheusMetricsSystem


def create_metrics_system(
    categories: Iterable[MetricCategory],
    settings: MetricsSettings | None = None,
    registry: CollectorRegistry | None = None,
    init: bool = True,
) -> PrometheusMetricsSystem:
    """Return an initialized metrics system for the application's categories.

    The standard process/runtime categories are always known so they can be
    enabled by name. When ``settings`` is None the environment snapshot from
    ``get_runtime_config()`` is used.
    """
    if settings is None:
        settings = get_runtime_config().metrics
    known = [*categories, *StandardMetricCategory.ALL]
    system = PrometheusMetricsSystem(
        resolve_enabled_categories(known, settings),
        timers_enabled=settings.timers_enabled,
        registry=registry,
    )
    if init:
        system.init()
    return system


__all__ = ["create_metrics_system"]
