"""Pytest configuration for metricsbridge.

Every test gets its own PrometheusMetricsSystem on a private
CollectorRegistry; environment variables read by the runtime config are
cleared so the developer's shell cannot leak into assertions.
"""
from __future__ import annotations

import pytest

from metricsbridge.metrics import MetricCategory, StandardMetricCategory
from metricsbridge.metrics.testing import isolated_metrics_system

_ENV_VARS = (
    'MB_METRICS_ENABLED',
    'MB_METRICS_CATEGORIES',
    'MB_METRICS_DISABLED_CATEGORIES',
    'MB_METRICS_TIMERS_ENABLED',
)


@pytest.fixture(autouse=True)
def _clean_metrics_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def app_category() -> MetricCategory:
    return MetricCategory('rpc', 'app_')


@pytest.fixture()
def disabled_category() -> MetricCategory:
    return MetricCategory('p2p', 'app_')


@pytest.fixture()
def metrics_system(app_category):
    with isolated_metrics_system([app_category, *StandardMetricCategory.ALL]) as system:
        yield system
