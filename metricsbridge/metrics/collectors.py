"""Custom prometheus_client collectors used by the metrics system.

All collectors here compute their families on every ``collect()`` call from
caller-supplied callables; none of them mutates shared state while collecting.

  CurrentValueCollector    single unlabelled gauge backed by a callable
  SuppliedValueCollector   labelled counter/gauge, one callable per label set
  ExternalSummaryCollector summary family from an ExternalSummary snapshot
  CacheMetricsCollector    per-category aggregate over lru_cache-style caches
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector
from prometheus_client.utils import floatToGoString

from metricsbridge.utils.exceptions import DuplicateLabelValuesError

COUNTER = "counter"
GAUGE = "gauge"
SUMMARY = "summary"


class CurrentValueCollector(Collector):
    def __init__(self, name: str, documentation: str, value_supplier: Callable[[], float]):
        self._name = name
        self._documentation = documentation
        self._supplier = value_supplier

    def collect(self) -> Iterator[Metric]:
        yield GaugeMetricFamily(self._name, self._documentation, value=self._supplier())


class SuppliedValueCollector(Collector):
    """Labelled counter or gauge whose samples come from registered callables."""

    def __init__(self, metric_type: str, name: str, documentation: str, label_names: Sequence[str]):
        if metric_type not in (COUNTER, GAUGE):
            raise ValueError(f"unsupported supplied metric type: {metric_type}")
        self._type = metric_type
        self._name = name
        self._documentation = documentation
        self._label_names = tuple(label_names)
        self._suppliers: dict[tuple[str, ...], Callable[[], float]] = {}
        self._lock = threading.Lock()

    def add(self, label_values: tuple[str, ...], supplier: Callable[[], float]) -> None:
        with self._lock:
            if label_values in self._suppliers:
                raise DuplicateLabelValuesError(
                    f"A supplier is already registered for {self._name} label values {list(label_values)}"
                )
            self._suppliers[label_values] = supplier

    def collect(self) -> Iterator[Metric]:
        family_cls = CounterMetricFamily if self._type == COUNTER else GaugeMetricFamily
        family = family_cls(self._name, self._documentation, labels=self._label_names)
        with self._lock:
            entries = list(self._suppliers.items())
        for label_values, supplier in entries:
            family.add_metric(list(label_values), supplier())
        yield family


@dataclass(frozen=True)
class Quantile:
    quantile: float
    value: float


@dataclass(frozen=True)
class ExternalSummary:
    """Point-in-time summary computed outside prometheus_client."""

    count: int
    sum: float
    quantiles: Sequence[Quantile] = field(default_factory=tuple)


class ExternalSummaryCollector(Collector):
    def __init__(self, name: str, documentation: str, summary_supplier: Callable[[], ExternalSummary]):
        self._name = name
        self._documentation = documentation
        self._supplier = summary_supplier

    def collect(self) -> Iterator[Metric]:
        summary = self._supplier()
        family = Metric(self._name, self._documentation, SUMMARY)
        for q in summary.quantiles:
            family.add_sample(self._name, {"quantile": floatToGoString(q.quantile)}, q.value)
        family.add_sample(self._name + "_count", {}, summary.count)
        family.add_sample(self._name + "_sum", {}, summary.sum)
        yield family


class CacheInfoSource(Protocol):
    def cache_info(self) -> Any: ...


class CacheMetricsCollector(Collector):
    """Aggregates hit/miss/size statistics of many named caches.

    A cache is any object exposing ``cache_info()`` with ``hits``, ``misses``,
    ``maxsize`` and ``currsize`` (functions decorated with functools.lru_cache
    qualify). Samples are labelled by the name the cache was attached under.
    """

    LABEL = "cache"

    def __init__(self, prefix: str):
        self._prefix = prefix
        self._caches: dict[str, CacheInfoSource] = {}
        self._lock = threading.Lock()

    def add_cache(self, name: str, cache: CacheInfoSource) -> None:
        with self._lock:
            self._caches[name] = cache

    def collect(self) -> Iterator[Metric]:
        p = self._prefix
        labels = [self.LABEL]
        hit = CounterMetricFamily(p + "cache_hit", "Cache hit totals", labels=labels)
        miss = CounterMetricFamily(p + "cache_miss", "Cache miss totals", labels=labels)
        requests = CounterMetricFamily(p + "cache_requests", "Cache request totals", labels=labels)
        size = GaugeMetricFamily(p + "cache_size", "Current number of cached entries", labels=labels)
        max_size = GaugeMetricFamily(p + "cache_max_size", "Configured cache capacity", labels=labels)
        with self._lock:
            entries = list(self._caches.items())
        for name, cache in entries:
            info = cache.cache_info()
            hit.add_metric([name], info.hits)
            miss.add_metric([name], info.misses)
            requests.add_metric([name], info.hits + info.misses)
            size.add_metric([name], info.currsize)
            if info.maxsize is not None:
                max_size.add_metric([name], info.maxsize)
        yield from (hit, miss, requests, size, max_size)


__all__ = [
    "CurrentValueCollector",
    "SuppliedValueCollector",
    "Quantile",
    "ExternalSummary",
    "ExternalSummaryCollector",
    "CacheInfoSource",
    "CacheMetricsCollector",
]
