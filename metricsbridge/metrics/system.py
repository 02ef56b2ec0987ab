"""Prometheus-backed metrics system.

Owns every piece of process-wide metrics state: the prometheus_client
registry (through CollectorRegistryManager), the handle caches, the name
codec's total-suffix memory and the per-category cache collectors. One
instance is created at startup and shared; ``shutdown()`` resets it.

Creation flow for a labelled metric::

    name  = codec.to_external_*(category, name)
    cache hit  -> return cached handle (label names of later calls ignored)
    cache miss -> category enabled?  build prometheus metric, register, wrap
                  otherwise          inert handle with the same arity

Handle caches use a double-checked get-or-insert: the lock-free read serves
the common case and construction happens at most once per external name.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

from prometheus_client import CollectorRegistry, GCCollector, Histogram, PlatformCollector, ProcessCollector, Summary
from prometheus_client import Counter as PromCounter

from metricsbridge.utils.exceptions import CacheAlreadyRegisteredError

from .categories import MetricCategory, StandardMetricCategory
from .collectors import (
    COUNTER,
    GAUGE,
    CacheInfoSource,
    CacheMetricsCollector,
    CurrentValueCollector,
    ExternalSummary,
    ExternalSummaryCollector,
    SuppliedValueCollector,
)
from .handles import (
    Counter,
    LabelledMetric,
    LabelledSuppliedMetric,
    OperationTimer,
    active_counter,
    active_timer,
    inert_counter,
    inert_timer,
)
from .naming import NameCodec, prefix_for
from .observations import Observation, ObservationReader
from .registration import CollectorRegistryManager

logger = logging.getLogger(__name__)

H = TypeVar("H")

SIMPLE_TIMER_BUCKETS = (1.0,)


class PrometheusMetricsSystem:
    def __init__(self, enabled_categories: Iterable[MetricCategory], timers_enabled: bool = True,
                 registry: CollectorRegistry | None = None):
        self._enabled_categories = frozenset(enabled_categories)
        self._timers_enabled = timers_enabled
        self._codec = NameCodec()
        self._collectors = CollectorRegistryManager(registry)
        self._reader = ObservationReader(self._codec)
        self._cached_counters: dict[str, LabelledMetric[Counter]] = {}
        self._cached_timers: dict[str, LabelledMetric[OperationTimer]] = {}
        self._cache_collectors: dict[MetricCategory, CacheMetricsCollector] = {}
        self._cache_names: set[str] = set()
        self._lock = threading.Lock()

    def init(self) -> None:
        """Register prometheus_client's built-in process and runtime collectors."""
        if self.is_category_enabled(StandardMetricCategory.PROCESS):
            self._collectors.register_collector(StandardMetricCategory.PROCESS, ProcessCollector(registry=None))
        if self.is_category_enabled(StandardMetricCategory.RUNTIME):
            self._collectors.register_collector(StandardMetricCategory.RUNTIME, PlatformCollector(registry=None))
            # GCCollector always registers itself; hand it a scratch registry.
            gc_collector = GCCollector(registry=CollectorRegistry())
            self._collectors.register_collector(StandardMetricCategory.RUNTIME, gc_collector)

    @property
    def enabled_categories(self) -> frozenset[MetricCategory]:
        return self._enabled_categories

    @property
    def timers_enabled(self) -> bool:
        return self._timers_enabled

    @property
    def registry(self) -> CollectorRegistry:
        return self._collectors.registry

    def is_category_enabled(self, category: MetricCategory) -> bool:
        return category in self._enabled_categories

    def _get_or_create(self, cache: dict[str, H], key: str, factory: Callable[[], H]) -> H:
        existing = cache.get(key)
        if existing is not None:
            return existing
        with self._lock:
            existing = cache.get(key)
            if existing is None:
                existing = factory()
                cache[key] = existing
            return existing

    # -- counters / timers -------------------------------------------------

    def create_labelled_counter(self, category: MetricCategory, name: str, help_text: str,
                                *label_names: str) -> LabelledMetric[Counter]:
        metric_name = self._codec.to_external_counter_name(category, name)

        def _build() -> LabelledMetric[Counter]:
            if not self.is_category_enabled(category):
                logger.debug("metrics.inert_handle kind=counter name=%s", metric_name)
                return inert_counter(len(label_names))
            counter = PromCounter(metric_name, help_text, label_names, registry=None)
            self._collectors.register_collector(category, counter)
            return active_counter(counter, len(label_names))

        return self._get_or_create(self._cached_counters, metric_name, _build)

    def create_counter(self, category: MetricCategory, name: str, help_text: str) -> Counter:
        return self.create_labelled_counter(category, name, help_text).labels()

    def create_labelled_timer(self, category: MetricCategory, name: str, help_text: str,
                              *label_names: str) -> LabelledMetric[OperationTimer]:
        metric_name = self._codec.to_external_name(category, name)

        def _build() -> LabelledMetric[OperationTimer]:
            if not (self._timers_enabled and self.is_category_enabled(category)):
                logger.debug("metrics.inert_handle kind=timer name=%s", metric_name)
                return inert_timer(len(label_names))
            summary = Summary(metric_name, help_text, label_names, registry=None)
            self._collectors.register_collector(category, summary)
            return active_timer(summary, len(label_names))

        return self._get_or_create(self._cached_timers, metric_name, _build)

    def create_timer(self, category: MetricCategory, name: str, help_text: str) -> OperationTimer:
        return self.create_labelled_timer(category, name, help_text).labels()

    def create_simple_labelled_timer(self, category: MetricCategory, name: str, help_text: str,
                                     *label_names: str) -> LabelledMetric[OperationTimer]:
        metric_name = self._codec.to_external_name(category, name)

        def _build() -> LabelledMetric[OperationTimer]:
            if not (self._timers_enabled and self.is_category_enabled(category)):
                logger.debug("metrics.inert_handle kind=simple_timer name=%s", metric_name)
                return inert_timer(len(label_names))
            histogram = Histogram(metric_name, help_text, label_names, registry=None, buckets=SIMPLE_TIMER_BUCKETS)
            self._collectors.register_collector(category, histogram)
            return active_timer(histogram, len(label_names))

        return self._get_or_create(self._cached_timers, metric_name, _build)

    def create_simple_timer(self, category: MetricCategory, name: str, help_text: str) -> OperationTimer:
        return self.create_simple_labelled_timer(category, name, help_text).labels()

    # -- callback-backed metrics ------------------------------------------

    def create_gauge(self, category: MetricCategory, name: str, help_text: str,
                     value_supplier: Callable[[], float]) -> None:
        metric_name = self._codec.to_external_name(category, name)
        if self.is_category_enabled(category):
            self._collectors.register_collector(category, CurrentValueCollector(metric_name, help_text, value_supplier))

    def create_labelled_supplied_counter(self, category: MetricCategory, name: str, help_text: str,
                                         *label_names: str) -> LabelledSuppliedMetric:
        metric_name = self._codec.to_external_counter_name(category, name)
        return self._create_supplied(category, COUNTER, metric_name, help_text, label_names)

    def create_labelled_supplied_gauge(self, category: MetricCategory, name: str, help_text: str,
                                       *label_names: str) -> LabelledSuppliedMetric:
        metric_name = self._codec.to_external_name(category, name)
        return self._create_supplied(category, GAUGE, metric_name, help_text, label_names)

    def _create_supplied(self, category: MetricCategory, metric_type: str, metric_name: str, help_text: str,
                         label_names: tuple[str, ...]) -> LabelledSuppliedMetric:
        if not self.is_category_enabled(category):
            return LabelledSuppliedMetric(len(label_names))
        collector = SuppliedValueCollector(metric_type, metric_name, help_text, label_names)
        self._collectors.register_collector(category, collector)
        return LabelledSuppliedMetric(len(label_names), collector)

    def track_external_summary(self, category: MetricCategory, name: str, help_text: str,
                               summary_supplier: Callable[[], ExternalSummary]) -> None:
        metric_name = self._codec.to_external_name(category, name)
        if self.is_category_enabled(category):
            self._collectors.register_collector(
                category, ExternalSummaryCollector(metric_name, help_text, summary_supplier)
            )

    def create_cache_collector(self, category: MetricCategory, name: str, cache: CacheInfoSource) -> None:
        """Attach ``cache`` to the category's shared cache collector under ``name``.

        Raises CacheAlreadyRegisteredError if ``name`` was attached before (in
        any category) since the last shutdown.
        """
        if not self.is_category_enabled(category):
            return
        with self._lock:
            if name in self._cache_names:
                raise CacheAlreadyRegisteredError(name)
            collector = self._cache_collectors.get(category)
            if collector is None:
                collector = CacheMetricsCollector(prefix_for(category))
                self._collectors.register_collector(category, collector)
                self._cache_collectors[category] = collector
            # reserved only once the shared collector is registered
            self._cache_names.add(name)
        collector.add_cache(name, cache)

    # -- read side ----------------------------------------------------------

    def stream_observations(self, category: MetricCategory | None = None) -> Iterator[Observation]:
        """Lazily yield observations for one category, or for all of them."""
        if category is None:
            for cat in self._collectors.categories():
                yield from self._stream_category(cat)
        else:
            yield from self._stream_category(category)

    def _stream_category(self, category: MetricCategory) -> Iterator[Observation]:
        for collector in self._collectors.collectors_for(category):
            yield from self._reader.convert_families(category, collector.collect())

    # -- lifecycle ------------------------------------------------------------

    def shutdown(self) -> None:
        with self._lock:
            self._collectors.clear()
            self._cached_counters = {}
            self._cached_timers = {}
            self._cache_collectors = {}
            self._cache_names = set()
            self._codec.clear()
        logger.info("metrics.system.shutdown", extra={"event": "metrics.system.shutdown"})


__all__ = ["PrometheusMetricsSystem", "SIMPLE_TIMER_BUCKETS"]
