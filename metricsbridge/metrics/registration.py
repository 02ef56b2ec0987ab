"""Collector registration with eviction-on-conflict.

At most one collector per category may produce a given family name. A new
collector whose families intersect an existing collector's replaces it: the
old one is dropped from the category set and unregistered from the
prometheus_client registry before the new one is registered. This models
reconfiguration (a metric re-declared with new labels or a new supplier).

Note the policy is silent towards the evicted collector's owner: two
unrelated metrics that generate the same external name will keep replacing
each other. Replacements are logged at INFO so the churn is visible.

Readers (``collectors_for``/``categories``) work on immutable snapshots and
never contend with the registration lock.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from prometheus_client import CollectorRegistry
from prometheus_client.registry import Collector

from .categories import MetricCategory

logger = logging.getLogger(__name__)


def family_names(collector: Collector) -> frozenset[str]:
    return frozenset(family.name for family in collector.collect())


def overlaps(a: Iterable[str], b: frozenset[str]) -> bool:
    return any(name in b for name in a)


class CollectorRegistryManager:
    def __init__(self, registry: CollectorRegistry | None = None):
        self._registry = registry if registry is not None else CollectorRegistry(auto_describe=True)
        self._by_category: dict[MetricCategory, tuple[Collector, ...]] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def register_collector(self, category: MetricCategory, collector: Collector) -> Collector:
        new_names = family_names(collector)
        with self._lock:
            kept: list[Collector] = []
            evicted: list[Collector] = []
            for existing in self._by_category.get(category, ()):
                if overlaps(new_names, family_names(existing)):
                    evicted.append(existing)
                else:
                    kept.append(existing)
            for old in evicted:
                self._registry.unregister(old)
            try:
                self._registry.register(collector)
            except ValueError:
                # Clash outside this category; restore what was evicted.
                for old in evicted:
                    self._registry.register(old)
                raise
            if evicted:
                logger.info(
                    "metrics.collector.replaced category=%s families=%s evicted=%d",
                    category.name, sorted(new_names), len(evicted),
                    extra={
                        "event": "metrics.collector.replaced",
                        "category": category.name,
                        "families": sorted(new_names),
                        "evicted": len(evicted),
                    },
                )
            kept.append(collector)
            updated = dict(self._by_category)
            updated[category] = tuple(kept)
            self._by_category = updated
        return collector

    def collectors_for(self, category: MetricCategory) -> tuple[Collector, ...]:
        return self._by_category.get(category, ())

    def categories(self) -> list[MetricCategory]:
        return list(self._by_category)

    def clear(self) -> None:
        with self._lock:
            previous = self._by_category
            self._by_category = {}
            for collectors in previous.values():
                for c in collectors:
                    self._registry.unregister(c)
        logger.debug("metrics.collectors.cleared categories=%d", len(previous))


__all__ = ["family_names", "overlaps", "CollectorRegistryManager"]
