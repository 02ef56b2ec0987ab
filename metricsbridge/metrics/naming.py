"""Bidirectional mapping between logical metric names and Prometheus names.

External name = ``(application_prefix or "") + category.name + "_" + name``.

prometheus_client strips a trailing ``_total`` from counter names and always
re-adds it on the emitted sample, so a counter declared as ``foo_total``
collapses onto the same family as ``foo``. The codec remembers which counter
names carried the suffix so read-back can restore it.
"""
from __future__ import annotations

import threading

from .categories import MetricCategory

TOTAL_SUFFIX = "_total"


def prefix_for(category: MetricCategory) -> str:
    return (category.application_prefix or "") + category.name + "_"


class NameCodec:
    def __init__(self) -> None:
        self._total_suffixed: set[str] = set()
        self._lock = threading.Lock()

    def to_external_name(self, category: MetricCategory, name: str) -> str:
        return prefix_for(category) + name

    def to_external_counter_name(self, category: MetricCategory, name: str) -> str:
        if name.endswith(TOTAL_SUFFIX):
            with self._lock:
                self._total_suffixed.add(name)
        return self.to_external_name(category, name)

    def from_external_name(self, category: MetricCategory, external: str) -> str:
        prefix = prefix_for(category)
        # Names the codec did not produce (built-in collectors) pass through.
        return external[len(prefix):] if external.startswith(prefix) else external

    def from_external_counter_name(self, category: MetricCategory, external: str) -> str:
        stripped = self.from_external_name(category, external)
        suffixed = stripped + TOTAL_SUFFIX
        return suffixed if suffixed in self._total_suffixed else stripped

    def clear(self) -> None:
        with self._lock:
            self._total_suffixed = set()


__all__ = ["TOTAL_SUFFIX", "prefix_for", "NameCodec"]
