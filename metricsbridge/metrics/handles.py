"""Metric handles returned by the metrics system.

Every handle comes in two modes selected at creation time:

* active: bound to a prometheus_client metric (or supplied-value collector)
* inert:  same call contract and label arity, records nothing

Callers never branch on the mode; the inert variant is what a disabled
category (or the timers flag) hands out.
"""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from metricsbridge.utils.exceptions import LabelCardinalityError

T = TypeVar("T")

ValueSupplier = Callable[[], float]


def _check_arity(expected: int, values: tuple[str, ...]) -> None:
    if len(values) != expected:
        raise LabelCardinalityError(expected, len(values))


class Counter:
    __slots__ = ("_child",)

    def __init__(self, child: Any = None):
        self._child = child

    @property
    def inert(self) -> bool:
        return self._child is None

    def inc(self, amount: float = 1) -> None:
        if self._child is not None:
            self._child.inc(amount)


class TimingContext:
    """A running timer; records its duration exactly once."""

    __slots__ = ("_timer", "_start", "_elapsed")

    def __init__(self, timer: OperationTimer):
        self._timer = timer
        self._start = time.perf_counter()
        self._elapsed: float | None = None

    def stop_timer(self) -> float:
        if self._elapsed is None:
            self._elapsed = time.perf_counter() - self._start
            self._timer.observe(self._elapsed)
        return self._elapsed

    def __enter__(self) -> TimingContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_timer()


class OperationTimer:
    __slots__ = ("_child",)

    def __init__(self, child: Any = None):
        self._child = child

    @property
    def inert(self) -> bool:
        return self._child is None

    def start_timer(self) -> TimingContext:
        return TimingContext(self)

    def observe(self, seconds: float) -> None:
        if self._child is not None:
            self._child.observe(seconds)


INERT_COUNTER = Counter()
INERT_TIMER = OperationTimer()


class LabelledMetric(Generic[T]):
    """Handle for one (category, name) metric; ``labels`` yields children."""

    def __init__(self, label_count: int, bind: Callable[[tuple[str, ...]], T] | None, inert_child: T):
        self._label_count = label_count
        self._bind = bind
        self._inert_child = inert_child

    @property
    def label_count(self) -> int:
        return self._label_count

    @property
    def inert(self) -> bool:
        return self._bind is None

    def labels(self, *label_values: str) -> T:
        _check_arity(self._label_count, label_values)
        if self._bind is None:
            return self._inert_child
        return self._bind(label_values)


def _prometheus_child(metric: Any, label_values: tuple[str, ...]) -> Any:
    # Unlabelled prometheus metrics refuse .labels(); the metric is its own child.
    return metric.labels(*label_values) if label_values else metric


def active_counter(metric: Any, label_count: int) -> LabelledMetric[Counter]:
    return LabelledMetric(label_count, lambda values: Counter(_prometheus_child(metric, values)), INERT_COUNTER)


def inert_counter(label_count: int) -> LabelledMetric[Counter]:
    return LabelledMetric(label_count, None, INERT_COUNTER)


def active_timer(metric: Any, label_count: int) -> LabelledMetric[OperationTimer]:
    return LabelledMetric(label_count, lambda values: OperationTimer(_prometheus_child(metric, values)), INERT_TIMER)


def inert_timer(label_count: int) -> LabelledMetric[OperationTimer]:
    return LabelledMetric(label_count, None, INERT_TIMER)


class LabelledSuppliedMetric:
    """Metric whose values are pulled from callables at collection time.

    ``collector`` is a SuppliedValueCollector for the active mode and None for
    the inert one.
    """

    def __init__(self, label_count: int, collector: Any = None):
        self._label_count = label_count
        self._collector = collector

    @property
    def label_count(self) -> int:
        return self._label_count

    @property
    def inert(self) -> bool:
        return self._collector is None

    def labels(self, value_supplier: ValueSupplier, *label_values: str) -> None:
        _check_arity(self._label_count, label_values)
        if self._collector is not None:
            self._collector.add(label_values, value_supplier)


__all__ = [
    "ValueSupplier",
    "Counter",
    "OperationTimer",
    "TimingContext",
    "LabelledMetric",
    "LabelledSuppliedMetric",
    "INERT_COUNTER",
    "INERT_TIMER",
    "active_counter",
    "inert_counter",
    "active_timer",
    "inert_timer",
]
