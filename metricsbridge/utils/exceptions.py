"""metricsbridge exception hierarchy.

A small exception tree for the failure modes of the metrics layer. Disabled
categories and collector name conflicts are not failures and never raise;
everything below is surfaced to the immediate caller.
"""
from __future__ import annotations


class MetricsBridgeError(Exception):
    """Base class for all metricsbridge exceptions."""


class ConfigError(MetricsBridgeError):
    """Invalid metrics configuration (malformed environment values)."""


class MetricsStateError(MetricsBridgeError):
    """Operation not permitted in the current registration state."""


class CacheAlreadyRegisteredError(MetricsStateError):
    """A cache was attached under a name that is already in use."""

    def __init__(self, name: str):
        super().__init__(f"Cache already registered: {name}")
        self.name = name


class LabelCardinalityError(MetricsBridgeError, ValueError):
    """Number of label values differs from the declared label names."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected {expected} label values, got {actual}")
        self.expected = expected
        self.actual = actual


class DuplicateLabelValuesError(MetricsBridgeError, ValueError):
    """A supplied metric already has a supplier for these label values."""


__all__ = [
    "MetricsBridgeError",
    "ConfigError",
    "MetricsStateError",
    "CacheAlreadyRegisteredError",
    "LabelCardinalityError",
    "DuplicateLabelValuesError",
]
