"""Metric category taxonomy.

A category is a logical grouping of metrics sharing a naming prefix and an
enable/disable flag. Categories are supplied by callers; this module only
defines the value type plus the standard categories used by the built-in
process/runtime collectors.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class MetricCategory:
    name: str
    application_prefix: str | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class StandardMetricCategory:
    """Categories backed by prometheus_client's built-in collectors."""

    PROCESS = MetricCategory("process")
    RUNTIME = MetricCategory("python")

    ALL: tuple[MetricCategory, ...] = (PROCESS, RUNTIME)


def categories_by_name(categories: Iterable[MetricCategory]) -> dict[str, MetricCategory]:
    """Index categories by name; later duplicates lose to earlier ones."""
    out: dict[str, MetricCategory] = {}
    for cat in categories:
        out.setdefault(cat.name, cat)
    return out


__all__ = ["MetricCategory", "StandardMetricCategory", "categories_by_name"]
