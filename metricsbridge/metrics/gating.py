"""Category gating.

Turns the MetricsSettings allow/deny lists into the set of enabled
MetricCategory objects handed to the metrics system.

Semantics:
  1. Master switch off -> no category enabled.
  2. Allow-list set (even empty) -> only listed known categories.
  3. Allow-list unset -> every known category.
  4. Deny-list always wins over the allow-list.
Names that match no known category are logged once per resolution and
otherwise ignored.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from metricsbridge.config.runtime_config import MetricsSettings

from .categories import MetricCategory, categories_by_name

logger = logging.getLogger(__name__)


def resolve_enabled_categories(known: Iterable[MetricCategory], settings: MetricsSettings) -> frozenset[MetricCategory]:
    by_name = categories_by_name(known)
    if not settings.enabled:
        logger.info(
            "metrics.category_filters.loaded",
            extra={"event": "metrics.category_filters.loaded", "metrics_enabled": False},
        )
        return frozenset()

    requested = settings.categories if settings.categories is not None else frozenset(by_name)
    unknown = sorted((requested | settings.disabled_categories) - set(by_name))
    if unknown:
        logger.warning("metrics.category_filters.unknown names=%s", ",".join(unknown))

    enabled = frozenset(
        by_name[n] for n in requested
        if n in by_name and n not in settings.disabled_categories
    )
    logger.info(
        "metrics.category_filters.loaded",
        extra={
            "event": "metrics.category_filters.loaded",
            "metrics_enabled": True,
            "allow_list_active": settings.categories is not None,
            "enabled_count": len(enabled),
            "disabled_count": len(settings.disabled_categories),
        },
    )
    return enabled


__all__ = ["resolve_enabled_categories"]
