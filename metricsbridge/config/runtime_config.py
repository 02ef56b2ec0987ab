"""Runtime configuration for the metrics layer.

Provides a minimal, typed snapshot of the metrics parameters derived from
environment variables so callers do not scatter ``os.getenv`` lookups.

Variables:
  MB_METRICS_ENABLED              master switch (default on)
  MB_METRICS_CATEGORIES           comma allow-list of category names (unset = all)
  MB_METRICS_DISABLED_CATEGORIES  comma deny-list, wins over the allow-list
  MB_METRICS_TIMERS_ENABLED       global timers flag (default on)
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from metricsbridge.utils.exceptions import ConfigError

__all__ = [
    "TRUTHY_SET",
    "FALSY_SET",
    "MetricsSettings",
    "RuntimeConfig",
    "build_runtime_config",
    "get_runtime_config",
]

TRUTHY_SET: frozenset[str] = frozenset({"1", "true", "yes", "on"})
FALSY_SET: frozenset[str] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class MetricsSettings:
    enabled: bool
    categories: frozenset[str] | None
    disabled_categories: frozenset[str]
    timers_enabled: bool


@dataclass(frozen=True)
class RuntimeConfig:
    metrics: MetricsSettings


_singleton: RuntimeConfig | None = None


def _coerce_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    norm = val.strip().lower()
    if norm in TRUTHY_SET:
        return True
    if norm in FALSY_SET:
        return False
    raise ConfigError(f"{name}: expected a boolean flag, got {val!r}")


def _coerce_csv(val: str | None) -> frozenset[str]:
    if not val:
        return frozenset()
    return frozenset(p.strip() for p in val.split(",") if p.strip())


def build_runtime_config() -> RuntimeConfig:
    allow_raw = os.getenv("MB_METRICS_CATEGORIES")
    categories = _coerce_csv(allow_raw) if allow_raw is not None else None
    return RuntimeConfig(
        metrics=MetricsSettings(
            enabled=_coerce_bool("MB_METRICS_ENABLED", True),
            categories=categories,
            disabled_categories=_coerce_csv(os.getenv("MB_METRICS_DISABLED_CATEGORIES")),
            timers_enabled=_coerce_bool("MB_METRICS_TIMERS_ENABLED", True),
        )
    )


def get_runtime_config(refresh: bool = False) -> RuntimeConfig:
    global _singleton  # noqa: PLW0603
    if _singleton is None or refresh:
        _singleton = build_runtime_config()
    return _singleton
