"""Configuration helpers (environment-derived settings)."""
from __future__ import annotations

from .runtime_config import MetricsSettings, RuntimeConfig, get_runtime_config

__all__ = ["MetricsSettings", "RuntimeConfig", "get_runtime_config"]
