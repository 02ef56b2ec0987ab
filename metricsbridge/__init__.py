"""metricsbridge: Prometheus metric naming, registration and read-back."""
from __future__ import annotations

__version__ = "0.1.0"
