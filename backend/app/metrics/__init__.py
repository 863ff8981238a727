"""Metrics collection."""

from .registry import MetricsClient, get_metrics

__all__ = ["MetricsClient", "get_metrics"]
