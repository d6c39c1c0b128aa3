"""Scheduler configuration decoding and manifest helpers for topology-aware scheduling."""

__version__ = "0.1.0"

__all__ = ["codec", "components", "rte", "sched", "schedparams"]