"""Telemetry and observability helpers.

This package emits deterministic stage events for load and export runs.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
