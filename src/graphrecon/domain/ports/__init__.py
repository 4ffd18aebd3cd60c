"""Domain port definitions for adapters."""

from __future__ import annotations

from .graph_api import GraphApi, LogSink, QueryFilter, TemporalAxes

__all__ = ["GraphApi", "LogSink", "QueryFilter", "TemporalAxes"]
