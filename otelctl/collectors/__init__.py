"""Collector script handling for otelctl."""

from otelctl.collectors.fetcher import ScriptFetcher

__all__ = ['ScriptFetcher']
