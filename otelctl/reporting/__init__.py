"""Reporting package for otelctl."""

from otelctl.reporting.status import SlotStatus, StatusReport

__all__ = ['SlotStatus', 'StatusReport']
