"""PID storage for collector slots."""

from otelctl.storage.pid_store import PidStore, FilePidStore, MemoryPidStore

__all__ = ['PidStore', 'FilePidStore', 'MemoryPidStore']
