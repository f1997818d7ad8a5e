"""Collector slots tracked by otelctl."""

from enum import Enum


class Slot(str, Enum):
    """Named collector lifecycles, each with its own PID and log file."""

    GCP = 'gcp'
    LOCAL = 'local'

    @property
    def label(self) -> str:
        return 'GCP' if self is Slot.GCP else 'Local'

    @property
    def script_name(self) -> str:
        """Collector script fetched for this slot."""
        return SCRIPT_NAMES[self]

    @property
    def pid_filename(self) -> str:
        return f'{self.value}.pid'

    @property
    def log_filename(self) -> str:
        return f'{self.value}-telemetry.log'


SCRIPT_NAMES = {
    Slot.GCP: 'telemetry_gcp.js',
    Slot.LOCAL: 'local_telemetry.js',
}

# Order used by stop and status
ALL_SLOTS = (Slot.GCP, Slot.LOCAL)
