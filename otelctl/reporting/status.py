"""Collector status reporting."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from otelctl.config import DEFAULT_JAEGER_URL
from otelctl.slots import Slot


@dataclass
class SlotStatus:
    """Observed state of one collector slot."""

    slot: Slot
    running: bool
    log_file: Path
    pid: Optional[int] = None


@dataclass
class StatusReport:
    """Status of every collector slot, in gcp, local order."""

    slots: List[SlotStatus] = field(default_factory=list)
    jaeger_url: str = DEFAULT_JAEGER_URL

    @property
    def any_running(self) -> bool:
        return any(s.running for s in self.slots)

    def get(self, slot: Slot) -> SlotStatus:
        for status in self.slots:
            if status.slot is slot:
                return status
        raise KeyError(slot)

    def format(self) -> str:
        """Formats the report for console output."""
        lines = ['📊 Telemetry Collector Status:']

        for status in self.slots:
            state = '🟢 Running' if status.running else '🔴 Stopped'
            lines.append(f"  {status.slot.label} Collector: {state}")

        for status in self.slots:
            if not status.running:
                continue
            lines.append(
                f"    {status.slot.label} PID: {status.pid}, Log: {status.log_file}"
            )
            if status.slot is Slot.LOCAL:
                lines.append(f"    Jaeger UI: {self.jaeger_url}")

        return '\n'.join(lines)
