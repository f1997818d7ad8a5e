"""PID record storage for collector slots."""

import fcntl
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

from otelctl.slots import Slot
from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)


class PidStore(ABC):
    """Maps each slot to its persisted process id and log file."""

    @abstractmethod
    def read(self, slot: Slot) -> Optional[str]:
        """Returns the raw stored PID record, or None if there is none."""
        pass

    @abstractmethod
    def write(self, slot: Slot, pid: int):
        """Persists a PID record, replacing any existing one."""
        pass

    @abstractmethod
    def remove(self, slot: Slot):
        """Deletes the PID record. Missing records are ignored."""
        pass

    @abstractmethod
    def pid_path(self, slot: Slot) -> Path:
        pass

    @abstractmethod
    def log_path(self, slot: Slot) -> Path:
        pass

    @abstractmethod
    @contextmanager
    def lock(self, slot: Slot) -> Iterator[None]:
        """Holds an exclusive lock on the slot for the duration of the block."""
        pass


class FilePidStore(PidStore):
    """PID records kept as plain-text files in a per-user directory.

    Layout:
        <pid_dir>/<slot>.pid            decimal process id
        <pid_dir>/<slot>-telemetry.log  collector output
        <pid_dir>/<slot>.lock           flock target for start/stop
    """

    def __init__(self, pid_dir: Path):
        """Initializes the store and creates the directory.

        Args:
            pid_dir: Directory holding PID, log and lock files
        """
        self.pid_dir = Path(pid_dir)
        self.pid_dir.mkdir(parents=True, exist_ok=True)

    def pid_path(self, slot: Slot) -> Path:
        return self.pid_dir / slot.pid_filename

    def log_path(self, slot: Slot) -> Path:
        return self.pid_dir / slot.log_filename

    def read(self, slot: Slot) -> Optional[str]:
        try:
            return self.pid_path(slot).read_text(errors='replace').strip()
        except FileNotFoundError:
            return None

    def write(self, slot: Slot, pid: int):
        self.pid_path(slot).write_text(str(pid))
        logger.debug(f"Wrote PID {pid} to {self.pid_path(slot)}")

    def remove(self, slot: Slot):
        self.pid_path(slot).unlink(missing_ok=True)

    @contextmanager
    def lock(self, slot: Slot) -> Iterator[None]:
        lock_file = self.pid_dir / f'{slot.value}.lock'
        with open(lock_file, 'a') as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


class MemoryPidStore(PidStore):
    """In-memory PID store for tests and dry runs."""

    def __init__(self, base_dir: Path = Path('/nonexistent')):
        self.base_dir = Path(base_dir)
        self.records: Dict[Slot, str] = {}
        self._locks = {slot: threading.Lock() for slot in Slot}

    def pid_path(self, slot: Slot) -> Path:
        return self.base_dir / slot.pid_filename

    def log_path(self, slot: Slot) -> Path:
        return self.base_dir / slot.log_filename

    def read(self, slot: Slot) -> Optional[str]:
        return self.records.get(slot)

    def write(self, slot: Slot, pid: int):
        self.records[slot] = str(pid)

    def remove(self, slot: Slot):
        self.records.pop(slot, None)

    @contextmanager
    def lock(self, slot: Slot) -> Iterator[None]:
        with self._locks[slot]:
            yield
