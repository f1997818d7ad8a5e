"""Detached process spawning and signalling."""

import os
import signal
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, List

import psutil

from otelctl.errors import SpawnError
from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)


class TerminateOutcome(str, Enum):
    """Which signal path reached the process."""

    GROUP = 'group'
    PROCESS = 'process'
    NOT_FOUND = 'not_found'


class ProcessLauncher(ABC):
    """Spawns collectors and signals them by pid."""

    @abstractmethod
    def spawn_detached(
        self,
        command: List[str],
        env: Dict[str, str],
        cwd: Path,
        log_file: Path
    ) -> int:
        """Starts a command in its own process group without waiting on it.

        Args:
            command: Program and arguments
            env: Full environment for the child
            cwd: Working directory for the child
            log_file: File opened in append mode for stdout and stderr

        Returns:
            Child process id
        """
        pass

    @abstractmethod
    def is_alive(self, pid: int) -> bool:
        """Checks liveness without affecting the process."""
        pass

    @abstractmethod
    def terminate(self, pid: int, graceful: bool = True) -> TerminateOutcome:
        """Signals the process group rooted at pid, falling back to pid alone."""
        pass

    @abstractmethod
    def wait_for_exit(self, pid: int, timeout: float) -> bool:
        """Waits up to timeout seconds.

        Returns:
            True if the process is gone
        """
        pass


class PosixProcessLauncher(ProcessLauncher):
    """Process launcher backed by subprocess, os signals and psutil."""

    def spawn_detached(
        self,
        command: List[str],
        env: Dict[str, str],
        cwd: Path,
        log_file: Path
    ) -> int:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(log_file, 'ab') as log:
                proc = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=log,
                    cwd=str(cwd),
                    env=env,
                    start_new_session=True,
                    close_fds=True,
                )
        except OSError as e:
            raise SpawnError(f"Failed to start {command[0]}: {e}") from e

        # The child owns its copy of the log descriptor; the Popen object is
        # dropped without wait() so the collector outlives this process.
        logger.debug(f"Spawned {' '.join(command)} as PID {proc.pid} in {cwd}")
        return proc.pid

    def is_alive(self, pid: int) -> bool:
        try:
            os.kill(pid, 0)
            return True
        except (OSError, OverflowError):
            return False

    def terminate(self, pid: int, graceful: bool = True) -> TerminateOutcome:
        sig = signal.SIGTERM if graceful else signal.SIGKILL

        try:
            os.killpg(pid, sig)
            return TerminateOutcome.GROUP
        except (OSError, OverflowError) as e:
            logger.debug(f"Process group {pid} not signalled ({e}), trying process")

        try:
            os.kill(pid, sig)
            return TerminateOutcome.PROCESS
        except (OSError, OverflowError) as e:
            logger.debug(f"Process {pid} not signalled: {e}")
            return TerminateOutcome.NOT_FOUND

    def wait_for_exit(self, pid: int, timeout: float) -> bool:
        try:
            proc = psutil.Process(pid)
        except (psutil.NoSuchProcess, OverflowError, ValueError):
            return True

        _, alive = psutil.wait_procs([proc], timeout=timeout)
        return not alive


def create_launcher() -> ProcessLauncher:
    """Factory function for the platform process launcher."""
    if os.name != 'posix':
        raise SpawnError(f"Unsupported platform for detached collectors: {os.name}")
    return PosixProcessLauncher()
