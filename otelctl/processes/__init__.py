"""Process spawning for collectors."""

from otelctl.processes.launcher import (
    ProcessLauncher,
    PosixProcessLauncher,
    TerminateOutcome,
    create_launcher,
)

__all__ = ['ProcessLauncher', 'PosixProcessLauncher', 'TerminateOutcome', 'create_launcher']
