"""Background lifecycle management for telemetry collectors."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from otelctl.collectors.fetcher import ScriptFetcher
from otelctl.config import Config, DEFAULT_JAEGER_URL, get_config
from otelctl.errors import MissingProjectError
from otelctl.processes.launcher import ProcessLauncher, TerminateOutcome, create_launcher
from otelctl.reporting.status import SlotStatus, StatusReport
from otelctl.settings.workspace import WorkspaceSettings
from otelctl.slots import ALL_SLOTS, Slot
from otelctl.storage.pid_store import FilePidStore, PidStore
from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)

PROJECT_ENV = 'OTLP_GOOGLE_CLOUD_PROJECT'


@dataclass
class StartResult:
    """Outcome of a start request."""

    slot: Slot
    started: bool
    pid: Optional[int] = None
    log_file: Optional[Path] = None


@dataclass
class StoppedCollector:
    slot: Slot
    pid: int
    outcome: TerminateOutcome
    forced: bool = False


@dataclass
class StopResult:
    """Collectors found by a stop request."""

    collectors: List[StoppedCollector] = field(default_factory=list)

    @property
    def stopped(self) -> List[StoppedCollector]:
        return [c for c in self.collectors if c.outcome is not TerminateOutcome.NOT_FOUND]

    @property
    def nothing_running(self) -> bool:
        return not self.stopped


class TelemetryManager:
    """Starts, stops and reports on the gcp and local collectors.

    Each slot's process id lives in the PID store; a slot is running only
    while its stored pid answers a zero signal. Stale records are removed
    whenever a liveness check finds them.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        store: Optional[PidStore] = None,
        launcher: Optional[ProcessLauncher] = None,
        fetcher: Optional[ScriptFetcher] = None,
        project_root: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None
    ):
        """Initializes the manager.

        Args:
            config: otelctl configuration. If None, uses global config.
            store: PID store. Defaults to files under the configured pid_dir.
            launcher: Process launcher. Defaults to the platform launcher.
            fetcher: Script fetcher. Defaults to downloading from GitHub.
            project_root: Working directory for collectors. Defaults to cwd.
            environ: Base environment for collectors. Defaults to os.environ.
        """
        self.config = config or get_config()
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.store = store or FilePidStore(self.config.pid_dir)
        self.launcher = launcher or create_launcher()
        self.fetcher = fetcher or ScriptFetcher(self.project_root, self.config)
        self.settings = WorkspaceSettings(self.project_root)
        self.environ = dict(os.environ if environ is None else environ)

        self.node_bin = self.config.get('collectors', 'node_bin', 'node')
        self.jaeger_url = self.config.get('collectors', 'jaeger_url', DEFAULT_JAEGER_URL)

    def read_pid(self, slot: Slot) -> Optional[int]:
        """Returns the stored pid if it is a positive integer."""
        raw = self.store.read(slot)
        if raw is None:
            return None

        try:
            pid = int(raw)
        except ValueError:
            return None

        return pid if pid > 0 else None

    def is_running(self, slot: Slot) -> bool:
        """Checks whether the slot's collector is alive.

        Removes the PID record when it is unreadable or names a dead process.
        """
        if self.store.read(slot) is None:
            return False

        pid = self.read_pid(slot)
        if pid is not None and self.launcher.is_alive(pid):
            return True

        logger.debug(f"Removing stale {slot.value} PID record")
        self.store.remove(slot)
        return False

    def start_gcp(self, project_id: Optional[str]) -> StartResult:
        """Starts the Google Cloud collector for a project."""
        if not project_id:
            raise MissingProjectError()
        return self.start(Slot.GCP, project_id=project_id)

    def start_local(self, outfile: Optional[str] = None) -> StartResult:
        """Starts the local collector, optionally writing to an outfile."""
        return self.start(Slot.LOCAL, outfile=outfile)

    def start(
        self,
        slot: Slot,
        project_id: Optional[str] = None,
        outfile: Optional[str] = None
    ) -> StartResult:
        """Starts a collector unless its slot is already running.

        Raises:
            MissingProjectError: gcp slot without a project id
            FetchError: The collector script could not be downloaded
            SpawnError: The collector process could not be started
        """
        if slot is Slot.GCP and not project_id:
            raise MissingProjectError()

        with self.store.lock(slot):
            if self.is_running(slot):
                print(f"🟡 {slot.label} telemetry collector is already running")
                return StartResult(slot=slot, started=False, pid=self.read_pid(slot))

            # A failed settings write is reported by update_telemetry itself
            self.settings.update_telemetry(slot.value, outfile if slot is Slot.LOCAL else None)

            script_path = self.fetcher.fetch(slot.script_name)

            env = dict(self.environ)
            if slot is Slot.GCP:
                env[PROJECT_ENV] = project_id
                print(f"🚀 Starting GCP telemetry collector for project: {project_id}")
            else:
                print("🚀 Starting local telemetry collector")

            log_file = self.store.log_path(slot)
            pid = self.launcher.spawn_detached(
                [self.node_bin, str(script_path)],
                env=env,
                cwd=self.project_root,
                log_file=log_file,
            )
            self.store.write(slot, pid)

        logger.info(f"Started {slot.value} collector (PID: {pid})")
        print(f"🟢 Started {slot.label} telemetry collector (PID: {pid})")
        print(f"📋 Log file: {log_file}")

        if slot is Slot.GCP:
            print(f"📊 View telemetry in Google Cloud Console for project: {project_id}")
        else:
            print(f"🌐 Jaeger UI: {self.jaeger_url}")
            if outfile:
                print(f"📄 Telemetry output: {outfile}")

        return StartResult(slot=slot, started=True, pid=pid, log_file=log_file)

    def stop(self, timeout: Optional[float] = None) -> StopResult:
        """Sends a graceful termination request to every running collector.

        Args:
            timeout: Seconds to wait before force-killing survivors. None uses
                the configured stop_timeout; 0 never waits.
        """
        if timeout is None:
            timeout = float(self.config.get('collectors', 'stop_timeout', 0))

        result = StopResult()

        for slot in ALL_SLOTS:
            with self.store.lock(slot):
                if not self.is_running(slot):
                    continue

                pid = self.read_pid(slot)
                outcome = self.launcher.terminate(pid)
                self.store.remove(slot)

            result.collectors.append(StoppedCollector(slot=slot, pid=pid, outcome=outcome))

            if outcome is TerminateOutcome.NOT_FOUND:
                print(f"⚠️  {slot.value} collector process {pid} not found")
            else:
                logger.info(f"Sent SIGTERM to {slot.value} collector ({outcome.value} {pid})")
                print(f"🔴 Stopped {slot.value} telemetry collector (PID: {pid})")

        if timeout > 0:
            self._escalate(result.stopped, timeout)

        if result.nothing_running:
            print("🟡 No telemetry collectors were running")

        return result

    def _escalate(self, collectors: List[StoppedCollector], timeout: float):
        """Force-kills collectors still alive after the grace period."""
        for collector in collectors:
            if self.launcher.wait_for_exit(collector.pid, timeout):
                continue

            logger.warning(
                f"{collector.slot.value} collector {collector.pid} still running "
                f"after {timeout}s, sending SIGKILL"
            )
            self.launcher.terminate(collector.pid, graceful=False)
            collector.forced = True
            print(f"💥 Force-killed {collector.slot.value} telemetry collector (PID: {collector.pid})")

    def status(self) -> StatusReport:
        """Collects the running state of every slot."""
        report = StatusReport(jaeger_url=self.jaeger_url)

        for slot in ALL_SLOTS:
            running = self.is_running(slot)
            report.slots.append(SlotStatus(
                slot=slot,
                running=running,
                log_file=self.store.log_path(slot),
                pid=self.read_pid(slot) if running else None,
            ))

        return report
