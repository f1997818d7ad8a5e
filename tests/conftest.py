"""Shared fixtures for otelctl tests."""

import pytest

from otelctl.config import Config, reset_config
from otelctl.errors import FetchError
from otelctl.manager import TelemetryManager
from otelctl.processes.launcher import ProcessLauncher, TerminateOutcome
from otelctl.storage.pid_store import FilePidStore


class FakeLauncher(ProcessLauncher):
    """Launcher that tracks fake pids instead of real processes."""

    def __init__(self, first_pid=4000):
        self.next_pid = first_pid
        self.alive = set()
        self.spawned = []
        self.signals = []
        self.group_fails = False
        self.survivors = set()

    def spawn_detached(self, command, env, cwd, log_file):
        pid = self.next_pid
        self.next_pid += 1
        self.alive.add(pid)
        self.spawned.append({
            'pid': pid,
            'command': command,
            'env': env,
            'cwd': cwd,
            'log_file': log_file,
        })
        return pid

    def is_alive(self, pid):
        return pid in self.alive

    def terminate(self, pid, graceful=True):
        self.signals.append((pid, graceful))
        if pid not in self.alive:
            return TerminateOutcome.NOT_FOUND
        if graceful and pid in self.survivors:
            return TerminateOutcome.GROUP
        self.alive.discard(pid)
        return TerminateOutcome.PROCESS if self.group_fails else TerminateOutcome.GROUP

    def wait_for_exit(self, pid, timeout):
        return pid not in self.alive


class FakeFetcher:
    """Fetcher that writes placeholder scripts without network access."""

    def __init__(self, scripts_dir):
        self.scripts_dir = scripts_dir
        self.fetched = []
        self.error = None

    def fetch(self, script_name):
        if self.error:
            raise FetchError(script_name, self.error)
        self.scripts_dir.mkdir(parents=True, exist_ok=True)
        path = self.scripts_dir / script_name
        path.write_text('// collector\n')
        self.fetched.append(script_name)
        return path


@pytest.fixture
def config(tmp_path):
    """Config whose state directory lives under tmp_path."""
    config_file = tmp_path / 'otelctl.toml'
    config_file.write_text(
        '[general]\n'
        f'state_dir = "{tmp_path / "state"}"\n'
        '\n'
        '[collectors]\n'
        'node_bin = "node"\n'
    )
    cfg = Config(config_path=str(config_file))
    reset_config(cfg)
    yield cfg
    reset_config(None)


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / 'project'
    root.mkdir()
    return root


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def fetcher(config):
    return FakeFetcher(config.scripts_dir)


@pytest.fixture
def store(config):
    return FilePidStore(config.pid_dir)


@pytest.fixture
def manager(config, store, launcher, fetcher, project_root):
    return TelemetryManager(
        config=config,
        store=store,
        launcher=launcher,
        fetcher=fetcher,
        project_root=project_root,
        environ={'PATH': '/usr/bin'},
    )
