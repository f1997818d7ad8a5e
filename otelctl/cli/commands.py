"""CLI commands for otelctl."""

import sys
from typing import Optional

from otelctl.errors import MissingProjectError, TelemetryError
from otelctl.manager import TelemetryManager
from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)


def create_manager() -> TelemetryManager:
    """Builds a manager for the current working directory."""
    return TelemetryManager()


def _fail(error: Exception):
    print(f"❌ Error: {error}", file=sys.stderr)
    sys.exit(1)


def start_gcp_command(project_id: Optional[str]):
    """Starts the GCP collector.

    Args:
        project_id: Google Cloud project, already resolved from the
            argument or OTLP_GOOGLE_CLOUD_PROJECT
    """
    try:
        if not project_id:
            raise MissingProjectError()
        create_manager().start_gcp(project_id)
    except TelemetryError as e:
        logger.debug(f"start-gcp failed: {e!r}")
        _fail(e)


def start_local_command(outfile: Optional[str] = None):
    """Starts the local collector."""
    try:
        create_manager().start_local(outfile)
    except TelemetryError as e:
        logger.debug(f"start-local failed: {e!r}")
        _fail(e)


def stop_command(timeout: Optional[float] = None):
    """Stops all running collectors."""
    try:
        create_manager().stop(timeout=timeout)
    except TelemetryError as e:
        _fail(e)


def status_command():
    """Displays collector status."""
    try:
        report = create_manager().status()
    except TelemetryError as e:
        _fail(e)

    print(report.format())
