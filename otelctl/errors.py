"""Exceptions raised by otelctl."""


class TelemetryError(Exception):
    """Base class for fatal otelctl errors."""


class MissingProjectError(TelemetryError):
    """No Google Cloud project id was supplied."""

    def __init__(self):
        super().__init__(
            "Project ID required. Set OTLP_GOOGLE_CLOUD_PROJECT environment "
            "variable or pass as argument."
        )


class FetchError(TelemetryError):
    """A collector script could not be downloaded."""

    def __init__(self, script_name: str, reason: str):
        self.script_name = script_name
        self.reason = reason
        super().__init__(f"Failed to download {script_name}: {reason}")


class SpawnError(TelemetryError):
    """A collector process could not be started."""
