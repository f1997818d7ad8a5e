"""Workspace settings package for otelctl."""

from otelctl.settings.workspace import WorkspaceSettings, load_settings, strip_json_comments

__all__ = ['WorkspaceSettings', 'load_settings', 'strip_json_comments']
