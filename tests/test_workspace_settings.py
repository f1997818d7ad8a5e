"""Tests for comment-tolerant workspace settings."""

import json
from unittest.mock import MagicMock

from otelctl.settings import workspace
from otelctl.settings.workspace import WorkspaceSettings, load_settings, strip_json_comments


class TestStripJsonComments:

    def test_removes_full_line_comments(self):
        text = '{\n  // theme setting\n  "theme": "dark"\n}'
        assert json.loads(strip_json_comments(text)) == {'theme': 'dark'}

    def test_removes_trailing_comments(self):
        text = '{\n  "a": 1, // first\n  "b": 2 // second\n}'
        assert json.loads(strip_json_comments(text)) == {'a': 1, 'b': 2}

    def test_keeps_slashes_inside_strings(self):
        text = '{"otlpEndpoint": "http://localhost:4317"} // endpoint'
        assert json.loads(strip_json_comments(text)) == {'otlpEndpoint': 'http://localhost:4317'}

    def test_escaped_quote_inside_string(self):
        text = '{"name": "say \\"hi\\" // not a comment"}'
        assert json.loads(strip_json_comments(text)) == {'name': 'say "hi" // not a comment'}

    def test_comment_on_last_line_without_newline(self):
        assert strip_json_comments('{}\n// done') == '{}\n'


class TestLoadSettings:

    def test_missing_file(self, tmp_path):
        assert load_settings(tmp_path / 'settings.json') == {}

    def test_malformed_file_warns(self, tmp_path, capsys):
        path = tmp_path / 'settings.json'
        path.write_text('{"telemetry": ')

        assert load_settings(path) == {}
        assert 'Could not parse existing settings file' in capsys.readouterr().out

    def test_non_object_is_ignored(self, tmp_path):
        path = tmp_path / 'settings.json'
        path.write_text('[1, 2, 3]')

        assert load_settings(path) == {}


class TestWorkspaceSettings:

    def test_creates_settings_file(self, tmp_path):
        settings = WorkspaceSettings(tmp_path)

        assert settings.update_telemetry('gcp') is True

        data = json.loads(settings.path.read_text())
        assert data == {'telemetry': {'enabled': True, 'target': 'gcp'}, 'sandbox': False}

    def test_merges_existing_settings(self, tmp_path):
        settings = WorkspaceSettings(tmp_path)
        settings.path.parent.mkdir()
        settings.path.write_text(
            '{\n'
            '  // user preferences\n'
            '  "theme": "GitHub",\n'
            '  "telemetry": {"logPrompts": false, "target": "gcp"}\n'
            '}\n'
        )

        settings.update_telemetry('local', outfile='myfile.json')

        data = json.loads(settings.path.read_text())
        assert data['theme'] == 'GitHub'
        assert data['telemetry'] == {
            'logPrompts': False,
            'target': 'local',
            'enabled': True,
            'otlpEndpoint': '',
            'outfile': 'myfile.json',
        }

    def test_malformed_existing_file_is_replaced(self, tmp_path):
        settings = WorkspaceSettings(tmp_path)
        settings.path.parent.mkdir()
        settings.path.write_text('{ not json')

        assert settings.update_telemetry('local') is True

        data = json.loads(settings.path.read_text())
        assert data['telemetry']['target'] == 'local'

    def test_write_failure_returns_false(self, tmp_path, capsys):
        (tmp_path / '.gemini').write_text('')
        settings = WorkspaceSettings(tmp_path)

        assert settings.update_telemetry('gcp') is False
        assert 'Failed to update telemetry settings' in capsys.readouterr().out

    def test_problems_are_printed_once(self, tmp_path, capsys, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(workspace, 'logger', logger)
        (tmp_path / '.gemini').write_text('')

        WorkspaceSettings(tmp_path).update_telemetry('gcp')

        assert capsys.readouterr().out.count('Failed to update telemetry settings') == 1
        logger.warning.assert_not_called()
        logger.error.assert_not_called()

    def test_written_with_two_space_indent(self, tmp_path):
        settings = WorkspaceSettings(tmp_path)
        settings.update_telemetry('gcp')

        assert settings.path.read_text().startswith('{\n  "telemetry"')
