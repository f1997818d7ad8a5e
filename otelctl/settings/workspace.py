"""Workspace settings (.gemini/settings.json) handling."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)

SETTINGS_DIR = '.gemini'
SETTINGS_FILE = 'settings.json'


def strip_json_comments(text: str) -> str:
    """Removes // line comments that sit outside string literals.

    Args:
        text: JSON document that may contain line comments

    Returns:
        Text with each comment replaced by nothing up to its newline
    """
    out = []
    in_string = False
    escaped = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]

        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif ch == '/' and text.startswith('//', i):
            newline = text.find('\n', i)
            if newline == -1:
                break
            i = newline
        else:
            out.append(ch)
            i += 1

    return ''.join(out)


def load_settings(path: Path) -> Dict[str, Any]:
    """Reads a comment-tolerant JSON settings file.

    A missing file yields an empty dict. Malformed content, or content that
    is not a JSON object, is reported as a warning and also yields {}.
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding='utf-8')
        settings = json.loads(strip_json_comments(content))
    except (OSError, ValueError) as e:
        print(f"⚠️  Could not parse existing settings file: {e}")
        logger.debug(f"Ignoring unreadable settings file {path}: {e}")
        return {}

    if not isinstance(settings, dict):
        print(f"⚠️  Settings file {path} does not hold a JSON object, ignoring it")
        logger.debug(f"Settings file {path} is a {type(settings).__name__}, not an object")
        return {}

    return settings


class WorkspaceSettings:
    """Telemetry fields of a project's .gemini/settings.json."""

    def __init__(self, project_root: Path):
        """Initializes workspace settings.

        Args:
            project_root: Directory the user is running the CLI from
        """
        self.project_root = Path(project_root)
        self.path = self.project_root / SETTINGS_DIR / SETTINGS_FILE

    def load(self) -> Dict[str, Any]:
        return load_settings(self.path)

    def update_telemetry(self, target: str, outfile: Optional[str] = None) -> bool:
        """Enables telemetry for a target, keeping every unrelated setting.

        Args:
            target: Telemetry target ('gcp' or 'local')
            outfile: Optional file the local collector should write to

        Returns:
            True if the settings file was written
        """
        settings = self.load()

        telemetry = settings.get('telemetry')
        if not isinstance(telemetry, dict):
            telemetry = {}
            settings['telemetry'] = telemetry

        telemetry['enabled'] = True
        telemetry['target'] = target
        if outfile:
            telemetry['otlpEndpoint'] = ''
            telemetry['outfile'] = outfile
        settings['sandbox'] = False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(settings, indent=2), encoding='utf-8')
        except OSError as e:
            print(f"❌ Failed to update telemetry settings: {e}")
            logger.debug(f"Failed to write {self.path}: {e}")
            return False

        if outfile:
            print(f"⚙️  Updated telemetry settings for outfile: {outfile}")
        logger.info(f"Telemetry target set to {target} in {self.path}")
        return True
