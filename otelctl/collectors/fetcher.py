"""Collector script fetcher for otelctl."""

import json
from pathlib import Path
from typing import Optional

import httpx

from otelctl.config import Config, get_config
from otelctl.errors import FetchError
from otelctl.utils.logger import setup_logger

logger = setup_logger(__name__)

UTILS_SCRIPT = 'telemetry_utils.js'

# Collector scripts that import telemetry_utils.js from their own directory
SCRIPTS_NEEDING_UTILS = ('telemetry_gcp.js', 'local_telemetry.js')

# Line in telemetry_utils.js that resolves the project root relative to itself
PROJECT_ROOT_LINE = "const projectRoot = path.resolve(__dirname, '..');"


class ScriptFetcher:
    """Downloads collector scripts from GitHub into a local cache."""

    def __init__(
        self,
        project_root: Path,
        config: Optional[Config] = None,
        client: Optional[httpx.Client] = None
    ):
        """Initializes the fetcher.

        Args:
            project_root: Directory the collectors should treat as the project
            config: otelctl configuration. If None, uses global config.
            client: HTTP client to use. If None, one is created per fetch.
        """
        self.config = config or get_config()
        self.project_root = Path(project_root)
        self.cache_dir = self.config.scripts_dir
        self.repo = self.config.get('scripts', 'repo', 'google-gemini/gemini-cli')
        self.branch = self.config.get('scripts', 'branch', 'main')
        self.timeout = float(self.config.get('scripts', 'timeout', 30))
        self._client = client

    def script_url(self, script_name: str) -> str:
        """Builds the raw GitHub URL for a script in the repo's scripts/ folder."""
        return (
            f"https://raw.githubusercontent.com/{self.repo}/{self.branch}"
            f"/scripts/{script_name}"
        )

    def fetch(self, script_name: str) -> Path:
        """Downloads a script (and its helper module) into the cache.

        Args:
            script_name: File name under scripts/ in the repository

        Returns:
            Path to the downloaded, executable script

        Raises:
            FetchError: If the download or the cache write fails
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        script_path = self._download(script_name)

        if script_name in SCRIPTS_NEEDING_UTILS:
            utils_path = self._download(UTILS_SCRIPT)
            self.patch_project_root(utils_path)

        return script_path

    def _download(self, script_name: str) -> Path:
        url = self.script_url(script_name)
        target = self.cache_dir / script_name

        print(f"📥 Downloading {script_name} from GitHub...")
        logger.debug(f"GET {url}")

        try:
            if self._client is not None:
                response = self._client.get(url)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(script_name, f"HTTP {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(script_name, str(e)) from e

        try:
            target.write_bytes(response.content)
            target.chmod(0o755)
        except OSError as e:
            raise FetchError(script_name, f"cannot write {target}: {e}") from e

        logger.info(f"Downloaded {script_name} to {target}")
        return target

    def patch_project_root(self, utils_path: Path) -> bool:
        """Points telemetry_utils.js at the invoking project directory.

        Returns:
            True if the file was rewritten
        """
        try:
            content = utils_path.read_text(encoding='utf-8')
            if PROJECT_ROOT_LINE not in content:
                logger.debug(f"No project root line in {utils_path}, leaving as is")
                return False

            content = content.replace(
                PROJECT_ROOT_LINE,
                f"const projectRoot = {json.dumps(str(self.project_root))};"
            )
            utils_path.write_text(content, encoding='utf-8')
            return True
        except OSError as e:
            print(f"⚠️  Failed to patch {UTILS_SCRIPT}: {e}")
            logger.debug(f"Failed to patch {utils_path}: {e}")
            return False
