"""Configuration management for otelctl."""

import os
from pathlib import Path
from typing import Any, Dict
import toml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_JAEGER_URL = 'http://localhost:16686'


class Config:
    """otelctl configuration manager."""

    def __init__(self, config_path: str | None = None):
        """Initialize configuration.

        Args:
            config_path: Path to config file. If None, uses default location.
        """
        if config_path is None:
            config_path = self._get_config_path()

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = self._load_config()

    @staticmethod
    def _get_config_path() -> Path:
        """Get config file path with priority order:
        1. Environment variable OTELCTL_CONFIG
        2. Project directory otelctl.toml (for development)
        3. ~/.config/otelctl/otelctl.toml (default)
        """
        env_config = os.getenv('OTELCTL_CONFIG')
        if env_config and Path(env_config).exists():
            return Path(env_config)

        project_root = Path(__file__).parent.parent
        dev_config = project_root / 'otelctl.toml'
        if dev_config.exists():
            return dev_config

        config_home = os.getenv('XDG_CONFIG_HOME', str(Path.home() / '.config'))
        return Path(config_home) / 'otelctl' / 'otelctl.toml'

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file, layered over the defaults."""
        config = self._get_default_config()

        if not self.config_path.exists():
            return config

        try:
            loaded = toml.load(self.config_path)
        except (toml.TomlDecodeError, OSError) as e:
            print(f"Warning: Failed to load config from {self.config_path}: {e}")
            return config

        for section, values in loaded.items():
            if isinstance(values, dict):
                config.setdefault(section, {}).update(values)
        return config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default configuration."""
        return {
            'general': {
                'state_dir': str(Path.home() / '.gemini' / 'tmp'),
                'log_level': 'WARNING',
            },
            'scripts': {
                'repo': 'google-gemini/gemini-cli',
                'branch': 'main',
                'timeout': 30,
            },
            'collectors': {
                'node_bin': 'node',
                'stop_timeout': 0,
                'jaeger_url': DEFAULT_JAEGER_URL,
            },
        }

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            section: Configuration section name
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value
        """
        return self._config.get(section, {}).get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section."""
        return self._config.get(section, {})

    @property
    def state_dir(self) -> Path:
        """Per-user directory holding PID files, logs and cached scripts."""
        return Path(self.get('general', 'state_dir')).expanduser()

    @property
    def pid_dir(self) -> Path:
        return self.state_dir / 'telemetry-pids'

    @property
    def scripts_dir(self) -> Path:
        return self.state_dir / 'telemetry-scripts'


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config(config: Config | None = None):
    """Replace (or drop) the global configuration instance."""
    global _config
    _config = config
