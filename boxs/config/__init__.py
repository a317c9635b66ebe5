"""Simple YAML configuration loader for boxs."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.boxs/config.yaml")

DEFAULT_CONFIG: Dict[str, Any] = {
    "recording": {
        "output_directory": "~/.boxs/recordings",
        "idle_time_limit": 60,
        "stop_grace_seconds": 5.0,
        "backends": ["asciinema", "script"],
    },
    "logging": {
        "level": "INFO",
        "file_path": "~/.boxs/logs/boxs.log",
        "console_output": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class BoxsConfig:
    """boxs configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, ~/.boxs/config.yaml
                        is used when it exists, otherwise built-in defaults.
        """
        if config_path is not None:
            self.config_file: Optional[Path] = Path(config_path).expanduser()
            if not self.config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
        else:
            default_file = DEFAULT_CONFIG_PATH.expanduser()
            self.config_file = default_file if default_file.exists() else None

        if self.config_file is not None:
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = _merge(DEFAULT_CONFIG, self._load_config())
        else:
            logger.debug("No configuration file found, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping")

        self._resolve_paths(config)
        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        if 'recording' in config and 'output_directory' in config['recording']:
            output_dir = os.path.expanduser(str(config['recording']['output_directory']))
            if not os.path.isabs(output_dir):
                output_dir = str(config_dir / output_dir)
            config['recording']['output_directory'] = output_dir

        if 'logging' in config and 'file_path' in config['logging']:
            log_path = os.path.expanduser(str(config['logging']['file_path']))
            if not os.path.isabs(log_path):
                log_path = str(config_dir / log_path)
            config['logging']['file_path'] = log_path

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'recording.idle_time_limit').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'recording.backends')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_recording_directory(self) -> str:
        """Get the directory new recordings are written to."""
        output_dir = self.get('recording.output_directory', '~/.boxs/recordings')
        return str(Path(output_dir).expanduser().absolute())

    def get_idle_time_limit(self) -> int:
        """Get the idle limit (seconds) passed to the capture backend."""
        return int(self.get('recording.idle_time_limit', 60))

    def get_stop_grace_seconds(self) -> float:
        """Get how long a stopping backend may take before it is killed."""
        grace = float(self.get('recording.stop_grace_seconds', 5.0))
        if grace <= 0:
            raise ValueError(f"recording.stop_grace_seconds must be positive, got {grace}")
        return grace

    def get_backend_names(self) -> List[str]:
        """Get capture backends in fallback order."""
        names = self.get('recording.backends', ["asciinema", "script"])
        if isinstance(names, str):
            names = [names]
        return [str(name) for name in names]

    def get_log_file(self) -> Path:
        """Get the log file path."""
        return Path(self.get('logging.file_path', '~/.boxs/logs/boxs.log')).expanduser()

    def get_log_level(self) -> int:
        """Get the root log level, e.g. ``logging.INFO``."""
        name = str(self.get('logging.level', 'INFO')).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging.level: {name}")
        return level
