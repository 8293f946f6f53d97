"""Configuration management for slidefit deck sessions."""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_dicts(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, overlay taking precedence."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


# Values used when the config file leaves a key out
DEFAULT_CONFIG: Dict[str, Any] = {
    'paths': {
        'output': 'output/deck.pptx',
        'assets_dir': 'assets',
    },
    'settings': {
        'logging': {'level': 'INFO'},
    },
}


class Config:
    """Configuration manager for a deck-building session."""

    def __init__(self, config_path: str = 'config.yaml'):
        """Initialize configuration by loading the YAML config file.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path)
        self._init_from(load_yaml_file(self.config_path), self.config_path.parent)
        logging.debug(f"Loaded config from: {self.config_path}")

    @classmethod
    def from_dict(cls, main_config: Dict[str, Any], config_dir: Optional[Path] = None) -> "Config":
        """Create Config instance from an already loaded dictionary.

        Args:
            main_config: Configuration dictionary
            config_dir: Directory used to resolve a relative project_root
                (defaults to the working directory)

        Returns:
            Configured Config instance
        """
        config_dir = Path(config_dir) if config_dir is not None else Path.cwd()
        config = cls.__new__(cls)
        config.config_path = config_dir / "config.yaml"  # Virtual path
        config._init_from(main_config, config_dir)
        return config

    def _init_from(self, main_config: Dict[str, Any], config_dir: Path) -> None:
        self._config = merge_dicts(DEFAULT_CONFIG, main_config or {})

        # Set up project_root from paths.project_root if present
        paths_config = self._config.get('paths', {})
        if 'project_root' in paths_config:
            self.project_root = (config_dir / paths_config['project_root']).resolve()
        else:
            self.project_root = Path.cwd()

        # Store paths for resolution
        self._paths = paths_config
        self._setup_logging()

    def _resolve_path_value(self, value: str) -> Path:
        """Resolve a path value relative to project_root if not absolute.

        Args:
            value: Path string to resolve

        Returns:
            Resolved Path object
        """
        if not value:
            return Path()
        p = Path(value)
        if not p.is_absolute():
            return self.project_root / p
        return p.resolve()

    def _setup_logging(self):
        """Setup logging based on configuration."""
        log_level = self.get('settings.logging.level', 'INFO')
        numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
        logging.basicConfig(
            level=numeric_level,
            format='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'theme.font_size.text')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_path(self, key: str) -> Path:
        """Get a path from configuration, resolved relative to project_root.

        Args:
            key: Path key in config (e.g., 'output', 'assets_dir')

        Returns:
            Resolved Path object
        """
        path_str = self._paths.get(key)
        if path_str is None:
            raise ValueError(f"Path '{key}' not found in configuration")
        return self._resolve_path_value(path_str)

    @property
    def output_path(self) -> Path:
        """Get output PowerPoint file path."""
        return self.get_path('output')

    @property
    def assets_dir(self) -> Path:
        """Get assets directory path."""
        return self.get_path('assets_dir')
