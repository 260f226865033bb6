"""Configuration file loading for agent-engine.

This module locates the configuration document and parses it from YAML or
TOML, with support for dotted key lookups.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml
import yaml

from agent_engine.llm.exceptions import ConfigLoadError

DEFAULT_SEARCH_PATHS = (
    Path("conf.yaml"),
    Path("conf.yml"),
    Path("conf.toml"),
    Path("config/conf.yaml"),
    Path("config/config.toml"),
)


class ConfigManager:
    """Configuration manager for agent-engine.

    This class handles loading the configuration document and provides
    dotted-path access to its values with defaults.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to the configuration file. If None, will search
                        for a configuration file in standard locations.

        Raises:
            ConfigLoadError: If the file cannot be found, read or parsed.
        """
        self._config_path = self._find_config_file(config_path)
        self._config_data = self._load_config()

    @property
    def config_path(self) -> str:
        """Get the path to the configuration file as a string."""
        return str(self._config_path)

    def _find_config_file(self, config_path: Optional[Union[str, Path]] = None) -> Path:
        """Find the configuration file.

        Args:
            config_path: Explicit path to config file

        Returns:
            Path to the configuration file

        Raises:
            ConfigLoadError: If configuration file cannot be found
        """
        if config_path:
            path = Path(config_path)
            if path.is_file():
                return path
            raise ConfigLoadError(
                f"Configuration file not found: {config_path}",
                config_path=str(config_path),
            )

        for path in DEFAULT_SEARCH_PATHS:
            if path.is_file():
                return path

        raise ConfigLoadError(
            "Configuration file not found. Searched paths: "
            + ", ".join(str(p) for p in DEFAULT_SEARCH_PATHS)
        )

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from a YAML or TOML file.

        Returns:
            Dictionary containing configuration data

        Raises:
            ConfigLoadError: If configuration file is unreadable or invalid
        """
        path = str(self._config_path)
        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                if self._config_path.suffix.lower() == ".toml":
                    data = toml.load(f)
                else:
                    data = yaml.safe_load(f)
        except toml.TomlDecodeError as e:
            raise ConfigLoadError(f"Invalid TOML configuration file: {e}", path, e)
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML configuration file: {e}", path, e)
        except UnicodeDecodeError as e:
            raise ConfigLoadError(f"Configuration file is not valid UTF-8: {e}", path, e)
        except OSError as e:
            raise ConfigLoadError(f"Error reading configuration file: {e}", path, e)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Configuration root must be a mapping, got {type(data).__name__}", path
            )
        return data

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key path.

        Args:
            key_path: Dot-separated path to the configuration key (e.g., 'llm.provider')
            default: Default value if key is not found

        Returns:
            Configuration value or default

        Examples:
            >>> config = ConfigManager("conf.yaml")
            >>> config.get('provider')
            [{'name': 'deepseek', ...}]
            >>> config.get('llm.provider', default=[])
            []
        """
        current: Any = self._config_data
        for key in key_path.split('.'):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current
