"""
memfs Configuration Loader

Configuration management for the in-memory filesystem:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates

Author: YSNRFD
Version: 1.0.0
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional, List
import threading

from memfs.exceptions import ConfigLoadError, ConfigValidationError
from memfs.logger import LogLevel, get_logger


@dataclass
class FilesystemConfig:
    """Filesystem configuration settings."""
    max_symlink_depth: int = 40  # Linux SYMLOOP_MAX
    standard_directories: List[str] = field(default_factory=lambda: ["/tmp"])
    home_env_var: str = "HOME"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = False
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for memfs.
    """
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = {
    'filesystem': FilesystemConfig,
    'logging': LoggingConfig,
}


def validate_config(config: Config) -> None:
    """
    Check configuration values.

    Raises:
        ConfigValidationError: If any value is out of range
    """
    fs_config = config.filesystem

    if not isinstance(fs_config.max_symlink_depth, int) or fs_config.max_symlink_depth < 1:
        raise ConfigValidationError(
            "max_symlink_depth must be a positive integer",
            key="filesystem.max_symlink_depth"
        )

    for path in fs_config.standard_directories:
        if not isinstance(path, str) or not path.startswith('/'):
            raise ConfigValidationError(
                f"Standard directory must be an absolute path: {path!r}",
                key="filesystem.standard_directories"
            )

    if not fs_config.home_env_var:
        raise ConfigValidationError(
            "home_env_var must not be empty",
            key="filesystem.home_env_var"
        )

    if str(config.logging.level).upper() not in LogLevel.__members__:
        raise ConfigValidationError(
            f"Unknown log level: {config.logging.level}",
            key="logging.level"
        )


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('memfs.json')
        >>> config.filesystem.max_symlink_depth
        40
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
                cls._instance._logger = get_logger('config')
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigLoadError: If the file cannot be loaded or parsed
            ConfigValidationError: If the file contains unknown keys or bad values
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {config_path}",
                config_path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(
                f"Invalid JSON in configuration file: {e}",
                config_path=config_path
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Cannot read configuration file: {e}",
                config_path=config_path
            ) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(
                "Configuration root must be a JSON object",
                config_path=config_path
            )

        config = self._parse_config(data)
        validate_config(config)

        self._config = config
        self._loaded = True
        self._logger.info("Configuration loaded", context={'path': config_path})
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        for section_name, section_data in data.items():
            section_cls = _SECTIONS.get(section_name)
            if section_cls is None:
                raise ConfigValidationError(
                    f"Unknown configuration section: {section_name}",
                    key=section_name
                )
            if not isinstance(section_data, dict):
                raise ConfigValidationError(
                    f"Configuration section must be an object: {section_name}",
                    key=section_name
                )

            known = {f.name for f in fields(section_cls)}
            for key in section_data:
                if key not in known:
                    raise ConfigValidationError(
                        f"Invalid configuration key: {section_name}.{key}",
                        key=f"{section_name}.{key}"
                    )

            current = getattr(config, section_name)
            setattr(config, section_name, replace(current, **section_data))

        return config

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'filesystem.max_symlink_depth')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'filesystem.max_symlink_depth')
            value: Value to set

        Note:
            Changes are not persisted. Filesystems copy their settings at
            construction, so existing instances keep the old values even
            across reset().
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        previous = getattr(obj, final_key)
        setattr(obj, final_key, value)
        try:
            validate_config(self._config)
        except ConfigValidationError:
            setattr(obj, final_key, previous)
            raise

    def reload(self, config_path: str) -> Config:
        """Reload configuration from file."""
        return self.load(config_path)

    def reset(self) -> None:
        """Restore the default configuration."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            else:
                return obj

        return dataclass_to_dict(self._config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
