"""
Configuration management for mapfs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/mapfs/config.json
- Fallback: ~/.mapfs/config.json
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class ShellConfig:
    """Interactive shell settings."""
    prompt: str = "mapfs"
    history_file: Optional[str] = None
    color: bool = True
    show_banner: bool = True


@dataclass
class StorageConfig:
    """Persistence settings."""
    default_format: str = "edn"
    json_indent: int = 2


@dataclass
class MapFSConfig:
    """Main mapfs configuration."""
    shell: ShellConfig = field(default_factory=ShellConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "shell": asdict(self.shell),
            "storage": asdict(self.storage),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MapFSConfig':
        """Create from dictionary."""
        shell_data = data.get("shell", {})
        storage_data = data.get("storage", {})
        return cls(
            shell=ShellConfig(**shell_data),
            storage=StorageConfig(**storage_data),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/mapfs/config.json
    2. Fallback: ~/.mapfs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "mapfs"
    else:
        config_dir = Path.home() / ".mapfs"

    return config_dir / "config.json"


def get_history_path(config: MapFSConfig) -> Path:
    """Shell history file, next to the config file unless configured."""
    if config.shell.history_file:
        return Path(config.shell.history_file).expanduser()
    return get_config_path().parent / "history"


def load_config() -> MapFSConfig:
    """
    Load configuration from file.

    Returns:
        MapFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return MapFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return MapFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return MapFSConfig()


def save_config(config: MapFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.debug(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(MapFSConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    # Shell settings
    shell_prompt: Optional[str] = None,
    shell_history_file: Optional[str] = None,
    shell_color: Optional[bool] = None,
    shell_show_banner: Optional[bool] = None,
    # Storage settings
    storage_default_format: Optional[str] = None,
    storage_json_indent: Optional[int] = None,
) -> MapFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.
    """
    config = load_config()

    if shell_prompt is not None:
        config.shell.prompt = shell_prompt
    if shell_history_file is not None:
        config.shell.history_file = shell_history_file
    if shell_color is not None:
        config.shell.color = shell_color
    if shell_show_banner is not None:
        config.shell.show_banner = shell_show_banner

    if storage_default_format is not None:
        config.storage.default_format = storage_default_format
    if storage_json_indent is not None:
        config.storage.json_indent = storage_json_indent

    save_config(config)
    return config
