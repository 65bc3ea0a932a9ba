
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

# Configuration file location
CONFIG_DIR = Path.home() / ".config" / "ytdlp-curses"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Config file key -> ToolPaths field
PATH_KEYS = {
    'yt_dlp_path': 'yt_dlp',
    'ffmpeg_path': 'ffmpeg',
    'deno_path': 'deno',
    'output_dir': 'output_base',
}

DEFAULT_FFMPEG = Path("/usr/bin/ffmpeg")


@dataclass(frozen=True)
class ToolPaths:
    """Locations of the external tools and of the download output root."""

    yt_dlp: Path
    ffmpeg: Path
    deno: Path
    output_base: Path

    @classmethod
    def defaults(cls, home=None):
        """Default locations, relative to the user's home directory."""
        if home is None:
            home = os.environ.get("HOME") or str(Path.home())
        home = Path(home)
        return cls(
            yt_dlp=home / ".local" / "bin" / "yt-dlp",
            ffmpeg=DEFAULT_FFMPEG,
            deno=home / ".deno" / "bin" / "deno",
            output_base=home / "Videos" / "yt-dlp-output",
        )

    def to_config(self):
        """Return the paths as config file entries."""
        return {key: str(getattr(self, field)) for key, field in PATH_KEYS.items()}


def _validate_config(config):
    """
    Validate the configuration structure.

    Args:
        config: Configuration dictionary to validate

    Returns:
        Validated configuration dictionary
    """
    if not isinstance(config, dict):
        logger.warning("Config is not a dictionary, using empty config")
        return {}

    validated = {}
    for key, value in config.items():
        if key in PATH_KEYS and not isinstance(value, str):
            logger.warning(f"Ignoring config key {key}: expected a string, got {type(value).__name__}")
            continue
        validated[key] = value

    logger.debug(f"Configuration validated with {len(validated)} keys")
    return validated


def load_config(config_file=None):
    """
    Load configuration from JSON file.

    Args:
        config_file: Override for the config file path (default: CONFIG_FILE)

    Returns:
        Configuration dictionary (empty dict if not found or invalid)
    """
    config_file = Path(config_file) if config_file else CONFIG_FILE
    logger.debug("Loading configuration...")

    if not config_file.exists():
        logger.debug(f"Config file not found: {config_file}, using defaults")
        return {}

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config file {config_file}: {e}")
        logger.warning("Using default configuration")
        return {}
    except OSError as e:
        logger.error(f"Failed to read config file {config_file}: {e}")
        logger.warning("Using default configuration")
        return {}

    logger.info("Configuration loaded successfully")
    return _validate_config(config_data)


def save_config(config, config_file=None):
    """
    Save configuration to JSON file.

    Args:
        config: Configuration dictionary to save
        config_file: Override for the config file path (default: CONFIG_FILE)

    Raises:
        ConfigurationError: If the configuration cannot be saved
    """
    config_file = Path(config_file) if config_file else CONFIG_FILE
    logger.debug("Saving configuration...")

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create config directory {config_file.parent}: {e}")
        raise ConfigurationError(f"Cannot create config directory: {e}") from e

    try:
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2)
        logger.info(f"Configuration saved successfully to {config_file}")
    except OSError as e:
        logger.error(f"Failed to write config file {config_file}: {e}")
        raise ConfigurationError(f"Cannot write config file: {e}") from e
    except TypeError as e:
        logger.error(f"Invalid config data structure: {e}")
        raise ConfigurationError(f"Invalid config data: {e}") from e


def resolve_paths(config=None, overrides=None, home=None):
    """
    Build the tool paths used for this run.

    Later sources win: built-in defaults, then the config file entries, then
    the overrides (usually command line options). Every path is independent.

    Args:
        config: Dictionary loaded by load_config()
        overrides: Mapping of ToolPaths field name to a path, None entries are skipped
        home: Home directory used for the defaults

    Returns:
        ToolPaths instance
    """
    paths = ToolPaths.defaults(home)
    changes = {}

    for key, field in PATH_KEYS.items():
        value = (config or {}).get(key)
        if value:
            changes[field] = Path(value).expanduser()

    for field, value in (overrides or {}).items():
        if field not in PATH_KEYS.values():
            raise ConfigurationError(f"Unknown path setting: {field}")
        if value:
            changes[field] = Path(value).expanduser()

    if changes:
        logger.debug(f"Path settings overridden: {', '.join(sorted(changes))}")
    return replace(paths, **changes)
