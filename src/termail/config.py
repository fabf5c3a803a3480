# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating termail configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/termail/  (default: ~/.config/termail/)
#   - State:   $XDG_STATE_HOME/termail/   (default: ~/.local/state/termail/)
#
# Files:
#   - config.toml: User configuration (mail directory, scan depth, UI)
#   - termail.log: Log file (in state directory)
#
# A default config.toml is written on first start so users have a file to
# edit. The mail directory given on the command line overrides the file
# but is never written back.
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from termail.storage.tree import DEFAULT_SCAN_DEPTH


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "termail"

# Default maildir root (the usual target of mbsync/offlineimap setups)
DEFAULT_MAIL_DIR = "~/.local/share/mail"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for termail.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/termail/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def get_xdg_state_home() -> Path:
    """
    Returns the XDG state directory for termail.

    Respects $XDG_STATE_HOME if set, otherwise uses ~/.local/state/termail/
    This is where the log file lives.
    """
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        base = Path(xdg_state)
    else:
        base = Path.home() / ".local" / "state"
    return base / APP_NAME


def ensure_config_dir() -> Path:
    """
    Create the config directory if it doesn't exist.

    Raises:
        ConfigResolutionError: If the directory can't be created.
    """
    config_dir = get_xdg_config_home()
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigResolutionError(
            f"Cannot create config directory {config_dir}: {e}"
        ) from e
    return config_dir


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class UIConfig:
    """
    Configuration for the user interface.

    Attributes:
        date_format: strftime format of the mail list "Time" column.
        tick_interval: Seconds between two ticks of the input loop.
        prefer_plain_text: Show the plain-text alternative of a message
                           that also has an HTML one.
    """
    date_format: str = "%y-%m-%d %H:%M"
    tick_interval: float = 0.02
    prefer_plain_text: bool = True


@dataclass
class Config:
    """
    Main configuration container for termail.

    Attributes:
        mail_dir: Root of the maildir tree ("~" allowed).
        mail_dir_from_cli: Root given on the command line. Takes precedence
                           over mail_dir and is never saved.
        scan_depth: Directory levels scanned below the mail root.
        ui: User interface configuration.

    Usage:
        >>> config = Config.load()
        >>> config.effective_mail_dir()
        PosixPath('/home/user/.local/share/mail')
    """
    mail_dir: str = DEFAULT_MAIL_DIR
    mail_dir_from_cli: str | None = None
    scan_depth: int = DEFAULT_SCAN_DEPTH

    ui: UIConfig = field(default_factory=UIConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def log_file_path() -> Path:
        """Returns the path to the log file."""
        return get_xdg_state_home() / "termail.log"

    def effective_mail_dir(self) -> Path:
        """The mail root to scan: command line first, then config file."""
        mail_dir = self.mail_dir_from_cli or self.mail_dir
        return Path(mail_dir).expanduser()

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, a default one is written first.

        Returns:
            Loaded Config object.

        Raises:
            ConfigResolutionError: If the config location isn't writable.
            ConfigError: If the config file exists but is invalid.
        """
        ensure_config_dir()

        config_path = cls.config_file_path()

        if not config_path.exists():
            config = cls()
            config.save()
            return config

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        return cls._from_dict(data)

    def save(self) -> None:
        """
        Save configuration to the config file.

        Raises:
            ConfigResolutionError: If the file can't be written.
        """
        ensure_config_dir()

        config_path = self.config_file_path()
        data = self._to_dict()

        try:
            with open(config_path, "wb") as f:
                tomli_w.dump(data, f)
        except OSError as e:
            raise ConfigResolutionError(
                f"Cannot write config file {config_path}: {e}"
            ) from e

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).
        """
        config = cls()

        # General settings
        general = data.get("general", {})
        config.mail_dir = general.get("mail_dir", DEFAULT_MAIL_DIR)
        config.scan_depth = general.get("scan_depth", DEFAULT_SCAN_DEPTH)

        if not isinstance(config.mail_dir, str):
            raise ConfigError("general.mail_dir must be a string")
        if not isinstance(config.scan_depth, int) or config.scan_depth < 0:
            raise ConfigError("general.scan_depth must be a non-negative integer")

        # UI settings
        ui = data.get("ui", {})
        config.ui = UIConfig(
            date_format=ui.get("date_format", "%y-%m-%d %H:%M"),
            tick_interval=ui.get("tick_interval", 0.02),
            prefer_plain_text=ui.get("prefer_plain_text", True),
        )

        if not isinstance(config.ui.date_format, str):
            raise ConfigError("ui.date_format must be a string")
        tick_interval = config.ui.tick_interval
        if (
            isinstance(tick_interval, bool)
            or not isinstance(tick_interval, (int, float))
            or tick_interval <= 0
        ):
            raise ConfigError("ui.tick_interval must be a positive number")
        if not isinstance(config.ui.prefer_plain_text, bool):
            raise ConfigError("ui.prefer_plain_text must be true or false")

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.

        mail_dir_from_cli is never written.
        """
        data: dict[str, Any] = {}

        data["general"] = {
            "mail_dir": self.mail_dir,
            "scan_depth": self.scan_depth,
        }

        data["ui"] = {
            "date_format": self.ui.date_format,
            "tick_interval": self.ui.tick_interval,
            "prefer_plain_text": self.ui.prefer_plain_text,
        }

        return data


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


class ConfigResolutionError(ConfigError):
    """Raised when no writable configuration location can be determined."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print all XDG paths for debugging.
    Useful for users wondering where their config is stored.
    """
    print(f"Config:  {get_xdg_config_home()}")
    print(f"State:   {get_xdg_state_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Log file:     {Config.log_file_path()}")
