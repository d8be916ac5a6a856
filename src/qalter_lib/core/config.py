# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for qalter.

This module defines dataclasses representing all configurable aspects of qalter,
including environment variable names, exit codes, server error codes,
channel settings, and global defaults.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by qalter."""

    # Enables qalter debug mode.
    debug_mode: str = "QALTER_DEBUG"
    # Path to an explicit qalter config file.
    config: str = "QALTER_CONFIG"
    # Name of the channel (server backend) to use.
    channel: str = "QALTER_CHANNEL"
    # Path to a YAML file describing the virtual servers.
    virtual_state: str = "QALTER_VIRTUAL_STATE"
    # Default server name honored by PBS client commands.
    pbs_default: str = "PBS_DEFAULT"
    # Server name set in the PBS environment.
    pbs_server: str = "PBS_SERVER"
    # Path to the PBS configuration file.
    pbs_conf_file: str = "PBS_CONF_FILE"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Returned on invalid options, missing job identifiers or a rejected option value.
    usage: int = 2
    # Recorded for a job identifier that cannot be parsed.
    bad_identifier: int = 2
    # Returned when a failure code cannot be represented as a process exit status.
    default: int = 1
    # Returned when the security library cannot be initialized.
    security: int = 1
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class ErrorCodes:
    """Error codes reported by the batch server."""

    # Job identifier is not known to the server.
    unknown_job_id: int = 15001
    # Attribute value is not valid.
    bad_attribute_value: int = 15014
    # Generic system error, used when the server does not report a code.
    system: int = 15010
    # Job size exceeds a server or queue limit.
    job_too_large: int = 15163


@dataclass
class PBSOptions:
    """Options associated with the PBS channel."""

    # Name or path of the PBS client library.
    library: str = "libpbs.so"
    # Location of the PBS configuration file if not overridden by the environment.
    conf_file: str = "/etc/pbs.conf"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by qalter.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class Config:
    """Main configuration for qalter."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)
    error_codes: ErrorCodes = field(default_factory=ErrorCodes)
    pbs_options: PBSOptions = field(default_factory=PBSOptions)
    date_formats: DateFormats = field(default_factory=DateFormats)

    # Name of the qalter binary.
    binary_name: str = "qalter"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Build the configuration from a TOML file.

        Values missing from the file keep their defaults.

        Args:
            config_path (Path | None): File to read. If None, the first file
                found by `_get_config_path` is used.

        Returns:
            Config: The loaded configuration, or the defaults if there is no file.

        Raises:
            ValueError: If the file cannot be read or is not valid TOML.
        """
        path = config_path or cls._get_config_path()
        if path is None or not path.exists():
            return cls()

        try:
            data = tomllib.loads(path.read_text())
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise ValueError(f"Could not read qalter config '{path}': {e}.") from e

        return _dict_to_dataclass(cls, data)

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Return the first existing configuration file, or None.

        The file named by `QALTER_CONFIG` takes precedence over
        `qalter_config.toml` in the working directory, which takes precedence
        over `qalter/config.toml` in the XDG config directory.
        """
        xdg_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
        candidates = [
            os.environ.get(EnvironmentVariables.config),
            Path.cwd() / "qalter_config.toml",
            xdg_home / "qalter" / "config.toml",
        ]

        return next((Path(c) for c in candidates if c and Path(c).is_file()), None)


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Create an instance of the dataclass `cls` from `data`,
    recursing into nested dataclasses. Unknown keys are ignored.
    """
    if not is_dataclass(cls):
        return data

    values = {}
    for f in fields(cls):
        if f.name not in data:
            continue

        value = data[f.name]
        values[f.name] = (
            _dict_to_dataclass(f.type, value) if isinstance(value, dict) else value
        )

    return cls(**values)


# Global configuration for qalter.
CFG = Config.load()
