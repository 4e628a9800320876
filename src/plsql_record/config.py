"""
Database Configuration

Loads connection parameters from a YAML file or the environment.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from plsql_record.exceptions import ConfigError

logger = logging.getLogger("plsql_record.config")

DEFAULT_DSN = "localhost/orclpdb1"

CONFIG_ENV_VAR = "PLSQL_RECORD_CONFIG"

TRUE_VALUES = ("1", "true", "yes")

# Default config locations
DEFAULT_CONFIG_PATHS = [
    Path.home() / ".plsql_record" / "config.yaml",
    Path("plsql_record.yaml"),
]


@dataclass
class DatabaseConfig:
    """Oracle connection configuration."""
    user: Optional[str] = None
    password: Optional[str] = None
    dsn: str = DEFAULT_DSN
    external_auth: bool = False
    lib_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatabaseConfig":
        """
        Create config from dictionary.

        Values missing from the dictionary fall back to the
        PLSQL_RECORD_* environment variables.

        Args:
            data: Configuration dictionary, either the "database"
                section or a dictionary containing one

        Returns:
            DatabaseConfig instance
        """
        section = data.get("database", data)
        if not isinstance(section, dict):
            raise ConfigError("'database' section must be a mapping")

        env = cls.from_env()
        external_auth = section.get("external_auth")
        if external_auth is None:
            external_auth = env.external_auth
        else:
            external_auth = _parse_flag("external_auth", external_auth)

        return cls(
            user=section.get("user") or env.user,
            password=section.get("password") or env.password,
            dsn=section.get("dsn") or env.dsn,
            external_auth=external_auth,
            lib_dir=_expand_path(section.get("lib_dir")) or env.lib_dir,
        )

    @classmethod
    def from_file(cls, path: Path) -> "DatabaseConfig":
        """
        Load config from YAML file.

        Args:
            path: Path to config file

        Returns:
            DatabaseConfig instance
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from PLSQL_RECORD_* environment variables."""
        return cls(
            user=os.environ.get("PLSQL_RECORD_USER"),
            password=os.environ.get("PLSQL_RECORD_PASSWORD"),
            dsn=os.environ.get("PLSQL_RECORD_DSN", DEFAULT_DSN),
            external_auth=_env_flag("PLSQL_RECORD_EXTERNAL_AUTH"),
            lib_dir=_expand_path(os.environ.get("PLSQL_RECORD_LIB_DIR")),
        )

    @classmethod
    def find_and_load(cls) -> "DatabaseConfig":
        """
        Find and load config.

        Checks $PLSQL_RECORD_CONFIG first, then the default locations,
        and falls back to the environment alone.

        Returns:
            DatabaseConfig instance
        """
        explicit = os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            return cls.from_file(Path(explicit))

        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path)

        logger.debug("No config file found, using environment")
        return cls.from_env()

    def connect_params(self) -> Dict[str, Any]:
        """
        Keyword arguments for oracledb.connect().

        Raises:
            ConfigError: If credentials are missing without external auth
        """
        if self.external_auth:
            return {"dsn": self.dsn, "externalauth": True}

        if not self.user or not self.password:
            raise ConfigError(
                "Database user and password not configured. "
                "Set PLSQL_RECORD_USER and PLSQL_RECORD_PASSWORD."
            )
        return {"user": self.user, "password": self.password, "dsn": self.dsn}

    def __repr__(self) -> str:
        # Keep the password out of logs
        return (
            f"DatabaseConfig(user={self.user!r}, dsn={self.dsn!r}, "
            f"external_auth={self.external_auth}, lib_dir={self.lib_dir!r})"
        )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUE_VALUES


def _parse_flag(name: str, value: Any) -> bool:
    """Boolean config value; strings use the same rule as the environment."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    raise ConfigError(f"'{name}' must be a boolean, got {type(value).__name__}")


def _expand_path(path: Optional[str]) -> Optional[str]:
    """Expand environment variables and ~ in path."""
    if not path:
        return None
    return os.path.expandvars(os.path.expanduser(path))
