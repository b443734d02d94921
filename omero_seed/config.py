"""Configuration for the OMERO seeding run."""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict, fields

import yaml

from .errors import SeedError


@dataclass
class SeedConfig:
    """Configuration for seeding an OMERO server running under docker compose."""

    # Docker compose settings
    compose_file: str = ".omero/docker-compose.yml"
    service: str = "omero"

    # OMERO CLI inside the container
    omero_bin: str = "/opt/omero/server/OMERO.server/bin/omero"
    host: str = "localhost"
    port: int = 4064  # SSL port inside the container
    username: str = "root"
    password: str = "omero"

    # Data mounted into the container
    repo_dir: str = "/repo"
    img_dir: Optional[str] = None  # defaults to <repo_dir>/img

    # Readiness poll
    ready_attempts: int = 180
    ready_interval: int = 2  # seconds between attempts
    log_tail: int = 25

    # Logging
    log_level: str = "info"

    # Optional remote docker host
    ssh_host: Optional[str] = None
    ssh_user: str = "root"
    ssh_key_file: Optional[str] = None
    ssh_workdir: Optional[str] = None

    def __post_init__(self):
        if not self.img_dir:
            self.img_dir = f"{self.repo_dir.rstrip('/')}/img"

    @staticmethod
    def read_file(path: Path) -> Dict[str, Any]:
        """Read settings from a JSON or YAML file.

        Args:
            path: Path to config file

        Returns:
            Dictionary of the settings the file contains

        Raises:
            SeedError: If the file cannot be read or parsed
        """
        try:
            with open(path) as f:
                if Path(path).suffix in (".yml", ".yaml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise SeedError(f"Cannot read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise SeedError(f"Config file {path} must hold a mapping of settings")
        return data

    @classmethod
    def from_file(cls, path: Path) -> "SeedConfig":
        """Load configuration from a JSON or YAML file.

        Settings the file leaves out keep their defaults.
        """
        config = cls()
        config.update(cls.read_file(path))
        return config

    @classmethod
    def from_env(cls) -> "SeedConfig":
        """Load configuration from environment variables.

        ``OMERO_USER`` and ``OMERO_PASS`` set the credentials. Every other
        field can be set with an ``OMERO_SEED_`` prefixed variable, e.g.
        ``OMERO_SEED_COMPOSE_FILE``.

        Returns:
            SeedConfig instance

        Raises:
            SeedError: If a variable does not convert to the field's type
        """
        config = cls()

        env_map = {"OMERO_USER": "username", "OMERO_PASS": "password"}
        for f in fields(cls):
            env_map[f"OMERO_SEED_{f.name.upper()}"] = f.name

        # img_dir follows repo_dir unless set explicitly
        img_dir_set = False
        for env_var, field in env_map.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            setattr(config, field, config._convert(env_var, field, value))
            if field == "img_dir":
                img_dir_set = True

        if not img_dir_set:
            config.img_dir = f"{config.repo_dir.rstrip('/')}/img"

        return config

    def _convert(self, source: str, field: str, value: Any) -> Any:
        # Convert to the type of the field's current value
        field_type = type(getattr(self, field))
        try:
            if field_type == bool and isinstance(value, str):
                return value.lower() in ("true", "1", "yes")
            if field_type == int:
                return int(value)
        except (TypeError, ValueError):
            raise SeedError(
                f"Invalid value for {source}: {value!r} is not an integer"
            ) from None
        return value

    def update(self, data: Dict[str, Any]):
        """Apply the settings in ``data`` on top of the current ones.

        ``img_dir`` is re-derived from ``repo_dir`` when only the latter is
        given and the environment does not pin ``img_dir``.

        Raises:
            SeedError: On unknown settings or values of the wrong type
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SeedError(f"Unknown config settings: {', '.join(unknown)}")

        for field, value in data.items():
            setattr(self, field, self._convert(field, field, value))

        if (
            "repo_dir" in data
            and "img_dir" not in data
            and os.getenv("OMERO_SEED_IMG_DIR") is None
        ):
            self.img_dir = f"{self.repo_dir.rstrip('/')}/img"

    def to_dict(self, hide_password: bool = False) -> Dict[str, Any]:
        """Convert config to dictionary.

        Args:
            hide_password: Replace the password with asterisks

        Returns:
            Dictionary representation
        """
        data = asdict(self)
        if hide_password:
            data["password"] = "*" * len(self.password)
        return data


def load_config(config_path: Optional[Path] = None) -> SeedConfig:
    """Load configuration from environment and an optional file.

    Args:
        config_path: Optional path to config file

    Returns:
        SeedConfig instance

    Raises:
        SeedError: If the file or an environment variable is invalid
    """
    # Priority: file > environment > defaults
    config = SeedConfig.from_env()
    if config_path:
        config.update(SeedConfig.read_file(config_path))

    return config
