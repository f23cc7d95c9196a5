"""User configuration for cleanrec.

Defaults for the command-line options can be set in a TOML file::

    depth = 16
    skips = [".git", "node_modules"]
    io_error_handling = "raise-all"
    jobs = 4
    timeout = 600

Command-line options always win over the file.
"""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cleanrec.core.collector import DEFAULT_JOBS
from cleanrec.core.errors import ConfigError
from cleanrec.core.paths import get_config_path
from cleanrec.core.policy import IoErrorHandling
from cleanrec.core.walker import DEFAULT_DEPTH

logger = logging.getLogger(__name__)


class CleanConfig(BaseModel):
    """Run defaults loaded from the configuration file.

    Attributes:
        depth: Depth budget for the walk.
        skips: Directory names to prune. None keeps the built-in skip set.
        io_error_handling: I/O error tolerance policy.
        jobs: Maximum number of executions waited on concurrently.
        timeout: Per-execution wait limit in seconds, None for no limit.
    """

    model_config = ConfigDict(extra="forbid")

    depth: int = Field(default=DEFAULT_DEPTH, ge=0)
    skips: list[str] | None = None
    io_error_handling: IoErrorHandling = IoErrorHandling.RAISE_UNEXPECTED
    jobs: int = Field(default=DEFAULT_JOBS, ge=1)
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("skips")
    @classmethod
    def validate_skips(cls, v: list[str] | None) -> list[str] | None:
        """Validate that skip entries are plain directory names."""
        if v is None:
            return None
        names: list[str] = []
        for raw in v:
            name = raw.strip()
            if not name:
                msg = "skip names cannot be empty"
                raise ValueError(msg)
            if "/" in name:
                msg = f"skip names must be directory names, not paths: '{name}'"
                raise ValueError(msg)
            names.append(name)
        return names


def load_config(path: Path | None = None) -> CleanConfig:
    """Load the configuration file.

    Args:
        path: Explicit configuration file. If None, the XDG config path is
            used and a missing file simply yields the defaults.

    Returns:
        Validated CleanConfig.

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or holds
            invalid values. Also raised when an explicit path does not exist.
    """
    explicit = path is not None
    config_path = path if path is not None else get_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        if explicit:
            msg = f"configuration file {config_path} not found"
            raise ConfigError(msg) from e
        logger.debug("No configuration file at %s, using defaults", config_path)
        return CleanConfig()
    except tomllib.TOMLDecodeError as e:
        msg = f"failed to parse {config_path}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"failed to read {config_path}"
        raise ConfigError(msg) from e

    try:
        config = CleanConfig(**data)
    except ValidationError as e:
        msg = f"invalid configuration in {config_path}"
        raise ConfigError(msg) from e

    logger.debug("Loaded configuration from %s", config_path)
    return config
