#!/usr/bin/env python3

"""dockvault settings."""

from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ValidationError, field_validator
from yaml import YAMLError

from dockvault.utils import load_yaml_file

DEFAULT_ROOT = Path("/var/backups/dockvault")
DEFAULT_HELPER_IMAGE = "ubuntu"
DEFAULT_STOP_TIMEOUT = 10


class Settings(BaseModel):
    root: Path = DEFAULT_ROOT
    helper_image: str = DEFAULT_HELPER_IMAGE
    stop_timeout: int = DEFAULT_STOP_TIMEOUT
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[Path] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_case_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_settings(config_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """Loads settings from an optional YAML file. Keyword arguments which are not None take precedence.

    Args:
        config_file (Optional[Path]): YAML file with any of the Settings fields as top-level keys. Defaults to None.

    Raises:
        RuntimeError: If the file cannot be loaded or contains invalid values.

    Returns:
        Settings: Settings instance.
    """
    values: Dict[str, Any] = {}

    if config_file is not None:
        try:
            content = load_yaml_file(config_file)
        except (FileNotFoundError, YAMLError) as error:
            raise RuntimeError(f"Failed to load settings from '{config_file}': {error}") from error

        if not isinstance(content, dict):
            raise RuntimeError(f"Failed to load settings: '{config_file}' does not contain a mapping.")
        values.update(content)

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as error:
        source = f" in '{config_file}'" if config_file is not None else ""
        raise RuntimeError(f"Invalid settings{source}: {error}") from error
