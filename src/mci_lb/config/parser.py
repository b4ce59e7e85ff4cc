"""YAML configuration loader for the mci-lb tool."""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .models import MCIConfig

DEFAULT_CONFIG_PATH = "mci.yaml"


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, errors: Optional[List[Dict]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)

    def __str__(self) -> str:
        """Format validation errors for display."""
        if not self.errors:
            return self.message

        error_lines = [self.message, ""]
        for error in self.errors:
            location = " -> ".join(str(loc) for loc in error.get("loc", []))
            msg = error.get("msg", "Unknown error")
            error_lines.append(f"  • {location}: {msg}")

        return "\n".join(error_lines)


def parse_config(data: Dict) -> MCIConfig:
    """Validate a configuration mapping.

    Raises:
        ConfigValidationError: If the mapping does not match the schema
    """
    try:
        return MCIConfig.model_validate(data)
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        raise ConfigValidationError(
            f"Configuration validation failed with {len(errors)} error(s)", errors
        )


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> MCIConfig:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated configuration

    Raises:
        ConfigValidationError: If configuration is invalid
        FileNotFoundError: If configuration file doesn't exist
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Failed to parse YAML: {e}")

    if not isinstance(data, dict):
        raise ConfigValidationError("Configuration root must be a mapping")

    return parse_config(data)
