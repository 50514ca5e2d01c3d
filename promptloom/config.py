"""
Builder configuration.

Provides the BuilderConfig dataclass with JSON serialization, validation and
environment variable overrides.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .constants import DEFAULT_MODEL, DEFAULT_OVERRIDE_DIR, ENV_MODEL, ENV_OVERRIDE_PATH, ENV_OVERRIDES
from .formatter import FormatOptions, validate_format_options
from .items.parameters import Parameters, validate_parameters


class ConfigError(Exception):
    """Raised when configuration parsing or validation fails."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column

        if line is not None and column is not None:
            full_message = f"{message} (line {line}, column {column})"
        elif line is not None:
            full_message = f"{message} (line {line})"
        else:
            full_message = message

        super().__init__(full_message)


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class BuilderConfig:
    """Configuration for assembling and rendering a prompt.

    Attributes:
        base_path: Directory that built-in prompt paths are relative to.
        override_path: Directory searched for override files.
        overrides: Whether full override files may replace built-in content.
        model: Target chat model.
        parameters: Placeholder values applied to every parsed file.
        format: Rendering options.

    Example:
        config = BuilderConfig(
            base_path="./prompts",
            parameters={"product": "Atlas"},
        )
    """
    base_path: str = "."
    override_path: str = DEFAULT_OVERRIDE_DIR
    overrides: bool = False
    model: str = DEFAULT_MODEL
    parameters: Parameters = field(default_factory=dict)
    format: FormatOptions = field(default_factory=FormatOptions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_path": self.base_path,
            "override_path": self.override_path,
            "overrides": self.overrides,
            "model": self.model,
            "parameters": dict(self.parameters),
            "format": self.format.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuilderConfig":
        """Create a BuilderConfig from a validated dictionary."""
        return cls(
            base_path=data.get("base_path", "."),
            override_path=data.get("override_path", DEFAULT_OVERRIDE_DIR),
            overrides=data.get("overrides", False),
            model=data.get("model", DEFAULT_MODEL),
            parameters=dict(data.get("parameters") or {}),
            format=FormatOptions.from_dict(data.get("format") or {}),
        )

    def with_environment(self, environ: Optional[dict[str, str]] = None) -> "BuilderConfig":
        """Return a copy with environment variable overrides applied.

        Reads PROMPTLOOM_OVERRIDES, PROMPTLOOM_OVERRIDE_PATH and PROMPTLOOM_MODEL.
        """
        environ = os.environ if environ is None else environ
        data = self.to_dict()

        overrides = environ.get(ENV_OVERRIDES, "").strip().lower()
        if overrides:
            data["overrides"] = overrides in TRUE_VALUES
        if environ.get(ENV_OVERRIDE_PATH):
            data["override_path"] = environ[ENV_OVERRIDE_PATH]
        if environ.get(ENV_MODEL):
            data["model"] = environ[ENV_MODEL]

        return BuilderConfig.from_dict(data)


def validate_config(data: Any) -> tuple[bool, list[str]]:
    """Validate a builder configuration dictionary.

    Args:
        data: Dictionary containing configuration to validate.

    Returns:
        A tuple of (is_valid, errors).
    """
    if not isinstance(data, dict):
        return False, ["Configuration must be a dictionary"]

    errors: list[str] = []

    for name in ("base_path", "override_path", "model"):
        if name in data and not isinstance(data[name], str):
            errors.append(f"Field '{name}' must be a string")

    if "overrides" in data and not isinstance(data["overrides"], bool):
        errors.append("Field 'overrides' must be a boolean")

    if data.get("parameters") is not None:
        _, parameter_errors = validate_parameters(data["parameters"])
        errors.extend(parameter_errors)

    if data.get("format") is not None:
        _, format_errors = validate_format_options(data["format"])
        errors.extend(format_errors)

    unknown = set(data) - {"base_path", "override_path", "overrides", "model", "parameters", "format"}
    if unknown:
        errors.append(f"Unknown fields: {', '.join(sorted(unknown))}")

    return len(errors) == 0, errors


def export_config(config: BuilderConfig) -> str:
    """Serialize a BuilderConfig to a JSON string."""
    return json.dumps(config.to_dict(), indent=2)


def import_config(json_str: str) -> BuilderConfig:
    """Deserialize a BuilderConfig from a JSON string.

    Raises:
        ConfigError: If the JSON is malformed or validation fails.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON: {e.msg}",
            line=e.lineno,
            column=e.colno,
        )

    is_valid, errors = validate_config(data)
    if not is_valid:
        raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    return BuilderConfig.from_dict(data)


def load_config(path: Union[str, Path]) -> BuilderConfig:
    """Read a BuilderConfig from a JSON file.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    try:
        json_str = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}")
    return import_config(json_str)
