"""Runtime settings for the linter."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

OUTPUT_FORMATS = ("text", "json", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE_VALUES = ("1", "true", "yes", "on")

# Environment variable -> (section, key)
ENV_VARS = {
    "DEPLOYLINT_BASE_DIR": ("lint", "base_dir"),
    "DEPLOYLINT_FORMAT": ("lint", "output_format"),
    "DEPLOYLINT_STRICT": ("lint", "strict"),
    "DEPLOYLINT_LOG_LEVEL": ("logging", "level"),
    "DEPLOYLINT_LOG_FILE": ("logging", "file"),
    "DEPLOYLINT_JSON_LOGS": ("logging", "json"),
}
_BOOL_KEYS = ("strict", "json")


@dataclass
class LintSettings:
    """Linter settings."""
    base_dir: Optional[str] = None  # Hook paths resolve against the config file's directory
    output_format: str = "text"
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    json_logs: bool = False
    strict: bool = False  # Warnings fail the exit code

    def __post_init__(self):
        self.output_format = self.output_format.lower()
        self.log_level = self.log_level.upper()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format: {self.output_format}. "
                f"Available: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level: {self.log_level}. Available: {', '.join(LOG_LEVELS)}"
            )

    @classmethod
    def from_settings(cls, settings: dict) -> "LintSettings":
        """Create settings from a dictionary with `lint` and `logging` sections."""
        lint_settings = settings.get("lint") or {}
        logging_settings = settings.get("logging") or {}
        return cls(
            base_dir=lint_settings.get("base_dir"),
            output_format=str(lint_settings.get("output_format", "text")),
            strict=bool(lint_settings.get("strict", False)),
            log_level=str(logging_settings.get("level", "WARNING")),
            log_file=logging_settings.get("file"),
            json_logs=bool(logging_settings.get("json", False)),
        )


def load_settings_file(settings_path: str) -> dict:
    """
    Read a YAML settings file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a YAML mapping
    """
    path = Path(settings_path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(path) as f:
            settings = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid settings file {settings_path}: {e}") from e

    if not isinstance(settings, dict):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")
    return settings


def env_settings(environ: Optional[dict] = None) -> dict:
    """Collect DEPLOYLINT_* environment variables into a settings dictionary."""
    env = os.environ if environ is None else environ
    settings: dict = {}
    for name, (section, key) in ENV_VARS.items():
        value = env.get(name)
        if not value:
            continue
        if key in _BOOL_KEYS:
            value = value.lower() in _TRUE_VALUES
        settings.setdefault(section, {})[key] = value
    return settings


def merge_settings(*layers: dict) -> dict:
    """Merge settings dictionaries section by section; later layers win."""
    merged: dict = {}
    for layer in layers:
        for section, values in layer.items():
            if isinstance(values, dict):
                current = merged.get(section)
                merged[section] = {**(current if isinstance(current, dict) else {}), **values}
            else:
                merged[section] = values
    return merged
