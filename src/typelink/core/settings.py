"""Settings management for typelink with environment variable override support."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


class TypelinkSettings(BaseModel):
    """Main settings configuration."""

    default_graph_name: str = Field(
        default="process", description="Graph name used by the CLI when --name is not given"
    )
    output_format: str = Field(default="text", description="CLI output format: text or json")
    json_indent: int = Field(default=2, ge=0, description="Indentation for JSON output")

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output_format is valid."""
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {v}. Must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v


class SettingsManager:
    """Loads typelink settings from a JSON file with environment overrides."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or Path.home() / ".typelink" / "settings.json"
        self._settings: Optional[TypelinkSettings] = None

    def load(self) -> TypelinkSettings:
        """Load settings with environment variable overrides."""
        if self._settings is None:
            self._settings = self._load_from_file()
        settings = self._settings.model_copy()
        self._apply_env_overrides(settings)
        return settings

    def _load_from_file(self) -> TypelinkSettings:
        """Load settings from file or return defaults."""
        if not self.settings_path.exists():
            return TypelinkSettings()
        try:
            with open(self.settings_path) as f:
                data = json.load(f)
            return TypelinkSettings(**data)
        except Exception as e:
            # If file is corrupted, use defaults
            logger.warning(f"Failed to load settings from {self.settings_path} ({e}); using defaults")
            return TypelinkSettings()

    def _apply_env_overrides(self, settings: TypelinkSettings) -> None:
        """Apply environment variable overrides."""
        env_name = os.getenv("TYPELINK_DEFAULT_GRAPH_NAME")
        if env_name is not None:
            settings.default_graph_name = env_name

        env_format = os.getenv("TYPELINK_OUTPUT_FORMAT")
        if env_format is not None:
            if env_format.lower() in OUTPUT_FORMATS:
                settings.output_format = env_format.lower()
            else:
                logger.warning(
                    f"Invalid TYPELINK_OUTPUT_FORMAT: {env_format}. Using default: {settings.output_format}"
                )

        env_indent = os.getenv("TYPELINK_JSON_INDENT")
        if env_indent is not None:
            if env_indent.isdigit():
                settings.json_indent = int(env_indent)
            else:
                logger.warning(f"Invalid TYPELINK_JSON_INDENT: {env_indent}. Using default: {settings.json_indent}")


def load_settings(settings_path: Optional[Path] = None) -> TypelinkSettings:
    """Convenience wrapper: load settings from ``settings_path`` (or the default location)."""
    return SettingsManager(settings_path).load()
