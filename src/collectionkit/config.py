"""Configuration management for collectionkit.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from collectionkit.core.context import CollectionContext

CONFIG_FILENAME = "collectionkit.toml"

OUTPUT_FORMATS = ("outline", "json")


@dataclass
class DiagnosticsConfig:
    """Development diagnostics configuration."""

    production: bool = False
    suppress_text_value_warning: bool = False


@dataclass
class OutputConfig:
    """CLI output configuration."""

    format: str = "outline"
    indent: int = 2


@dataclass
class Config:
    """Application configuration."""

    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for collectionkit.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls(
            diagnostics=cls._parse_diagnostics(data.get("diagnostics")),
            output=cls._parse_output(data.get("output")),
            config_path=path,
        )

    @classmethod
    def _parse_diagnostics(cls, data: object) -> DiagnosticsConfig:
        """Parse diagnostics configuration section.

        Args:
            data: Raw diagnostics section data

        Returns:
            DiagnosticsConfig instance
        """
        if data is None:
            return DiagnosticsConfig()

        if not isinstance(data, dict):
            raise ValueError("diagnostics section must be a dictionary")

        production = data.get("production", False)
        if not isinstance(production, bool):
            raise ValueError("diagnostics.production must be a boolean")

        suppress = data.get("suppress_text_value_warning", False)
        if not isinstance(suppress, bool):
            raise ValueError("diagnostics.suppress_text_value_warning must be a boolean")

        return DiagnosticsConfig(production=production, suppress_text_value_warning=suppress)

    @classmethod
    def _parse_output(cls, data: object) -> OutputConfig:
        """Parse output configuration section."""
        if data is None:
            return OutputConfig()

        if not isinstance(data, dict):
            raise ValueError("output section must be a dictionary")

        fmt = data.get("format", "outline")
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"output.format must be one of: {', '.join(OUTPUT_FORMATS)}")

        indent = data.get("indent", 2)
        if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
            raise ValueError("output.indent must be a non-negative integer")

        return OutputConfig(format=fmt, indent=indent)

    def with_overrides(
        self,
        *,
        production: bool | None = None,
        suppress_text_value_warning: bool | None = None,
        output_format: str | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            production: Override diagnostics.production
            suppress_text_value_warning: Override diagnostics.suppress_text_value_warning
            output_format: Override output.format

        Returns:
            New Config instance with overrides applied
        """
        diagnostics = self.diagnostics
        if production is not None or suppress_text_value_warning is not None:
            diagnostics = replace(
                self.diagnostics,
                production=production if production is not None else self.diagnostics.production,
                suppress_text_value_warning=(
                    suppress_text_value_warning
                    if suppress_text_value_warning is not None
                    else self.diagnostics.suppress_text_value_warning
                ),
            )

        output = self.output
        if output_format is not None:
            output = replace(self.output, format=output_format)

        return replace(self, diagnostics=diagnostics, output=output)

    def to_context(self) -> CollectionContext:
        """Create the collection context for these diagnostics settings."""
        return CollectionContext(
            suppress_text_value_warning=self.diagnostics.suppress_text_value_warning,
            production=self.diagnostics.production,
        )
