"""Configuration management for suitest."""

import json
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from suitest.core.discovery import DEFAULT_EXCLUDES, DEFAULT_INCLUDES

CONFIG_NAMES = ["suitest.json", ".suitest.json"]

_PLUGIN_PATH = re.compile(r"^[\w.]+:[\w.]+$")


class ReportConfig(BaseModel):
    """HTML report configuration."""

    enabled: bool = Field(default=False, description="Write an HTML report after the run")
    output_dir: str = Field(default="./reports", description="Directory for report output")
    filename: str = Field(default="suitest_report.html", description="Report filename")
    title: str = Field(default="Test Results", description="Report title")


class RunnerConfig(BaseModel):
    """Main configuration for a suitest run."""

    root_dir: Optional[str] = Field(
        default=None, description="Directory to search for test files (default: cwd)"
    )
    includes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDES),
        description="Glob patterns of test files",
    )
    excludes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDES),
        description="Glob patterns of paths to ignore",
    )
    name_filters: list[str] = Field(
        default_factory=list, description="Only run files whose path contains one of these"
    )
    update_snapshot: bool = Field(default=False, description="Forwarded to assertion plugins")
    plugins: list[str] = Field(
        default_factory=list,
        description="Assertion plugin factories as 'module:attribute'",
    )
    report: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("includes")
    @classmethod
    def validate_includes(cls, v: list[str]) -> list[str]:
        if not v or not all(p.strip() for p in v):
            raise ValueError("At least one non-empty include pattern is required")
        return v

    @field_validator("plugins")
    @classmethod
    def validate_plugins(cls, v: list[str]) -> list[str]:
        for path in v:
            if not _PLUGIN_PATH.match(path):
                raise ValueError(f"Plugin must be given as 'module:attribute', got {path!r}")
        return v

    @property
    def root_path(self) -> Path:
        """Absolute root directory."""
        return Path(self.root_dir).resolve() if self.root_dir else Path.cwd().resolve()

    @classmethod
    def from_file(cls, path: Path | str) -> "RunnerConfig":
        """Load configuration from a JSON file.

        A relative root_dir is resolved against the file's directory.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        config = cls.model_validate(data)
        if config.root_dir is None or not Path(config.root_dir).is_absolute():
            config.root_dir = str((path.parent / (config.root_dir or ".")).resolve())
        return config

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "RunnerConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        for directory in [current, *current.parents]:
            for name in CONFIG_NAMES:
                config_path = directory / name
                if config_path.exists():
                    return cls.from_file(config_path)

        raise FileNotFoundError(
            "No configuration file found. Create suitest.json or run 'suitest init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config() -> RunnerConfig:
    """Return a default configuration."""
    return RunnerConfig()


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.root_dir = "."
    config.to_file(output_path)
    return output_path
