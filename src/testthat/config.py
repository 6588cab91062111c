"""Configuration management for testthat."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ReporterConfig(BaseModel):
    """Reporter selection and display options."""

    name: str = Field(default="summary", description="Reporter used by 'testthat run'")
    use_colours: bool = Field(default=True, description="Colour console output")
    max_reports: int = Field(
        default=15, description="Maximum number of detailed failure reports in the summary"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        from testthat.reporters import REPORTERS

        if v.lower() not in REPORTERS:
            raise ValueError(f"Reporter must be one of: {set(REPORTERS)}")
        return v.lower()

    @field_validator("max_reports")
    @classmethod
    def validate_max_reports(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_reports must be at least 1")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level of the testthat logger")
    file: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()


class TestThatConfig(BaseModel):
    """Main configuration for testthat."""

    __test__ = False

    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
    keep_source: bool = Field(
        default=True, description="Keep source of test files so failures can be located"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "TestThatConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "TestThatConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        config_names = ["testthat.json", ".testthat.json"]

        current = start_dir.resolve()
        for directory in [current, *current.parents]:
            for name in config_names:
                config_path = directory / name
                if config_path.exists():
                    return cls.from_file(config_path)

        raise FileNotFoundError(
            "No configuration file found. Create testthat.json or run 'testthat init'"
        )

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> "TestThatConfig":
        """Load ``path`` if given, else search for a config file, else use defaults."""
        if path is not None:
            return cls.from_file(path)
        try:
            return cls.find_and_load()
        except FileNotFoundError:
            return get_default_config()

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config() -> TestThatConfig:
    """Return a default configuration."""
    return TestThatConfig(
        reporter=ReporterConfig(name="summary", use_colours=True, max_reports=15),
        logging=LoggingConfig(level="WARNING"),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.to_file(output_path)
    return output_path
