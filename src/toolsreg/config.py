"""Configuration loading for the tools registry pipeline (toolsreg.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from toolsreg.errors import ConfigError
from toolsreg.io.snapshot import DEFAULT_HASH_FILENAME, DEFAULT_SNAPSHOT_FILENAME
from toolsreg.paths import resolve_path
from toolsreg.yaml_utils import load_yaml

DEFAULT_CONFIG_FILENAME = "toolsreg.yml"
DEFAULT_MIN_TOOLS = 3


class RegistrySection(BaseModel):
    root: str = "src/data/tools-registry"


class OutputSection(BaseModel):
    dir: str = "public/data"
    snapshot_filename: str = DEFAULT_SNAPSHOT_FILENAME
    hash_filename: str = DEFAULT_HASH_FILENAME

    @field_validator("snapshot_filename", "hash_filename")
    @classmethod
    def validate_template(cls, value: str) -> str:
        try:
            rendered = value.format(schema_version=1)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"Invalid filename template {value!r}: {exc}") from exc
        if not rendered or "/" in rendered:
            raise ValueError(f"Filename template must render a plain file name: {value!r}")
        return value


class ValidationSection(BaseModel):
    default_min_tools: int = Field(default=DEFAULT_MIN_TOOLS, ge=0)
    global_unique_ids: bool = True


class ToolsregConfig(BaseModel):
    version: int = 1
    registry: RegistrySection = RegistrySection()
    output: OutputSection = OutputSection()
    validation: ValidationSection = ValidationSection()

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: int) -> int:
        if value != 1:
            raise ValueError("Only version 1 config is supported")
        return value


@dataclass(frozen=True)
class PipelineSettings:
    """Resolved, absolute settings for a single pipeline run."""

    registry_root: Path
    output_dir: Path
    snapshot_filename: str = DEFAULT_SNAPSHOT_FILENAME
    hash_filename: str = DEFAULT_HASH_FILENAME
    default_min_tools: int = DEFAULT_MIN_TOOLS
    global_unique_ids: bool = True


def load_config(path: Path) -> ToolsregConfig:
    try:
        payload = load_yaml(path)
    except FileNotFoundError as exc:
        raise ConfigError(str(exc)) from exc
    try:
        return ToolsregConfig(**payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def resolve_settings(
    config_path: Optional[Path] = None,
    *,
    registry: Optional[Path] = None,
    out: Optional[Path] = None,
) -> PipelineSettings:
    """Combine the optional config file with command-line overrides.

    Relative paths inside the config file resolve against the file's directory.
    Without a config file the defaults resolve against the working directory.
    An explicitly requested config file that does not exist is an error.
    """
    candidate = config_path or Path(DEFAULT_CONFIG_FILENAME)
    if candidate.exists():
        config = load_config(candidate)
        base_dir = candidate.resolve().parent
    elif config_path is not None:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        config = ToolsregConfig()
        base_dir = Path.cwd()

    registry_root = registry.resolve() if registry else resolve_path(base_dir, config.registry.root)
    output_dir = out.resolve() if out else resolve_path(base_dir, config.output.dir)
    return PipelineSettings(
        registry_root=registry_root,
        output_dir=output_dir,
        snapshot_filename=config.output.snapshot_filename,
        hash_filename=config.output.hash_filename,
        default_min_tools=config.validation.default_min_tools,
        global_unique_ids=config.validation.global_unique_ids,
    )
