from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.registry_builder import RegistryBuilder
from toolsreg.config import DEFAULT_MIN_TOOLS, load_config, resolve_settings
from toolsreg.errors import ConfigError


def test_defaults_resolve_against_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    settings = resolve_settings()
    assert settings.registry_root == tmp_path / "src" / "data" / "tools-registry"
    assert settings.output_dir == tmp_path / "public" / "data"
    assert settings.snapshot_filename == "tools.snapshot.v{schema_version}.json"
    assert settings.default_min_tools == DEFAULT_MIN_TOOLS
    assert settings.global_unique_ids is True


def test_config_paths_resolve_against_config_directory(registry_builder: RegistryBuilder):
    config_path = registry_builder.write_config(
        """
        version: 1
        registry:
          root: registry
        output:
          dir: site/data
          hash_filename: "tools-{schema_version}.sha256"
        validation:
          default_min_tools: 5
          global_unique_ids: false
        """
    )
    settings = resolve_settings(config_path)
    assert settings.registry_root == registry_builder.root
    assert settings.output_dir == registry_builder.base / "site" / "data"
    assert settings.hash_filename == "tools-{schema_version}.sha256"
    assert settings.default_min_tools == 5
    assert settings.global_unique_ids is False


def test_config_in_working_directory_is_picked_up(registry_builder: RegistryBuilder, monkeypatch: pytest.MonkeyPatch):
    registry_builder.write_config("registry:\n  root: registry\n")
    monkeypatch.chdir(registry_builder.base)
    assert resolve_settings().registry_root == registry_builder.root


def test_command_line_paths_override_config(registry_builder: RegistryBuilder, tmp_path: Path):
    config_path = registry_builder.write_config("registry:\n  root: elsewhere\n")
    settings = resolve_settings(config_path, registry=registry_builder.root, out=tmp_path / "dist")
    assert settings.registry_root == registry_builder.root
    assert settings.output_dir == tmp_path / "dist"


def test_empty_config_file_uses_defaults(registry_builder: RegistryBuilder):
    config = load_config(registry_builder.write_config(""))
    assert config.registry.root == "src/data/tools-registry"
    assert config.output.dir == "public/data"


def test_explicit_missing_config_is_an_error(tmp_path: Path):
    with pytest.raises(ConfigError, match="Config file not found"):
        resolve_settings(tmp_path / "nope.yml")


def test_unsupported_version_is_rejected(registry_builder: RegistryBuilder):
    with pytest.raises(ConfigError, match="Only version 1"):
        load_config(registry_builder.write_config("version: 2\n"))


@pytest.mark.parametrize(
    "template",
    ["tools.{schema}.json", "nested/tools.v{schema_version}.json", ""],
)
def test_bad_filename_templates_are_rejected(registry_builder: RegistryBuilder, template: str):
    path = registry_builder.write_config(f'output:\n  snapshot_filename: "{template}"\n')
    with pytest.raises(ConfigError):
        load_config(path)


def test_negative_min_tools_is_rejected(registry_builder: RegistryBuilder):
    with pytest.raises(ConfigError):
        load_config(registry_builder.write_config("validation:\n  default_min_tools: -1\n"))


def test_malformed_yaml_is_a_config_error(registry_builder: RegistryBuilder):
    with pytest.raises(ConfigError):
        load_config(registry_builder.write_config("registry: [unterminated\n"))


def test_non_mapping_yaml_is_a_config_error(registry_builder: RegistryBuilder):
    with pytest.raises(ConfigError):
        load_config(registry_builder.write_config("- just\n- a list\n"))
