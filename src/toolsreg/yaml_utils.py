"""YAML loading helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from toolsreg.errors import ConfigError


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")
    content = file_path.read_text(encoding="utf-8")
    try:
        payload = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {file_path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{file_path} must contain a mapping at the root")
    return payload
