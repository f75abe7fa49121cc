# src/readqc/config/io.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from readqc.config.schema import RunParams, Toolchain
from readqc.errors import ConfigError


def _read_mapping(path: Path) -> Dict[str, Any]:
    # JSON is a subset of YAML, so one loader covers both formats
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level.")
    return data


def load_params(path: Path) -> RunParams:
    """Read a params file; values may sit at the top level or under 'params:'."""
    data = _read_mapping(path)
    params_data = data.get("params", data)
    if not isinstance(params_data, dict):
        raise ConfigError(f"'params' in {path} must be a mapping.")
    try:
        return RunParams(**params_data)
    except ValidationError as e:
        raise ConfigError(f"invalid params in {path}:\n{e}") from e


def load_toolchain(path: Path) -> Toolchain:
    data = _read_mapping(path)
    try:
        return Toolchain(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid toolchain file {path}:\n{e}") from e


def apply_params_defaults(args, params: RunParams, defaults: Dict[str, Any]) -> None:
    """Set argparse args from params only where current value equals our known defaults."""
    for k, v in params.model_dump(exclude_unset=True).items():
        if not hasattr(args, k):
            continue
        cur = getattr(args, k)
        if k in defaults and cur == defaults[k]:
            setattr(args, k, v)
