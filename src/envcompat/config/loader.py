"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance from a
``base.yaml`` next to the loaded file.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from envcompat.config.settings import (
    CatalogConfig,
    CorpusConfig,
    DataPathsConfig,
    MatrixBuildConfig,
    PresetConfig,
    PresetOptions,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _optional_path(value: Any) -> Path | None:
    return Path(value) if value else None


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _process_config_values(data) if data else {}


def _load_merged(config_path: Path, base_path: Path | None) -> dict[str, Any]:
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )
    return _deep_merge(base_data, load_yaml(config_path))


def _data_paths(merged: dict[str, Any]) -> DataPathsConfig:
    data = merged.get("data", {})
    return DataPathsConfig(data_root=Path(data.get("root", "./data")))


def load_build_config(
    config_path: Path,
    base_path: Path | None = None,
) -> MatrixBuildConfig:
    """
    Load the matrix build configuration.

    Example:
        corpus:
          root: ./compat-table
          environments: environments.json
          suites:
            es6: data-es6.json
            es2016plus: data-es2016plus.json
        data:
          root: ./data

    Args:
        config_path: Path to the configuration file.
        base_path: Optional base configuration for inheritance.

    Returns:
        Validated MatrixBuildConfig.
    """
    merged = _load_merged(config_path, base_path)

    corpus_data = merged.get("corpus", {})
    corpus_kwargs: dict[str, Any] = {}
    if corpus_data.get("root"):
        corpus_kwargs["root"] = Path(corpus_data["root"])
    if corpus_data.get("environments"):
        corpus_kwargs["environments"] = Path(corpus_data["environments"])
    if corpus_data.get("suites"):
        corpus_kwargs["suites"] = {
            str(name): Path(path) for name, path in corpus_data["suites"].items()
        }

    catalog_data = merged.get("catalog", {})
    catalog = CatalogConfig(
        plugin_features=_optional_path(catalog_data.get("plugin_features")),
        builtin_features=_optional_path(catalog_data.get("builtin_features")),
        presets=_optional_path(catalog_data.get("presets")),
        electron_table=_optional_path(catalog_data.get("electron_table")),
    )

    return MatrixBuildConfig(
        corpus=CorpusConfig(**corpus_kwargs),
        catalog=catalog,
        data=_data_paths(merged),
        environments=merged.get("environments"),
        reference_key=merged.get("reference_key", "babel"),
    )


def load_preset_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PresetConfig:
    """
    Load the preset configuration.

    Example:
        data:
          root: ./data
        targets:
          chrome: 52
          browsers: "> 1%"
        use_built_ins: true
        exclude: [transform-regenerator]

    Args:
        config_path: Path to the configuration file.
        base_path: Optional base configuration for inheritance.

    Returns:
        Validated PresetConfig.
    """
    merged = _load_merged(config_path, base_path)

    option_keys = set(PresetOptions.model_fields) | {"useBuiltIns"}
    options = PresetOptions(**{k: v for k, v in merged.items() if k in option_keys})

    return PresetConfig(
        data=_data_paths(merged),
        options=options,
        project_root=_optional_path(merged.get("project_root")),
    )
