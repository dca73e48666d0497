"""
Configuration management with typed Pydantic models.

Covers the offline matrix build and the preset options evaluated on every
build configuration.
"""

from envcompat.config.loader import load_build_config, load_preset_config
from envcompat.config.settings import (
    CatalogConfig,
    CorpusConfig,
    DataPathsConfig,
    MatrixBuildConfig,
    PresetConfig,
    PresetOptions,
)

__all__ = [
    "CatalogConfig",
    "CorpusConfig",
    "DataPathsConfig",
    "MatrixBuildConfig",
    "PresetConfig",
    "PresetOptions",
    "load_build_config",
    "load_preset_config",
]
