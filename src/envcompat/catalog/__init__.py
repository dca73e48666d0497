"""
Static catalog data: feature definitions, presets, the Electron/Chromium
table and the transform-unit registry.
"""

from envcompat.catalog.electron import (
    ElectronChromiumTable,
    load_electron_table,
    normalize_electron_version,
)
from envcompat.catalog.features import (
    Catalog,
    FeatureDefinition,
    get_catalog,
    load_catalog,
    load_feature_definitions,
    parse_feature_definitions,
)
from envcompat.catalog.registry import (
    POLYFILL_REQUIRE_HELPER,
    TransformRegistry,
    TransformUnit,
    UnitKind,
    get_registry,
)

__all__ = [
    "POLYFILL_REQUIRE_HELPER",
    "Catalog",
    "ElectronChromiumTable",
    "FeatureDefinition",
    "TransformRegistry",
    "TransformUnit",
    "UnitKind",
    "get_catalog",
    "get_registry",
    "load_catalog",
    "load_electron_table",
    "load_feature_definitions",
    "normalize_electron_version",
    "parse_feature_definitions",
]
