"""
Packaged feature catalog.

Feature definitions map a transform or polyfill name to the compat-table
tests that decide whether it is needed. The catalog also carries the
per-environment unreleased labels, the default polyfill includes and the
module transforms.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from envcompat.utils.logging import get_logger

log = get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"

PLUGIN_FEATURES_FILE = DATA_DIR / "plugin-features.yaml"
BUILTIN_FEATURES_FILE = DATA_DIR / "built-in-features.yaml"
PRESETS_FILE = DATA_DIR / "presets.yaml"
ELECTRON_TABLE_FILE = DATA_DIR / "electron-to-chromium.json"


@dataclass(frozen=True)
class FeatureDefinition:
    """
    A named transform or polyfill and the tests that track it.

    Attributes:
        name: Transform or polyfill name (e.g. "transform-es2015-classes").
        tests: Compat-table test names. A single name also matches every
            test whose name starts with it.
    """

    name: str
    tests: tuple[str, ...]

    @property
    def is_prefix_match(self) -> bool:
        """Whether the definition names a single test-name prefix."""
        return len(self.tests) == 1


def parse_feature_definitions(raw: dict[str, Any]) -> list[FeatureDefinition]:
    """
    Parse feature definitions from their YAML form.

    Each value is either a test name or a mapping with a ``features`` list.

    Args:
        raw: Mapping of feature name to definition, in canonical order.

    Returns:
        Ordered feature definitions.
    """
    definitions: list[FeatureDefinition] = []
    for name, entry in raw.items():
        if isinstance(entry, str):
            tests: tuple[str, ...] = (entry,)
        elif isinstance(entry, dict) and isinstance(entry.get("features"), list):
            tests = tuple(str(test) for test in entry["features"])
        else:
            msg = f"Feature '{name}' must name a test or list 'features', got: {entry!r}"
            raise ValueError(msg)
        if not tests:
            msg = f"Feature '{name}' lists no tests"
            raise ValueError(msg)
        definitions.append(FeatureDefinition(name=name, tests=tests))
    return definitions


def load_feature_definitions(path: Path) -> list[FeatureDefinition]:
    """Load ordered feature definitions from a YAML file."""
    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    definitions = parse_feature_definitions(raw)
    log.debug("Loaded feature definitions", path=str(path), count=len(definitions))
    return definitions


@dataclass(frozen=True)
class Catalog:
    """Static data shared by the matrix builder and the preset."""

    plugin_features: tuple[FeatureDefinition, ...]
    builtin_features: tuple[FeatureDefinition, ...]
    unreleased_labels: dict[str, str] = field(default_factory=dict)
    default_includes: tuple[str, ...] = ()
    module_transformations: dict[str, str] = field(default_factory=dict)
    environments: tuple[str, ...] = ()

    @property
    def plugin_names(self) -> list[str]:
        """Plugin names in canonical order."""
        return [feature.name for feature in self.plugin_features]

    @property
    def builtin_names(self) -> list[str]:
        """Built-in names in canonical order."""
        return [feature.name for feature in self.builtin_features]

    def valid_names(self) -> set[str]:
        """Every name accepted by the include/exclude options."""
        return {
            *self.plugin_names,
            *self.module_transformations.values(),
            *self.builtin_names,
            *self.default_includes,
        }


def load_catalog(
    plugin_features: Path | None = None,
    builtin_features: Path | None = None,
    presets: Path | None = None,
) -> Catalog:
    """
    Load the catalog, optionally overriding the packaged files.

    Args:
        plugin_features: Alternative plugin feature definitions.
        builtin_features: Alternative built-in feature definitions.
        presets: Alternative presets file (labels, includes, modules, envs).

    Returns:
        Catalog instance.
    """
    with (presets or PRESETS_FILE).open(encoding="utf-8") as f:
        preset_data = yaml.safe_load(f) or {}

    return Catalog(
        plugin_features=tuple(
            load_feature_definitions(plugin_features or PLUGIN_FEATURES_FILE)
        ),
        builtin_features=tuple(
            load_feature_definitions(builtin_features or BUILTIN_FEATURES_FILE)
        ),
        unreleased_labels=dict(preset_data.get("unreleased_labels", {})),
        default_includes=tuple(preset_data.get("default_includes", [])),
        module_transformations=dict(preset_data.get("module_transformations", {})),
        environments=tuple(preset_data.get("environments", [])),
    )


_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    """Get the packaged catalog (loaded once)."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog
