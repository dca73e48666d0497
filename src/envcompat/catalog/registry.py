"""
Static registry of transform units.

Every name the preset can emit (syntax transforms, module transforms,
polyfills and the polyfill-require helper) is registered once, up front.
Downstream consumers receive the registered handles instead of building
identifiers from strings at call time.
"""

from dataclasses import dataclass, field
from enum import Enum

from envcompat.catalog.features import Catalog, get_catalog
from envcompat.utils.logging import get_logger

log = get_logger(__name__)

POLYFILL_REQUIRE_HELPER = "transform-polyfill-require"


class UnitKind(Enum):
    """What a transform unit does."""

    SYNTAX = "syntax"
    MODULE = "module"
    POLYFILL = "polyfill"
    HELPER = "helper"


@dataclass(frozen=True)
class TransformUnit:
    """
    Opaque handle for a transform or polyfill.

    Attributes:
        name: Registered name.
        kind: Unit category.
        package: Distribution that implements the unit.
    """

    name: str
    kind: UnitKind
    package: str


def _package_for(name: str, kind: UnitKind) -> str:
    if kind is UnitKind.POLYFILL:
        return f"core-js/modules/{name}"
    return f"babel-plugin-{name}"


@dataclass
class TransformRegistry:
    """Name -> TransformUnit lookup."""

    units: dict[str, TransformUnit] = field(default_factory=dict)

    def register(self, name: str, kind: UnitKind) -> TransformUnit:
        """
        Register a unit.

        Args:
            name: Unit name.
            kind: Unit category.

        Returns:
            The registered handle.
        """
        if name in self.units:
            log.warning("Overwriting existing transform unit", name=name)
        unit = TransformUnit(name=name, kind=kind, package=_package_for(name, kind))
        self.units[name] = unit
        return unit

    def get(self, name: str) -> TransformUnit:
        """
        Get a unit by name.

        Raises:
            KeyError: If the unit is not registered.
        """
        if name not in self.units:
            available = ", ".join(self.units.keys())
            msg = f"Unknown transform unit '{name}'. Available: {available}"
            raise KeyError(msg)
        return self.units[name]

    def list_units(self, kind: UnitKind | None = None) -> list[str]:
        """List registered names, optionally of one kind."""
        return [
            name for name, unit in self.units.items() if kind is None or unit.kind is kind
        ]

    def extended(self, names: list[str], kind: UnitKind) -> "TransformRegistry":
        """Copy of the registry with unregistered names added as ``kind``."""
        registry = TransformRegistry(units=dict(self.units))
        for name in names:
            if name not in registry.units:
                registry.register(name, kind)
        return registry

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> "TransformRegistry":
        """Build a registry holding every unit the catalog can select."""
        registry = cls()
        for name in catalog.plugin_names:
            registry.register(name, UnitKind.SYNTAX)
        for name in catalog.module_transformations.values():
            registry.register(name, UnitKind.MODULE)
        for name in [*catalog.builtin_names, *catalog.default_includes]:
            registry.register(name, UnitKind.POLYFILL)
        registry.register(POLYFILL_REQUIRE_HELPER, UnitKind.HELPER)
        return registry


_registry: TransformRegistry | None = None


def get_registry() -> TransformRegistry:
    """Get the registry for the packaged catalog."""
    global _registry
    if _registry is None:
        _registry = TransformRegistry.from_catalog(get_catalog())
    return _registry
