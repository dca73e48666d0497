"""
Preset assembly.

Resolves targets, selects the syntax transforms and polyfills the targets
need and maps the selected names onto registered transform units.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from envcompat.catalog.features import Catalog, get_catalog
from envcompat.catalog.registry import (
    POLYFILL_REQUIRE_HELPER,
    TransformRegistry,
    TransformUnit,
    UnitKind,
    get_registry,
)
from envcompat.compat.artifacts import CompatData
from envcompat.config.settings import PresetOptions
from envcompat.preset.reporter import DebugReporter
from envcompat.preset.session import BuildSession
from envcompat.targets.inclusion import filter_items, partition_names
from envcompat.targets.resolver import TargetsResolver
from envcompat.utils.logging import get_logger

log = get_logger(__name__)

REGENERATOR_TRANSFORM = "transform-regenerator"


@dataclass(frozen=True)
class PluginEntry:
    """A transform unit and the options it is instantiated with."""

    unit: TransformUnit
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class PresetResult:
    """
    Outcome of evaluating the preset.

    Attributes:
        targets: Resolved targets.
        transformations: Selected syntax transform names, in order.
        polyfills: Selected polyfill names (None without use_built_ins).
        module_type: Module format, or None when disabled.
        plugins: Units to instantiate, in order.
    """

    targets: dict[str, Any]
    transformations: list[str]
    polyfills: list[str] | None
    module_type: str | None
    plugins: list[PluginEntry] = field(default_factory=list)

    @property
    def plugin_names(self) -> list[str]:
        """Names of the units to instantiate, in order."""
        return [entry.unit.name for entry in self.plugins]


def build_preset(
    options: PresetOptions,
    *,
    data: CompatData,
    session: BuildSession | None = None,
    resolver: TargetsResolver | None = None,
    registry: TransformRegistry | None = None,
    catalog: Catalog | None = None,
    reporter: DebugReporter | None = None,
    root: Path | None = None,
) -> PresetResult:
    """
    Evaluate the preset for a set of options.

    Args:
        options: Validated preset options.
        data: Compiled plugin and built-in matrices.
        session: Build session (a fresh one if omitted).
        resolver: Targets resolver (default collaborators if omitted).
        registry: Transform unit registry (packaged catalog if omitted).
        catalog: Catalog providing default includes and module transforms.
        reporter: Debug reporter used when options.debug is set.
        root: Project root for ``node: engines``.

    Returns:
        PresetResult with the selected transforms, polyfills and units.
    """
    session = session or BuildSession()
    resolver = resolver or TargetsResolver(data=data)
    registry = registry or get_registry()
    catalog = catalog or get_catalog()

    # Compiled matrices may carry features newer than the packaged catalog.
    unregistered = [name for name in data.plugins if name not in registry.units]
    if unregistered:
        log.warning("Registering matrix features missing from the catalog", names=unregistered)
        registry = registry.extended(unregistered, UnitKind.SYNTAX)

    targets = resolver.resolve(
        options.targets, use_built_ins=options.use_built_ins, root=root
    )
    include = partition_names(options.include)
    exclude = partition_names(options.exclude)

    transformations = filter_items(
        data.plugins,
        data.plugins,
        targets,
        default_includes=catalog.default_includes,
        include=include.plugins,
        exclude=exclude.plugins,
    )

    polyfills: list[str] | None = None
    if options.use_built_ins:
        polyfills = filter_items(
            [*data.built_ins, *catalog.default_includes],
            data.built_ins,
            targets,
            default_includes=catalog.default_includes,
            include=include.built_ins,
            exclude=exclude.built_ins,
        )

    log.info(
        "Selected transforms",
        targets=targets,
        transformations=len(transformations),
        polyfills=None if polyfills is None else len(polyfills),
    )

    result = PresetResult(
        targets=targets,
        transformations=transformations,
        polyfills=polyfills,
        module_type=options.module_type,
    )

    if options.debug and not session.debug_logged:
        session.debug_logged = True
        (reporter or DebugReporter()).print_report(result, data)

    plugin_options = {"loose": options.loose}
    if result.module_type is not None:
        module_transform = catalog.module_transformations[result.module_type]
        result.plugins.append(
            PluginEntry(registry.get(module_transform), dict(plugin_options))
        )
    result.plugins.extend(
        PluginEntry(registry.get(name), dict(plugin_options)) for name in transformations
    )
    if polyfills is not None:
        result.plugins.append(
            PluginEntry(
                registry.get(POLYFILL_REQUIRE_HELPER),
                {
                    "polyfills": list(polyfills),
                    "regenerator": REGENERATOR_TRANSFORM in transformations,
                },
            )
        )

    return result
