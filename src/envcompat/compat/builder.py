"""
Compatibility matrix builder.

Compiles interpolated compat-table results into feature -> environment ->
minimum version tables for the plugin and built-in catalogs.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from envcompat.catalog.electron import ElectronChromiumTable
from envcompat.catalog.features import FeatureDefinition
from envcompat.compat.corpus import CompatTest, TestSuite
from envcompat.compat.derived import add_derived_environments
from envcompat.compat.environments import EnvironmentLine
from envcompat.compat.interpolation import interpolate_suite
from envcompat.compat.scoring import (
    DEFAULT_REFERENCE_KEY,
    build_test_catalog,
    lowest_implemented_version,
    select_units,
)
from envcompat.utils.logging import get_logger, log_context

log = get_logger(__name__)

Matrix = dict[str, dict[str, str]]


@dataclass(frozen=True)
class CompiledMatrices:
    """The two compiled artifacts."""

    plugins: Matrix
    built_ins: Matrix


@dataclass
class CompatibilityMatrixBuilder:
    """
    Builds compatibility matrices from raw test suites.

    Suites are interpolated once, on construction; every build afterwards
    reads the same interpolated data.

    Attributes:
        environments: Corpus environments in canonical order.
        suites: Raw test suites, in catalog order.
        electron_table: Electron/Chromium correspondence.
        target_environments: Environment ids compiled into the matrix.
        unreleased_labels: Unreleased build label per environment.
        reference_key: Result key recording the reference implementation.
    """

    environments: EnvironmentLine
    suites: Sequence[TestSuite]
    electron_table: ElectronChromiumTable
    target_environments: Sequence[str]
    unreleased_labels: dict[str, str] = field(default_factory=dict)
    reference_key: str = DEFAULT_REFERENCE_KEY
    _catalog: list[CompatTest] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        interpolated = []
        for suite in self.suites:
            with log_context(suite=suite.name):
                interpolated.append(interpolate_suite(suite, self.environments))
        self._catalog = build_test_catalog(interpolated)
        log.info(
            "Prepared test catalog",
            suites=[suite.name for suite in self.suites],
            tests=len(self._catalog),
        )

    def build_record(self, feature: FeatureDefinition) -> dict[str, str]:
        """
        Compile the support record of one feature.

        Args:
            feature: Feature definition.

        Returns:
            Environment -> version token, including derived environments.
        """
        units = select_units(feature, self._catalog)
        if not units:
            log.warning("No tests match feature", feature=feature.name, tests=feature.tests)

        record: dict[str, str] = {}
        for env in self.target_environments:
            version = lowest_implemented_version(
                units,
                env,
                self.unreleased_labels.get(env),
                self.reference_key,
            )
            if version is not None:
                record[env] = version

        return add_derived_environments(record, self.electron_table)

    def build(self, features: Sequence[FeatureDefinition]) -> Matrix:
        """
        Compile a matrix for an ordered list of features.

        Args:
            features: Feature definitions in canonical order.

        Returns:
            Feature name -> support record, in feature order.
        """
        matrix: Matrix = {}
        for feature in features:
            with log_context(feature=feature.name):
                matrix[feature.name] = self.build_record(feature)

        log.info(
            "Built matrix",
            features=len(matrix),
            unsupported=sum(1 for record in matrix.values() if not record),
        )
        return matrix

    def build_all(
        self,
        plugin_features: Sequence[FeatureDefinition],
        builtin_features: Sequence[FeatureDefinition],
    ) -> CompiledMatrices:
        """Compile both the plugin and the built-in matrices."""
        return CompiledMatrices(
            plugins=self.build(plugin_features),
            built_ins=self.build(builtin_features),
        )
