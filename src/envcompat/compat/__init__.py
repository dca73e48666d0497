"""
Compatibility matrix builder.

Loads the raw compat-table corpus, interpolates results between related
environments, scores each feature per environment and persists the
compiled matrices.
"""

from envcompat.compat.artifacts import (
    BUILTINS_ARTIFACT,
    PLUGINS_ARTIFACT,
    CheckOutcome,
    CompatData,
    check_matrices,
    load_compat_data,
    load_matrix,
    save_matrix,
    write_matrices,
)
from envcompat.compat.builder import CompatibilityMatrixBuilder, CompiledMatrices, Matrix
from envcompat.compat.corpus import CompatTest, CorpusError, TestSuite, load_suite
from envcompat.compat.derived import add_derived_environments, derive_opera
from envcompat.compat.environments import (
    EnvironmentDescriptor,
    EnvironmentLine,
    load_environments,
)

__all__ = [
    "BUILTINS_ARTIFACT",
    "PLUGINS_ARTIFACT",
    "CheckOutcome",
    "CompatData",
    "CompatTest",
    "CompatibilityMatrixBuilder",
    "CompiledMatrices",
    "CorpusError",
    "EnvironmentDescriptor",
    "EnvironmentLine",
    "Matrix",
    "TestSuite",
    "add_derived_environments",
    "check_matrices",
    "derive_opera",
    "load_compat_data",
    "load_environments",
    "load_matrix",
    "load_suite",
    "save_matrix",
    "write_matrices",
]
