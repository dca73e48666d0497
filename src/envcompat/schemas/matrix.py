"""
Pandera schema for compiled compatibility matrices.

Matrices are nested mappings on disk; for validation and inspection they
are flattened into one row per (feature, environment) pair.
"""

from collections.abc import Mapping

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series

MATRIX_COLUMNS = ["feature", "environment", "version"]

# Decimal numeral ("49", "10.1") or unreleased label ("tp").
VERSION_TOKEN_PATTERN = r"^(\d+(\.\d+)?|[A-Za-z]+)$"


class CompatibilityMatrixSchema(pa.DataFrameModel):
    """
    Schema for a long-form compatibility matrix.

    Each row states the minimum version of an environment that supports a
    feature. Unknown environments are allowed so new corpus data does not
    break consumers.
    """

    feature: Series[str] = pa.Field(
        description="Transform or polyfill name",
        str_length={"min_value": 1},
    )
    environment: Series[str] = pa.Field(
        description="Environment id (chrome, node, electron, ...)",
        str_length={"min_value": 1},
    )
    version: Series[str] = pa.Field(
        description="Minimum supported version or unreleased label",
        str_matches=VERSION_TOKEN_PATTERN,
    )

    @pa.dataframe_check
    def unique_pairs(cls, df: pd.DataFrame) -> bool:
        """Each (feature, environment) pair appears once."""
        return not df.duplicated(subset=["feature", "environment"]).any()

    class Config:
        """Schema configuration."""

        name = "CompatibilityMatrixSchema"
        strict = True
        coerce = True


def matrix_to_frame(matrix: Mapping[str, Mapping[str, str]]) -> pd.DataFrame:
    """
    Flatten a matrix into one row per supported (feature, environment).

    Features without any supported environment produce no rows.

    Args:
        matrix: Feature name -> {environment -> version token}.

    Returns:
        DataFrame with columns feature, environment, version.
    """
    rows = [
        (feature, environment, str(version))
        for feature, record in matrix.items()
        for environment, version in record.items()
    ]
    return pd.DataFrame(rows, columns=MATRIX_COLUMNS).astype(str)


def validate_matrix(matrix: Mapping[str, Mapping[str, str]]) -> pd.DataFrame:
    """
    Validate a matrix against CompatibilityMatrixSchema.

    Returns:
        The validated long-form DataFrame.

    Raises:
        pandera.errors.SchemaError: If validation fails.
    """
    return CompatibilityMatrixSchema.validate(matrix_to_frame(matrix))


def support_table(
    matrix: Mapping[str, Mapping[str, str]],
    environments: list[str] | None = None,
) -> pd.DataFrame:
    """
    Pivot a matrix into a feature x environment table.

    Missing entries (unsupported) are empty strings. Feature order follows
    the matrix.

    Args:
        matrix: Compiled matrix.
        environments: Optional subset/order of environment columns.

    Returns:
        Wide DataFrame indexed by feature.
    """
    frame = matrix_to_frame(matrix)
    table = frame.pivot(index="feature", columns="environment", values="version")
    table = table.reindex(index=list(matrix.keys()))
    if environments is not None:
        table = table.reindex(columns=environments)
    return table.fillna("")
