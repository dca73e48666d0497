"""
Schema definitions using Pandera for data validation.

The compiled matrix is the contract between the offline builder and every
consumer; it is validated whenever it is written or read.
"""

from envcompat.schemas.matrix import (
    CompatibilityMatrixSchema,
    matrix_to_frame,
    support_table,
    validate_matrix,
)

__all__ = [
    "CompatibilityMatrixSchema",
    "matrix_to_frame",
    "support_table",
    "validate_matrix",
]
