"""
Matrix artifact persistence and consistency checking.

Two JSON artifacts are written to the data root: ``plugins.json`` and
``built-ins.json``. The check mode recompiles the matrices and compares
them with the files on disk.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from envcompat.compat.builder import CompiledMatrices, Matrix
from envcompat.schemas.matrix import validate_matrix
from envcompat.utils.logging import get_logger

log = get_logger(__name__)

PLUGINS_ARTIFACT = "plugins.json"
BUILTINS_ARTIFACT = "built-ins.json"


def _coerce_matrix(raw: Any, path: Path) -> Matrix:
    if not isinstance(raw, dict) or not all(isinstance(v, dict) for v in raw.values()):
        msg = f"Matrix artifact {path} must map feature names to objects"
        raise ValueError(msg)
    return {
        str(feature): {str(env): str(version) for env, version in record.items()}
        for feature, record in raw.items()
    }


def save_matrix(matrix: Matrix, path: Path) -> Path:
    """
    Validate and write a matrix as indented JSON with a trailing newline.

    Args:
        matrix: Compiled matrix.
        path: Output file.

    Returns:
        The written path.
    """
    validate_matrix(matrix)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(matrix, f, indent=2, ensure_ascii=False)
        f.write("\n")
    log.info("Saved matrix", path=str(path), features=len(matrix))
    return path


def load_matrix(path: Path, *, validate: bool = True) -> Matrix:
    """
    Load a matrix artifact.

    Args:
        path: Artifact file.
        validate: Whether to validate against the matrix schema.

    Returns:
        Feature name -> {environment -> version token}, in file order.

    Raises:
        FileNotFoundError: If the artifact does not exist.
        ValueError: If the artifact is not a matrix.
        pandera.errors.SchemaError: If validation fails.
    """
    if not path.exists():
        msg = f"Matrix artifact not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as f:
        matrix = _coerce_matrix(json.load(f), path)

    if validate:
        validate_matrix(matrix)
    log.debug("Loaded matrix", path=str(path), features=len(matrix))
    return matrix


@dataclass(frozen=True)
class CompatData:
    """Both matrices, as read by the preset."""

    plugins: Matrix
    built_ins: Matrix


def load_compat_data(root: Path, *, validate: bool = True) -> CompatData:
    """Load plugins.json and built-ins.json from a data root."""
    return CompatData(
        plugins=load_matrix(root / PLUGINS_ARTIFACT, validate=validate),
        built_ins=load_matrix(root / BUILTINS_ARTIFACT, validate=validate),
    )


def write_matrices(compiled: CompiledMatrices, root: Path) -> tuple[Path, Path]:
    """Write both artifacts to a data root."""
    return (
        save_matrix(compiled.plugins, root / PLUGINS_ARTIFACT),
        save_matrix(compiled.built_ins, root / BUILTINS_ARTIFACT),
    )


@dataclass
class CheckOutcome:
    """
    Result of comparing compiled matrices with persisted artifacts.

    Attributes:
        mismatched: Artifact names that differ from the fresh build.
        missing: Artifact names that do not exist on disk.
    """

    mismatched: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the persisted artifacts match the fresh build."""
        return not self.mismatched and not self.missing

    @property
    def exit_code(self) -> int:
        """Process exit code for the check mode."""
        return 0 if self.ok else 1


def check_matrices(compiled: CompiledMatrices, root: Path) -> CheckOutcome:
    """
    Deep-compare freshly compiled matrices with the artifacts on disk.

    Args:
        compiled: Newly compiled matrices.
        root: Data root holding the persisted artifacts.

    Returns:
        CheckOutcome describing any difference.
    """
    outcome = CheckOutcome()
    for name, fresh in (
        (PLUGINS_ARTIFACT, compiled.plugins),
        (BUILTINS_ARTIFACT, compiled.built_ins),
    ):
        path = root / name
        if not path.exists():
            outcome.missing.append(name)
            continue
        if load_matrix(path, validate=False) != fresh:
            outcome.mismatched.append(name)

    if outcome.ok:
        log.info("Matrices are up to date", root=str(root))
    else:
        log.warning(
            "Matrices are out of date",
            root=str(root),
            mismatched=outcome.mismatched,
            missing=outcome.missing,
        )
    return outcome
