"""
Requirement decisions.

A transform is required unless every targeted environment is proven to
support the feature already.
"""

from collections.abc import Mapping
from typing import Any

from envcompat.targets.errors import TargetVersionError
from envcompat.utils.versions import is_numeric, token_value


def _check_target(environment: str, version: Any) -> float:
    if not is_numeric(version):
        msg = (
            f"Target version must be a number, '{version}' was given for "
            f"'{environment}'"
        )
        raise TargetVersionError(msg)
    return float(version)


def environment_requires(
    environment: str, target_version: object, record: Mapping[str, str]
) -> bool:
    """
    Whether one target environment needs the transform.

    Raises:
        TargetVersionError: If the target version is not numeric.
    """
    target = _check_target(environment, target_version)
    implemented = record.get(environment)
    if not implemented:
        return True
    return target < token_value(implemented)


def is_required(targets: Mapping[str, object], record: Mapping[str, str]) -> bool:
    """
    Decide whether a feature's transform is required.

    Args:
        targets: Resolved targets (environment -> minimum version).
        record: Feature support record (environment -> version token).

    Returns:
        True when targets are empty or any target predates support.

    Raises:
        TargetVersionError: If a target version is not numeric.
    """
    if not targets:
        return True
    required = False
    for environment, version in targets.items():
        if environment_requires(environment, version, record):
            required = True
    return required


def unsatisfied_environments(
    targets: Mapping[str, object], record: Mapping[str, str]
) -> dict[str, object]:
    """Targets that make a feature required, for reporting."""
    return {
        environment: version
        for environment, version in targets.items()
        if environment_requires(environment, version, record)
    }
