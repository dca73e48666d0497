"""
Node.js runtime targets.

Resolves ``node: current`` from the installed node executable and
``node: engines`` from the ``engines.node`` range of a package manifest.
"""

import json
import re
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

import semantic_version

from envcompat.targets.errors import ManifestError, TargetsConfigurationError
from envcompat.utils.logging import get_logger
from envcompat.utils.versions import parse_leading_number, sort_tokens

log = get_logger(__name__)

MANIFEST_NAME = "package.json"

_SEMVER_PREFIX = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?")


def desemverify(version: str) -> float:
    """
    Reduce a semantic version to a plain major.minor number.

    Pre-release and build metadata are dropped: "v8.9.4-rc.1" gives 8.9.
    Matrix tokens are plain decimals, so the minor is read as a decimal
    fraction the same way: "v8.10.0" gives 8.1 and compares like a matrix
    entry of "8.1".

    Raises:
        TargetsConfigurationError: If the text is not a version.
    """
    match = _SEMVER_PREFIX.match(version)
    if match is None:
        msg = f"Cannot read a version from {version!r}"
        raise TargetsConfigurationError(msg)
    major, minor = match.group(1), match.group(2) or "0"
    return float(f"{major}.{minor}")


def find_node() -> Path | None:
    """Locate the node executable on PATH."""
    for exe_name in ("node", "nodejs", "node.exe"):
        if (path := shutil.which(exe_name)) is not None:
            return Path(path)
    return None


def current_node_version(node_path: Path | None = None) -> float:
    """
    Version of the node runtime that will run the build.

    Args:
        node_path: Optional explicit node executable.

    Returns:
        major.minor as a number (e.g. 18.17).

    Raises:
        TargetsConfigurationError: If node cannot be found or queried.
    """
    exe_path = node_path or find_node()
    if exe_path is None:
        msg = "node executable not found; cannot resolve 'node: current'"
        raise TargetsConfigurationError(msg)

    try:
        result = subprocess.run(
            [str(exe_path), "--version"],
            capture_output=True,
            text=True,
            check=True,
            timeout=30,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        msg = f"Failed to query node version from {exe_path}: {e}"
        raise TargetsConfigurationError(msg) from e

    version = desemverify(result.stdout.strip())
    log.debug("Resolved current node version", node=str(exe_path), version=version)
    return version


def read_engines_range(root: Path) -> str:
    """
    Read ``engines.node`` from the manifest in a project root.

    Raises:
        ManifestError: If the manifest is missing, malformed or lacks the field.
    """
    manifest = root / MANIFEST_NAME
    try:
        with manifest.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        msg = f"No {MANIFEST_NAME} found in {root}; cannot resolve 'node: engines'"
        raise ManifestError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Malformed {manifest}: {e}"
        raise ManifestError(msg) from e

    engines = data.get("engines") if isinstance(data, dict) else None
    node_range = engines.get("node") if isinstance(engines, dict) else None
    if not isinstance(node_range, str) or not node_range.strip():
        msg = f"{manifest} does not declare an 'engines.node' range"
        raise ManifestError(msg)
    return node_range


def engines_node_version(root: Path, supported_versions: Iterable[str]) -> float:
    """
    Lowest known node version satisfying the manifest's engines range.

    Args:
        root: Project root containing package.json.
        supported_versions: Node version tokens present in the matrices.

    Returns:
        The lowest satisfying version as a number.

    Raises:
        ManifestError: If the manifest or its range is unusable.
        TargetsConfigurationError: If no known version satisfies the range.
    """
    node_range = read_engines_range(root)
    try:
        spec = semantic_version.NpmSpec(node_range)
    except ValueError as e:
        msg = f"Invalid engines.node range {node_range!r}: {e}"
        raise ManifestError(msg) from e

    for token in sort_tokens(set(supported_versions)):
        number = parse_leading_number(token)
        if number is None:
            continue
        if semantic_version.Version.coerce(token) in spec:
            log.debug("Resolved engines node version", range=node_range, version=token)
            return number

    msg = f"No known node version satisfies engines.node {node_range!r}"
    raise TargetsConfigurationError(msg)
