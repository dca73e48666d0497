"""
Target resolution.

Turns a target declaration into concrete per-environment minimum versions:

- ``node: current`` / ``node: true``: version of the installed node
- ``node: engines``: lowest known node satisfying package.json engines
- ``electron: "1.4"``: folded into an equivalent ``chrome`` target
- ``browsers: "> 1%"``: lowest version per family from a browser query
"""

import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from envcompat.catalog.electron import (
    ElectronChromiumTable,
    load_electron_table,
    normalize_electron_version,
)
from envcompat.compat.artifacts import CompatData
from envcompat.targets.browsers import (
    BrowserQuery,
    BrowserslistCLI,
    is_browsers_query_valid,
    lowest_versions,
    merge_browsers,
)
from envcompat.targets.errors import TargetsConfigurationError
from envcompat.targets.runtime import current_node_version, engines_node_version
from envcompat.utils.logging import get_logger
from envcompat.utils.versions import is_numeric

log = get_logger(__name__)

_RELEASE_LINE = re.compile(r"^(\d+\.\d+)")


def electron_version_to_chrome_version(
    table: ElectronChromiumTable, version: str | int | float
) -> int:
    """
    Chrome version equivalent to an Electron version.

    Args:
        table: Electron/Chromium correspondence.
        version: Electron version ("1" is read as "1.0").

    Returns:
        Chromium major.

    Raises:
        TargetsConfigurationError: If the version is malformed or unknown.
    """
    release = normalize_electron_version(version)
    if _RELEASE_LINE.match(release) is None:
        msg = f"Electron version must be a semver version, got {version!r}"
        raise TargetsConfigurationError(msg)

    chromium = table.chromium_for(release)
    if chromium is None:
        msg = f"Electron version {release} is either too old or too new"
        raise TargetsConfigurationError(msg)
    return int(chromium)


def supported_node_versions(data: CompatData, *, use_built_ins: bool = False) -> set[str]:
    """Distinct node version tokens across the plugin (and built-in) matrix."""
    matrices = [data.plugins, data.built_ins] if use_built_ins else [data.plugins]
    return {
        record["node"]
        for matrix in matrices
        for record in matrix.values()
        if "node" in record
    }


class TargetsResolver:
    """
    Resolves target declarations into numeric minimum versions.

    Collaborators are injected so resolution can run without node or
    browserslist installed.
    """

    def __init__(
        self,
        *,
        data: CompatData | None = None,
        electron_table: ElectronChromiumTable | None = None,
        browser_query: BrowserQuery | None = None,
        node_version: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            data: Compiled matrices, needed for ``node: engines``.
            electron_table: Electron/Chromium table (packaged by default).
            browser_query: Browser query service (browserslist by default).
            node_version: Provider of the current node version.
        """
        self.data = data
        self.electron_table = electron_table or load_electron_table()
        self.browser_query = browser_query or BrowserslistCLI()
        self.node_version = node_version or current_node_version

    def resolve(
        self,
        targets: Mapping[str, Any] | None = None,
        *,
        use_built_ins: bool = False,
        root: Path | None = None,
    ) -> dict[str, Any]:
        """
        Resolve a target declaration.

        Args:
            targets: Declared targets.
            use_built_ins: Include built-in node versions for ``engines``.
            root: Project root holding package.json (defaults to cwd).

        Returns:
            New mapping of environment -> minimum version.

        Raises:
            TargetsConfigurationError: If a declaration cannot be resolved.
            ManifestError: If ``node: engines`` cannot read the manifest.
        """
        resolved = dict(targets or {})

        node = resolved.get("node")
        if node is True or node == "current":
            resolved["node"] = self.node_version()
        elif node == "engines":
            resolved["node"] = self._engines_node(use_built_ins, root)

        if resolved.get("electron"):
            resolved = self._fold_electron(resolved)

        if "browsers" not in resolved:
            return resolved

        queries = resolved["browsers"]
        if not is_browsers_query_valid(queries):
            msg = f"'browsers' must be a query string or list of strings, got {queries!r}"
            raise TargetsConfigurationError(msg)
        if isinstance(queries, str):
            queries = [queries]

        from_query = lowest_versions(self.browser_query(queries))
        log.debug("Resolved browser query", queries=queries, versions=from_query)
        return merge_browsers(from_query, resolved)

    def _engines_node(self, use_built_ins: bool, root: Path | None) -> float:
        if self.data is None:
            msg = "Compiled matrices are required to resolve 'node: engines'"
            raise TargetsConfigurationError(msg)
        versions = supported_node_versions(self.data, use_built_ins=use_built_ins)
        return engines_node_version(root or Path.cwd(), versions)

    def _fold_electron(self, resolved: dict[str, Any]) -> dict[str, Any]:
        electron = resolved.pop("electron")
        electron_chrome = electron_version_to_chrome_version(self.electron_table, electron)

        chrome = resolved.get("chrome")
        if chrome is None:
            resolved["chrome"] = electron_chrome
        elif is_numeric(chrome):
            resolved["chrome"] = min(chrome, electron_chrome)
        else:
            msg = f"Target version must be a number, '{chrome}' was given for 'chrome'"
            raise TargetsConfigurationError(msg)

        log.debug("Folded electron target", electron=electron, chrome=resolved["chrome"])
        return resolved
