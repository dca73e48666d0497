"""
Target resolution and requirement decisions.

Resolves declared targets into concrete minimum versions, decides whether a
feature is required for them and filters the final feature lists.
"""

from envcompat.targets.browsers import (
    BrowserQuery,
    BrowserQueryError,
    BrowserslistCLI,
    lowest_versions,
    merge_browsers,
)
from envcompat.targets.errors import (
    ConfigurationError,
    ManifestError,
    TargetsConfigurationError,
    TargetVersionError,
)
from envcompat.targets.inclusion import (
    NamePartition,
    filter_items,
    is_builtin_name,
    partition_names,
)
from envcompat.targets.requirement import is_required, unsatisfied_environments
from envcompat.targets.resolver import (
    TargetsResolver,
    electron_version_to_chrome_version,
    supported_node_versions,
)
from envcompat.targets.runtime import current_node_version, desemverify

__all__ = [
    "BrowserQuery",
    "BrowserQueryError",
    "BrowserslistCLI",
    "ConfigurationError",
    "ManifestError",
    "NamePartition",
    "TargetVersionError",
    "TargetsConfigurationError",
    "TargetsResolver",
    "current_node_version",
    "desemverify",
    "electron_version_to_chrome_version",
    "filter_items",
    "is_builtin_name",
    "is_required",
    "lowest_versions",
    "merge_browsers",
    "partition_names",
    "supported_node_versions",
    "unsatisfied_environments",
]
