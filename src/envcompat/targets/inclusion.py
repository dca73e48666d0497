"""
Inclusion filter.

Combines measured support with the default-include, include and exclude
name sets to produce the final ordered list of transforms or polyfills.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from envcompat.targets.requirement import is_required

BUILTIN_NAME_PATTERN = re.compile(r"^(es\d+|web)\.")


@dataclass(frozen=True)
class NamePartition:
    """
    Include or exclude names split by kind.

    Attributes:
        all: Every name, in the given order.
        plugins: Syntax/module transform names.
        built_ins: Polyfill names ("es6.map", "web.timers", ...).
    """

    all: tuple[str, ...]
    plugins: tuple[str, ...]
    built_ins: tuple[str, ...]


def is_builtin_name(name: str) -> bool:
    """Whether a name follows the polyfill naming pattern."""
    return BUILTIN_NAME_PATTERN.match(name) is not None


def partition_names(names: Iterable[str]) -> NamePartition:
    """Split names into plugin-style and built-in-style names."""
    names = tuple(names)
    return NamePartition(
        all=names,
        plugins=tuple(name for name in names if not is_builtin_name(name)),
        built_ins=tuple(name for name in names if is_builtin_name(name)),
    )


def keep_item(
    name: str,
    matrix: Mapping[str, Mapping[str, str]],
    targets: Mapping[str, object],
    default_includes: Sequence[str],
    exclude: Sequence[str],
) -> bool:
    """
    Whether a single name survives the filter.

    Default includes are kept unless excluded. Other names are kept when
    the targets require them and they are not excluded.
    """
    not_excluded = name not in exclude
    if name in default_includes:
        return not_excluded
    return is_required(targets, matrix.get(name, {})) and not_excluded


def filter_items(
    names: Iterable[str],
    matrix: Mapping[str, Mapping[str, str]],
    targets: Mapping[str, object],
    default_includes: Sequence[str] = (),
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> list[str]:
    """
    Produce the final ordered feature list.

    Names are filtered in the given (canonical) order, then explicit
    includes are appended in their given order. Includes bypass both the
    support check and the exclude list and are not de-duplicated.

    Args:
        names: Candidate names in canonical order.
        matrix: Compiled matrix for the candidates.
        targets: Resolved targets.
        default_includes: Names kept regardless of support.
        include: Names appended unconditionally.
        exclude: Names dropped from the filtered pass.

    Returns:
        Ordered list of selected names.
    """
    selected = [
        name
        for name in names
        if keep_item(name, matrix, targets, default_includes, exclude)
    ]
    selected.extend(include)
    return selected
